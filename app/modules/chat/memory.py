"""
Per-subject conversational state.

The state only shapes tone (first check-in of the day, topics to steer away
from). It lives in process memory, is lost on restart, and concurrent requests
for the same subject are last-write-wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Literal, Protocol

Emotion = Literal["stressed", "confused", "lonely", "calm"]


@dataclass(frozen=True)
class ConversationState:
    reminder_asked: bool = False
    avoid_topics: tuple[str, ...] = ()
    last_emotion: Emotion | None = None

    def with_topics(self, topics: Iterable[str]) -> "ConversationState":
        merged = tuple(dict.fromkeys((*self.avoid_topics, *topics)))
        return replace(self, avoid_topics=merged)

    def recent_topics(self, limit: int) -> list[str]:
        return list(self.avoid_topics[-limit:]) if limit > 0 else []


class ConversationStateStore(Protocol):
    def get(self, subject_id: str) -> ConversationState: ...

    def save(self, subject_id: str, state: ConversationState) -> None: ...


@dataclass
class InMemoryConversationStateStore:
    _states: dict[str, ConversationState] = field(default_factory=dict)

    def get(self, subject_id: str) -> ConversationState:
        return self._states.get(subject_id, ConversationState())

    def save(self, subject_id: str, state: ConversationState) -> None:
        self._states[subject_id] = state

    def clear(self) -> None:
        self._states.clear()
