"""Chat replies from the Gemini REST API."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence

import httpx
import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

PERSONA_INSTRUCTION = (
    "You are a gentle, patient companion for elderly users. "
    "You speak slowly, in short, simple sentences. "
    "You avoid technical language. "
    "You respond with warmth, reassurance, and clear, kind suggestions."
)
FIRST_TURN_INSTRUCTION = (
    " This is the first conversation today. Gently check if they have taken their pills, "
    "eaten, and had some water, then respond warmly."
)
MAX_PROMPT_AVOID_TOPICS = 6

_TOPIC_STRIP = re.compile(r"[^a-z0-9\s'-]", re.IGNORECASE)


class ChatModelError(Exception):
    pass


@dataclass(frozen=True)
class ChatTurn:
    role: Literal["user", "companion"]
    text: str


class ChatModel(Protocol):
    async def reply(
        self,
        user_input: str,
        history: Sequence[ChatTurn] = (),
        first_turn: bool = False,
        avoid_topics: Sequence[str] = (),
    ) -> str: ...


def build_system_instruction(first_turn: bool, avoid_topics: Sequence[str]) -> str:
    cleaned = [_TOPIC_STRIP.sub("", topic).strip().lower() for topic in avoid_topics]
    cleaned = [topic for topic in cleaned if len(topic) > 1]

    instruction = PERSONA_INSTRUCTION
    if cleaned:
        instruction += (
            " Avoid bringing up these sensitive topics unless the user specifically asks: "
            f"{', '.join(cleaned[-MAX_PROMPT_AVOID_TOPICS:])}. "
            "If they mention them, acknowledge gently and steer toward safer ground."
        )
    if first_turn:
        instruction += FIRST_TURN_INSTRUCTION
    return instruction


class GeminiChatClient:
    def __init__(
        self,
        api_key: str | None,
        model: str = settings.GEMINI_CHAT_MODEL,
        client: httpx.AsyncClient | None = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._client = client
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    async def reply(
        self,
        user_input: str,
        history: Sequence[ChatTurn] = (),
        first_turn: bool = False,
        avoid_topics: Sequence[str] = (),
    ) -> str:
        if not self._api_key:
            raise ChatModelError("GEMINI_API_KEY is missing; cannot generate a chat reply")

        contents: list[dict[str, Any]] = [
            {
                "role": "user" if turn.role == "user" else "model",
                "parts": [{"text": turn.text}],
            }
            for turn in history
            if turn.text.strip()
        ]
        contents.append({"role": "user", "parts": [{"text": user_input}]})

        body = {
            "systemInstruction": {
                "role": "system",
                "parts": [{"text": build_system_instruction(first_turn, avoid_topics)}],
            },
            "contents": contents,
            "generationConfig": {"temperature": 0.6, "maxOutputTokens": 220, "topP": 0.9},
        }
        url = GEMINI_ENDPOINT.format(model=self._model)

        try:
            if self._client is not None:
                response = await self._client.post(
                    url, params={"key": self._api_key}, json=body, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as exc:
            raise ChatModelError(f"chat model unreachable: {exc}") from exc

        if response.is_error:
            raise ChatModelError(f"chat model returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ChatModelError("chat model returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise ChatModelError("chat model returned an unexpected payload")

        text = _first_candidate_text(payload)
        if not text:
            raise ChatModelError("empty response from chat model")
        return text


def _first_candidate_text(payload: dict[str, Any]) -> str:
    for candidate in payload.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        text = "".join(
            part.get("text") or "" for part in parts or [] if isinstance(part, dict)
        ).strip()
        if text:
            return text
    return ""
