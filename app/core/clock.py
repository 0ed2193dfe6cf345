import uuid
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> str: ...


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


class SystemClock:
    def now(self) -> str:
        return datetime.now(timezone.utc).isoformat()


class AlertIdGenerator:
    """Local ids only; never depends on a remote service being reachable."""

    def __init__(self, prefix: str = "alert") -> None:
        self._prefix = prefix

    def new_id(self) -> str:
        return f"{self._prefix}_{uuid.uuid4().hex}"
