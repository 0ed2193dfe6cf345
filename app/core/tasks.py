"""
Detached background work.

Work spawned here runs without the caller awaiting it. Each task is held by a
strong reference until it finishes, and any exception it raises is handed to an
error sink instead of surfacing on the request path.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Protocol

import sentry_sdk
import structlog

logger = structlog.get_logger(__name__)


class ErrorSink(Protocol):
    def __call__(self, task_name: str, exc: BaseException) -> None: ...


def log_task_failure(task_name: str, exc: BaseException) -> None:
    logger.error("detached_task_failed", task=task_name, error=str(exc), exc_info=exc)
    sentry_sdk.capture_exception(exc)


class TaskRunner:
    def __init__(self, error_sink: ErrorSink = log_task_failure) -> None:
        self._error_sink = error_sink
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.info("detached_task_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            self._error_sink(task.get_name(), exc)

    async def drain(self) -> None:
        """Wait for every in-flight task; failures still go to the sink."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
