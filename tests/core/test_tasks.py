import asyncio

import pytest

from app.core.tasks import TaskRunner


async def _ok(results: list, value: str) -> None:
    await asyncio.sleep(0)
    results.append(value)


async def _boom() -> None:
    raise RuntimeError("report failed")


@pytest.mark.asyncio
async def test_spawned_work_runs_after_caller_returns() -> None:
    runner = TaskRunner(error_sink=lambda name, exc: None)
    results: list[str] = []

    runner.spawn(_ok(results, "a"), name="first")

    assert results == []
    assert runner.pending == 1
    await runner.drain()
    assert results == ["a"]
    assert runner.pending == 0


@pytest.mark.asyncio
async def test_failures_reach_the_error_sink() -> None:
    failures: list[tuple[str, BaseException]] = []
    runner = TaskRunner(error_sink=lambda name, exc: failures.append((name, exc)))

    runner.spawn(_boom(), name="emergency_report:alert_9")
    await runner.drain()

    assert len(failures) == 1
    name, exc = failures[0]
    assert name == "emergency_report:alert_9"
    assert isinstance(exc, RuntimeError)


@pytest.mark.asyncio
async def test_one_failure_does_not_affect_siblings() -> None:
    failures: list = []
    runner = TaskRunner(error_sink=lambda name, exc: failures.append(name))
    results: list[str] = []

    runner.spawn(_boom(), name="bad")
    runner.spawn(_ok(results, "good"), name="good")
    await runner.drain()

    assert results == ["good"]
    assert failures == ["bad"]


@pytest.mark.asyncio
async def test_drain_waits_for_tasks_spawned_by_tasks() -> None:
    runner = TaskRunner(error_sink=lambda name, exc: None)
    results: list[str] = []

    async def parent() -> None:
        runner.spawn(_ok(results, "child"), name="child")

    runner.spawn(parent(), name="parent")
    await runner.drain()

    assert results == ["child"]


@pytest.mark.asyncio
async def test_cancel_all_skips_the_error_sink() -> None:
    failures: list = []
    runner = TaskRunner(error_sink=lambda name, exc: failures.append(name))

    runner.spawn(asyncio.sleep(60), name="slow")
    await runner.cancel_all()

    assert runner.pending == 0
    assert failures == []
