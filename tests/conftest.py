from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.tasks import TaskRunner
from app.main import app
from app.modules.chat.memory import InMemoryConversationStateStore
from app.modules.safety.escalation import EscalationOrchestrator
from app.shared.deps import Services, get_services
from tests.fakes import (
    FakeChatModel,
    FakeNotifier,
    FakeSpeech,
    FakeStore,
    FixedClock,
    SequentialIds,
)


@pytest.fixture
def task_failures() -> list[tuple[str, BaseException]]:
    return []


@pytest.fixture
def task_runner(task_failures: list[tuple[str, BaseException]]) -> TaskRunner:
    # Collect detached failures instead of logging them so tests can assert on them
    return TaskRunner(error_sink=lambda name, exc: task_failures.append((name, exc)))


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def orchestrator(
    notifier: FakeNotifier, task_runner: TaskRunner, clock: FixedClock, store: FakeStore
) -> EscalationOrchestrator:
    return EscalationOrchestrator(
        notifier=notifier,
        task_runner=task_runner,
        clock=clock,
        id_generator=SequentialIds(),
        store=store,
        report_recipient="care@example.com",
    )


@pytest.fixture
def services(
    notifier: FakeNotifier,
    speech: FakeSpeech,
    chat_model: FakeChatModel,
    store: FakeStore,
    task_runner: TaskRunner,
    orchestrator: EscalationOrchestrator,
    clock: FixedClock,
) -> Services:
    return Services(
        notifier=notifier,
        speech=speech,
        chat_model=chat_model,
        store=store,
        conversations=InMemoryConversationStateStore(),
        tasks=task_runner,
        orchestrator=orchestrator,
        clock=clock,
        voice_model="test-voice",
        chat_model_name="test-chat",
    )


@pytest.fixture
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with every collaborator replaced by a fake."""
    app.dependency_overrides[get_services] = lambda: services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await services.tasks.drain()
    app.dependency_overrides.clear()
