import pytest
from httpx import AsyncClient

from app.core.tasks import TaskRunner
from app.modules.chat.persona import CHECK_IN_MESSAGES
from app.modules.checkin.service import CheckinService, get_checkin_service
from app.shared.deps import Services
from tests.fakes import FakeNotifier, FakeStore


@pytest.fixture
def checkin_service(services: Services) -> CheckinService:
    return get_checkin_service(services)


def test_plan_mood_follows_emotion(checkin_service: CheckinService) -> None:
    assert checkin_service.build_plan("I feel lonely").mood == "low"
    assert checkin_service.build_plan("I'm a bit confused").mood == "ok"
    assert checkin_service.build_plan(None).mood == "good"
    assert checkin_service.build_plan("").tags == ["routine", "mobility"]


@pytest.mark.asyncio
async def test_low_mood_notifies_care_circle(
    checkin_service: CheckinService,
    notifier: FakeNotifier,
    store: FakeStore,
    task_runner: TaskRunner,
) -> None:
    response = await checkin_service.check_in("u1", "I'm worried about everything")
    await task_runner.drain()

    assert response.data.mood == "low"
    assert response.mood_alert_sent is True
    assert response.tts_text.startswith(CHECK_IN_MESSAGES["low"])
    assert notifier.payloads("mood_alert") == [
        {"userId": "u1", "mood": "low", "timestamp": "2024-05-01T09:30:00+00:00"}
    ]
    assert store.tables["check_ins"][0].plan.mood == "low"


@pytest.mark.asyncio
async def test_good_mood_sends_nothing(
    checkin_service: CheckinService, notifier: FakeNotifier
) -> None:
    response = await checkin_service.check_in("u1", "Lovely morning")

    assert response.data.mood == "good"
    assert response.mood_alert_sent is False
    assert notifier.events == []


@pytest.mark.asyncio
async def test_mood_alert_failure_is_absorbed(services: Services) -> None:
    services.notifier = FakeNotifier(fail_events=True)
    checkin_service = get_checkin_service(services)

    response = await checkin_service.check_in("u1", "so lonely today")

    assert response.data.mood == "low"
    assert response.mood_alert_sent is False


@pytest.mark.asyncio
async def test_checkin_endpoint(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/checkin", json={"userId": "u1", "userInput": "A bit stressed"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["data"]["mood"] == "low"
    assert data["data"]["nextStep"] == CheckinService.DEFAULT_NEXT_STEP
    assert data["moodAlertSent"] is True
