import pytest

from app.core.tasks import TaskRunner
from app.modules.chat.models import ChatMessageRecord
from app.modules.chat.persona import EMPATHETIC_RESPONSES
from app.modules.chat.service import ChatService, get_chat_service
from app.modules.safety.models import SeverityLevel
from app.modules.safety.reassurance import reassure
from app.shared.deps import Services
from tests.fakes import FakeChatModel, FakeNotifier, FakeSpeech, FakeStore


@pytest.fixture
def chat_service(services: Services) -> ChatService:
    return get_chat_service(services)


@pytest.mark.asyncio
async def test_emergency_phrase_bypasses_model(
    chat_service: ChatService,
    chat_model: FakeChatModel,
    notifier: FakeNotifier,
    store: FakeStore,
    task_runner: TaskRunner,
) -> None:
    response = await chat_service.reply("u1", "I fell down and I can't breathe")
    await task_runner.drain()

    assert chat_model.calls == []
    assert response.emergency is True
    assert response.alert.level == SeverityLevel.EMERGENCY
    assert response.alert.detected == ("i fell", "i fell down", "can't breathe")
    assert response.alert_id == "alert_1"
    assert response.data.reasoning_model == "Safety protocol"
    assert response.data.response.startswith("Safety first. I hear you need help…")
    assert response.tts_text == response.data.response
    assert notifier.event_tags == ["emergency_alert"]
    assert len(notifier.reports) == 1
    roles = [record.role for record in store.tables["chat_messages"]]
    assert roles == ["user", "companion"]


@pytest.mark.asyncio
async def test_concern_phrase_is_a_safety_check_in(
    chat_service: ChatService, chat_model: FakeChatModel, notifier: FakeNotifier
) -> None:
    response = await chat_service.reply("u1", "I feel lonely tonight")

    assert chat_model.calls == []
    assert response.emergency is False
    assert response.alert.level == SeverityLevel.CONCERN
    assert response.alert_id == "alert_1"
    assert response.data.reasoning_model == "Safety check-in"
    assert notifier.event_tags == ["safety_concern"]


@pytest.mark.asyncio
async def test_normal_message_goes_to_model(
    chat_service: ChatService, chat_model: FakeChatModel, notifier: FakeNotifier
) -> None:
    response = await chat_service.reply("u1", "Tell me about your garden")

    assert len(chat_model.calls) == 1
    call = chat_model.calls[0]
    assert call["user_input"] == "Tell me about your garden"
    assert call["first_turn"] is True
    assert call["history"] == []
    assert response.emergency is False
    assert response.alert.is_normal
    assert response.alert_id is None
    assert response.tts_text == "That sounds lovely… tell me more."
    assert response.data.reasoning_model == "test-chat"
    assert response.data.voice_model == "test-voice"
    assert response.audio_url.startswith("data:audio/mpeg")
    assert notifier.events == []


@pytest.mark.asyncio
async def test_second_turn_sends_history_and_is_not_first(
    chat_service: ChatService, chat_model: FakeChatModel, task_runner: TaskRunner
) -> None:
    await chat_service.reply("u1", "Good morning")
    await task_runner.drain()
    await chat_service.reply("u1", "What should I cook?")

    second = chat_model.calls[1]
    assert second["first_turn"] is False
    assert [(turn.role, turn.text) for turn in second["history"]] == [
        ("user", "Good morning"),
        ("companion", "That sounds lovely… tell me more."),
    ]


@pytest.mark.asyncio
async def test_avoid_topics_reach_the_model(
    chat_service: ChatService, chat_model: FakeChatModel
) -> None:
    await chat_service.reply("u1", "Please don't talk about hospitals.")

    assert chat_model.calls[0]["avoid_topics"] == ["hospitals"]


@pytest.mark.asyncio
async def test_model_failure_falls_back_to_scripted_reply(services: Services) -> None:
    services.chat_model = FakeChatModel(fail=True)
    chat_service = get_chat_service(services)

    response = await chat_service.reply("u1", "I miss my sister")

    assert response.data.reasoning_model == "scripted"
    assert response.tts_text in EMPATHETIC_RESPONSES["lonely"]


@pytest.mark.asyncio
async def test_tts_failure_returns_text_without_audio(services: Services) -> None:
    services.speech = FakeSpeech(fail=True)
    chat_service = get_chat_service(services)

    response = await chat_service.reply("u1", "Tell me a story")

    assert response.audio_url is None
    assert response.tts_text


@pytest.mark.asyncio
async def test_empathize_normal(chat_service: ChatService, notifier: FakeNotifier) -> None:
    response = await chat_service.empathize("u1", "I feel so alone")

    assert response.alert.is_normal
    assert response.alert_id is None
    assert response.data.emotion == "lonely"
    assert response.data.response in EMPATHETIC_RESPONSES["lonely"]
    assert notifier.events == []


@pytest.mark.asyncio
async def test_empathize_emergency(chat_service: ChatService, notifier: FakeNotifier) -> None:
    response = await chat_service.empathize("u1", "help me please")

    assert response.emergency is True
    assert response.data.emotion == "emergency"
    assert response.data.response == reassure(SeverityLevel.EMERGENCY)
    assert response.alert_id == "alert_1"
    assert notifier.event_tags == ["emergency_alert"]


@pytest.mark.asyncio
async def test_empathize_concern(chat_service: ChatService, notifier: FakeNotifier) -> None:
    response = await chat_service.empathize("u1", "I am feeling tired")

    assert response.emergency is False
    assert response.alert.level == SeverityLevel.CONCERN
    assert response.alert_id == "alert_1"
    assert response.data.emotion == "calm"
    assert notifier.event_tags == ["safety_concern"]


@pytest.mark.asyncio
async def test_history_skips_empty_rows(chat_service: ChatService, store: FakeStore) -> None:
    store.tables["chat_messages"] = [
        ChatMessageRecord(user_id="u1", role="user", text="hello", timestamp="t1"),
        ChatMessageRecord(user_id="u1", role="companion", text="hi there", timestamp="t2"),
        ChatMessageRecord(user_id="u1", role="user", text="", timestamp="t3"),
        ChatMessageRecord(user_id="u2", role="user", text="someone else", timestamp="t4"),
    ]

    items = await chat_service.history("u1", 10)

    assert [(item.role, item.text, item.timestamp) for item in items] == [
        ("user", "hello", "t1"),
        ("companion", "hi there", "t2"),
    ]

