from __future__ import annotations

from dataclasses import replace
import structlog
from fastapi import Depends

from app.core.clock import Clock
from app.core.db import Store
from app.core.llm import ChatModel, ChatModelError, ChatTurn
from app.core.tasks import TaskRunner
from app.core.tts import SpeechSynthesizer, synthesize_or_none
from app.modules.chat.memory import ConversationStateStore, Emotion
from app.modules.chat.models import ChatMessageRecord
from app.modules.chat.persona import detect_emotion, empathetic_response, format_for_tts
from app.modules.chat.schemas import (
    ChatboxResponse,
    ChatHistoryItem,
    ChatReplyData,
    ChatRole,
    EmpathyData,
    EmpathyResponse,
)
from app.modules.chat.topics import extract_discomfort_topics
from app.modules.safety.escalation import EscalationOrchestrator
from app.modules.safety.matcher import detect_text_alert
from app.modules.safety.reassurance import reassure
from app.shared.deps import Services, get_services

log = structlog.get_logger()

HISTORY_LIMIT = 20
AVOID_TOPICS_LIMIT = 8


class ChatService:
    """Chatbox and empathy replies. Safety detection always runs before any model call."""

    def __init__(
        self,
        orchestrator: EscalationOrchestrator,
        chat_model: ChatModel,
        speech: SpeechSynthesizer,
        store: Store,
        conversations: ConversationStateStore,
        tasks: TaskRunner,
        clock: Clock,
        voice_model: str,
        chat_model_name: str,
    ) -> None:
        self._orchestrator = orchestrator
        self._chat_model = chat_model
        self._speech = speech
        self._store = store
        self._conversations = conversations
        self._tasks = tasks
        self._clock = clock
        self._voice_model = voice_model
        self._chat_model_name = chat_model_name

    async def reply(self, user_id: str, text: str) -> ChatboxResponse:
        state = self._conversations.get(user_id)
        first_turn = not state.reminder_asked
        state = replace(
            state, reminder_asked=True, last_emotion=detect_emotion(text)
        ).with_topics(extract_discomfort_topics(text))
        self._conversations.save(user_id, state)

        alert = detect_text_alert(text)
        if not alert.is_normal:
            self._persist(user_id, "user", text)
            outcome = await self._orchestrator.escalate(
                user_id, alert, context=text, source="chatbox"
            )
            is_emergency = alert.level.notifies_caregiver
            response_text = format_for_tts(
                f"Safety first. {alert.message or reassure(alert.level)}".strip()
            )
            audio_url = await synthesize_or_none(self._speech, response_text)
            self._persist(user_id, "companion", response_text)
            return ChatboxResponse(
                emergency=is_emergency,
                alert=alert,
                alert_id=outcome.alert_id,
                data=ChatReplyData(
                    first_turn=first_turn,
                    response=response_text,
                    reasoning_model="Safety protocol" if is_emergency else "Safety check-in",
                    voice_model=self._voice_model,
                ),
                tts_text=response_text,
                audio_url=audio_url,
                timestamp=self._clock.now(),
            )

        # Read history before recording this turn so it is not sent to the model twice.
        history = await self.history(user_id, HISTORY_LIMIT)
        self._persist(user_id, "user", text, state.last_emotion)

        reasoning_model = self._chat_model_name
        try:
            reply_text = await self._chat_model.reply(
                text,
                history=[ChatTurn(role=item.role, text=item.text) for item in history],
                first_turn=first_turn,
                avoid_topics=state.recent_topics(AVOID_TOPICS_LIMIT),
            )
        except ChatModelError as exc:
            log.warning("chat_model_unavailable", user_id=user_id, error=str(exc))
            reply_text = empathetic_response(state.last_emotion or "calm")
            reasoning_model = "scripted"

        tts_text = format_for_tts(reply_text)
        audio_url = await synthesize_or_none(self._speech, tts_text)
        self._persist(user_id, "companion", tts_text)
        return ChatboxResponse(
            alert=alert,
            data=ChatReplyData(
                first_turn=first_turn,
                reasoning_model=reasoning_model,
                voice_model=self._voice_model,
            ),
            tts_text=tts_text,
            audio_url=audio_url,
            timestamp=self._clock.now(),
        )

    async def empathize(self, user_id: str, text: str) -> EmpathyResponse:
        alert = detect_text_alert(text)
        alert_id: str | None = None
        if not alert.is_normal:
            outcome = await self._orchestrator.escalate(
                user_id, alert, context=text, source="empathy"
            )
            alert_id = outcome.alert_id

        if alert.level.notifies_caregiver:
            emotion = "emergency"
            response = reassure(alert.level)
        else:
            emotion = detect_emotion(text)
            response = empathetic_response(emotion)

        audio_url = await synthesize_or_none(self._speech, response)
        return EmpathyResponse(
            emergency=alert.level.notifies_caregiver,
            alert=alert,
            alert_id=alert_id,
            data=EmpathyData(emotion=emotion, response=response),
            tts_text=response,
            audio_url=audio_url,
            timestamp=self._clock.now(),
        )

    async def history(self, user_id: str, limit: int) -> list[ChatHistoryItem]:
        records = await self._store.recent(ChatMessageRecord, user_id, limit)
        return [
            ChatHistoryItem(role=record.role, text=record.text, timestamp=record.timestamp)
            for record in records
            if record.text
        ]

    def _persist(
        self, user_id: str, role: ChatRole, text: str, emotion: Emotion | None = None
    ) -> None:
        if not text:
            return
        record = ChatMessageRecord(
            user_id=user_id,
            role=role,
            text=text,
            emotion=emotion,
            timestamp=self._clock.now(),
        )
        self._tasks.spawn(self._store.append(record), name=f"chat_message:{role}")


def get_chat_service(services: Services = Depends(get_services)) -> ChatService:
    return ChatService(
        orchestrator=services.orchestrator,
        chat_model=services.chat_model,
        speech=services.speech,
        store=services.store,
        conversations=services.conversations,
        tasks=services.tasks,
        clock=services.clock,
        voice_model=services.voice_model,
        chat_model_name=services.chat_model_name,
    )
