"""
Collaborators shared by the HTTP layer.

Everything is built once in the app lifespan and parked on ``app.state`` so
request handlers receive it through FastAPI dependencies; tests swap the whole
bundle with ``app.dependency_overrides[get_services]``.
"""

from dataclasses import dataclass

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.clock import AlertIdGenerator, Clock, SystemClock
from app.core.config import settings
from app.core.db import Store, init_db
from app.core.llm import ChatModel, GeminiChatClient
from app.core.notifier import Notifier, WebhookNotifier
from app.core.tasks import TaskRunner
from app.core.tts import ElevenLabsSpeechClient, SpeechSynthesizer
from app.modules.chat.memory import ConversationStateStore, InMemoryConversationStateStore
from app.modules.safety.escalation import EscalationOrchestrator


@dataclass
class Services:
    notifier: Notifier
    speech: SpeechSynthesizer
    chat_model: ChatModel
    store: Store
    conversations: ConversationStateStore
    tasks: TaskRunner
    orchestrator: EscalationOrchestrator
    clock: Clock
    voice_model: str = settings.ELEVENLABS_TTS_MODEL
    chat_model_name: str = settings.GEMINI_CHAT_MODEL
    mongo_client: AsyncIOMotorClient | None = None


def build_services() -> Services:
    mongo_client, store = init_db()
    notifier = WebhookNotifier(settings.CARE_CIRCLE_WEBHOOK_URL)
    tasks = TaskRunner()
    clock = SystemClock()
    orchestrator = EscalationOrchestrator(
        notifier=notifier,
        task_runner=tasks,
        clock=clock,
        id_generator=AlertIdGenerator(),
        store=store,
        report_recipient=settings.CARE_CIRCLE_EMAIL,
    )
    speech = ElevenLabsSpeechClient(settings.ELEVENLABS_API_KEY)
    chat_model = GeminiChatClient(settings.GEMINI_API_KEY)
    return Services(
        notifier=notifier,
        speech=speech,
        chat_model=chat_model,
        store=store,
        conversations=InMemoryConversationStateStore(),
        tasks=tasks,
        orchestrator=orchestrator,
        clock=clock,
        voice_model=speech.model_id,
        chat_model_name=chat_model.model,
        mongo_client=mongo_client,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services

