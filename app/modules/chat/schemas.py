from typing import Literal

from pydantic import Field

from app.modules.safety.models import SafetyAlert
from app.shared.schemas import CamelModel

ChatRole = Literal["user", "companion"]


class ChatboxRequest(CamelModel):
    user_id: str = "anonymous"
    input: str | None = None


class ChatReplyData(CamelModel):
    first_turn: bool
    response: str | None = None
    reasoning_model: str
    voice_model: str


class ChatboxResponse(CamelModel):
    success: bool = True
    emergency: bool = False
    alert: SafetyAlert
    alert_id: str | None = None
    data: ChatReplyData
    tts_text: str
    audio_url: str | None = None
    timestamp: str


class ChatHistoryItem(CamelModel):
    role: ChatRole
    text: str
    timestamp: str | None = None


class ChatHistoryResponse(CamelModel):
    success: bool = True
    data: list[ChatHistoryItem]


class EmpathyRequest(CamelModel):
    user_id: str = "unknown"
    user_input: str = Field(min_length=1)


class EmpathyData(CamelModel):
    emotion: str
    response: str


class EmpathyResponse(CamelModel):
    success: bool = True
    emergency: bool = False
    alert: SafetyAlert
    alert_id: str | None = None
    data: EmpathyData
    tts_text: str
    audio_url: str | None = None
    timestamp: str
