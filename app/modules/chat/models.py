from app.core.db import StoredRecord
from app.modules.chat.memory import Emotion
from app.modules.chat.schemas import ChatRole


class ChatMessageRecord(StoredRecord):
    role: ChatRole
    text: str
    emotion: Emotion | None = None

    class Settings:
        name = "chat_messages"
