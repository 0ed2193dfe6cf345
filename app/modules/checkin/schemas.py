from pydantic import Field

from app.modules.chat.persona import PlanMood
from app.shared.schemas import CamelModel


class CheckinRequest(CamelModel):
    user_id: str = Field(min_length=1)
    user_input: str | None = None


class CheckinPlan(CamelModel):
    summary: str
    next_step: str
    mood: PlanMood
    tags: list[str] = Field(default_factory=list)


class CheckinResponse(CamelModel):
    success: bool = True
    data: CheckinPlan
    tts_text: str
    audio_url: str | None = None
    mood_alert_sent: bool = False
    timestamp: str
