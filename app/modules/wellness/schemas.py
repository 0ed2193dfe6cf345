from pydantic import Field

from app.modules.wellness.models import WellnessLogType, WellnessNudge
from app.shared.schemas import CamelModel


class WellnessNudgesResponse(CamelModel):
    success: bool = True
    data: list[WellnessNudge]
    timestamp: str


class WellnessLogRequest(CamelModel):
    user_id: str = Field(min_length=1)
    type: WellnessLogType
    value: str | float | None = None


class WellnessLogResponse(CamelModel):
    success: bool = True
    tts_text: str
    audio_url: str | None = None
    timestamp: str
