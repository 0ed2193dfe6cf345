from pydantic import Field

from app.modules.safety.checkin import TimeOfDay
from app.modules.safety.models import Location, SafetyAlert, VitalsSample
from app.shared.schemas import CamelModel


class VitalsCheckRequest(CamelModel):
    """Vitals pushed by a watch or phone."""

    user_id: str = Field(min_length=1)
    vitals: VitalsSample


class ManualEmergencyRequest(CamelModel):
    """Emergency button pressed by the user."""

    user_id: str = Field(min_length=1)
    type: str | None = Field(None, description="What the user reported, e.g. 'fall'")
    location: Location | None = None


class SafetyAssessRequest(CamelModel):
    """Free text and vitals captured together; both are classified and resolved into one alert."""

    user_id: str = Field(min_length=1)
    text: str | None = None
    vitals: VitalsSample | None = None


class SafetyResponse(CamelModel):
    success: bool = True
    alert: SafetyAlert
    alert_id: str | None = None
    notified: bool | None = None
    email_queued: bool | None = None
    message: str | None = None
    tts_text: str | None = None
    audio_url: str | None = None
    timestamp: str


class CheckInQuestionsResponse(CamelModel):
    time_of_day: TimeOfDay
    questions: list[str]
