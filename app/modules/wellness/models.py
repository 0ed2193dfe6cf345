from enum import Enum
from typing import Literal

from pydantic import Field

from app.core.db import StoredRecord
from app.shared.schemas import CamelModel

NudgeType = Literal["medication", "hydration", "activity", "rest", "weather"]
NudgePriority = Literal["high", "medium", "low"]
TimeOfDay = Literal["morning", "afternoon", "evening"]
StressLevel = Literal["low", "medium", "high"]


class WellnessLogType(str, Enum):
    WATER = "water"
    MEDICATION = "medication"
    ACTIVITY = "activity"


class MedicationSchedule(CamelModel):
    id: str
    name: str
    dosage: str
    # "HH:MM", 24h
    times: list[str] = Field(default_factory=list)
    with_food: bool = False
    notes: str | None = None


class HydrationGoal(CamelModel):
    daily_glasses: int = Field(default=8, ge=0)
    current_glasses: int = Field(default=0, ge=0)
    last_drink: str | None = None


class WeatherData(CamelModel):
    temp: float  # °F
    condition: str
    humidity: float | None = None
    alerts: list[str] = Field(default_factory=list)


class WellnessNudge(CamelModel):
    type: NudgeType
    priority: NudgePriority
    message: str
    tts_message: str
    action: str | None = None


class WellnessLogRecord(StoredRecord):
    """Something the user reported doing: a glass of water, a dose, some movement."""

    type: WellnessLogType
    value: str | float | None = None

    class Settings:
        name = "wellness_log"
