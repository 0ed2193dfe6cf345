from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator, model_validator

from app.core.db import StoredRecord
from app.shared.schemas import CamelModel, FrozenCamelModel


class AlertInvariantError(ValueError):
    """A SafetyAlert was built in a state the classifiers never produce."""


class SeverityLevel(str, Enum):
    """Alert severity, totally ordered: normal < concern < urgent < emergency."""

    NORMAL = "normal"
    CONCERN = "concern"
    URGENT = "urgent"
    EMERGENCY = "emergency"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def notifies_caregiver(self) -> bool:
        return self.rank >= _SEVERITY_RANK[SeverityLevel.URGENT]

    # str comparison would order alphabetically, so compare by rank.
    @staticmethod
    def _coerce(other: object) -> "SeverityLevel | None":
        if isinstance(other, SeverityLevel):
            return other
        if isinstance(other, str):
            return SeverityLevel(other)
        return None

    def __lt__(self, other: object) -> bool:
        level = self._coerce(other)
        if level is None:
            return NotImplemented
        return self.rank < level.rank

    def __le__(self, other: object) -> bool:
        level = self._coerce(other)
        if level is None:
            return NotImplemented
        return self.rank <= level.rank

    def __gt__(self, other: object) -> bool:
        level = self._coerce(other)
        if level is None:
            return NotImplemented
        return self.rank > level.rank

    def __ge__(self, other: object) -> bool:
        level = self._coerce(other)
        if level is None:
            return NotImplemented
        return self.rank >= level.rank


_SEVERITY_RANK: dict[SeverityLevel, int] = {
    SeverityLevel.NORMAL: 0,
    SeverityLevel.CONCERN: 1,
    SeverityLevel.URGENT: 2,
    SeverityLevel.EMERGENCY: 3,
}


class SafetyAlert(FrozenCamelModel):
    """Result of classifying one utterance and/or vitals sample."""

    level: SeverityLevel
    detected: tuple[str, ...] = ()
    message: str = ""
    actions: tuple[str, ...] = ()
    caregiver_alert: bool = False

    @field_validator("actions", mode="after")
    @classmethod
    def _dedupe_actions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _check_invariants(self) -> "SafetyAlert":
        self.ensure_consistent()
        return self

    @classmethod
    def normal(cls) -> "SafetyAlert":
        return cls(level=SeverityLevel.NORMAL)

    @property
    def is_normal(self) -> bool:
        return self.level == SeverityLevel.NORMAL

    def ensure_consistent(self) -> None:
        if self.level == SeverityLevel.NORMAL:
            if self.detected or self.actions:
                raise AlertInvariantError("normal alert must not carry detections or actions")
            if self.caregiver_alert:
                raise AlertInvariantError("normal alert must not notify the caregiver")
            return
        if not self.detected:
            raise AlertInvariantError(f"{self.level.value} alert has no detected triggers")
        if self.level.notifies_caregiver != self.caregiver_alert:
            raise AlertInvariantError(
                f"{self.level.value} alert has caregiver_alert={self.caregiver_alert}"
            )


class Location(CamelModel):
    lat: float
    lng: float


class VitalsSample(CamelModel):
    """Vitals reading from a watch or phone; every field is optional."""

    heart_rate: float | None = None
    fall_detected: bool | None = None
    location: Location | None = None
    timestamp: str | None = None


class EscalationOutcome(FrozenCamelModel):
    notified: bool = False
    alert_id: str = Field(min_length=1)
    email_queued: bool = False


class SafetyEventRecord(StoredRecord):
    """One escalated alert, kept for the care-circle audit trail."""

    alert_id: str
    level: SeverityLevel
    detected: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    caregiver_alert: bool = False
    notified: bool = False
    source: str

    class Settings:
        name = "safety_events"
