from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from app.modules.safety import constants
from app.modules.safety.models import SafetyAlert, SeverityLevel


@dataclass(frozen=True)
class PhraseMatch:
    level: SeverityLevel
    detected: list[str] = field(default_factory=list)


def _scan(text: str, phrases: Sequence[str]) -> list[str]:
    return [phrase for phrase in phrases if phrase in text]


def match_phrases(
    text: str,
    emergency_phrases: Sequence[str] = constants.EMERGENCY_PHRASES,
    concern_phrases: Sequence[str] = constants.CONCERN_PHRASES,
) -> PhraseMatch:
    """
    Case-insensitive substring scan of ``text``.

    Every emergency phrase is checked first; concern phrases are only scanned
    when no emergency phrase matched. Matching is containment, not word
    boundaries, so "911" also fires inside a longer number.
    """
    lowered = text.lower()

    emergency_hits = _scan(lowered, emergency_phrases)
    if emergency_hits:
        return PhraseMatch(level=SeverityLevel.EMERGENCY, detected=emergency_hits)

    concern_hits = _scan(lowered, concern_phrases)
    if concern_hits:
        return PhraseMatch(level=SeverityLevel.CONCERN, detected=concern_hits)

    return PhraseMatch(level=SeverityLevel.NORMAL)


def detect_text_alert(text: str) -> SafetyAlert:
    """Classify free text into a full SafetyAlert."""
    match = match_phrases(text)
    if match.level == SeverityLevel.EMERGENCY:
        return SafetyAlert(
            level=SeverityLevel.EMERGENCY,
            detected=tuple(match.detected),
            message=constants.EMERGENCY_PHRASE_MESSAGE,
            actions=(
                constants.ALERT_CAREGIVER,
                constants.EMERGENCY_PROTOCOL,
                constants.LOCATION_SHARE,
            ),
            caregiver_alert=True,
        )
    if match.level == SeverityLevel.CONCERN:
        return SafetyAlert(
            level=SeverityLevel.CONCERN,
            detected=tuple(match.detected),
            message=constants.CONCERN_PHRASE_MESSAGE,
            actions=(constants.OFFER_SUPPORT, constants.SUGGEST_CONTACT),
            caregiver_alert=False,
        )
    return SafetyAlert.normal()
