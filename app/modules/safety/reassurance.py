from app.modules.safety.models import SeverityLevel

REASSURANCE_MESSAGES: dict[SeverityLevel, str] = {
    SeverityLevel.EMERGENCY: (
        "I'm here with you... help is on the way. You're not alone. "
        "Just breathe slowly with me... in and out... you're doing great."
    ),
    SeverityLevel.URGENT: (
        "It's okay... let's take this slowly. I've let your care circle know. "
        "Just focus on resting for now... everything will be alright."
    ),
    SeverityLevel.CONCERN: (
        "I hear you... it's okay to not feel your best. I'm here with you. "
        "Would talking help right now?"
    ),
    SeverityLevel.NORMAL: "I'm here with you... everything is okay.",
}


def reassure(level: SeverityLevel) -> str:
    """Calming spoken line for an alert level."""
    return REASSURANCE_MESSAGES[SeverityLevel(level)]
