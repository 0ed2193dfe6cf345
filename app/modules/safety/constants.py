"""
Fixed safety policy: trigger phrases, vitals thresholds, action and event tags.

Phrase lists are matched as lowercase substrings, so entries must stay lowercase.
"""

EMERGENCY_PHRASES: tuple[str, ...] = (
    # Direct help requests
    "i need help",
    "help me",
    "call for help",
    "get help",
    # Feeling unsafe
    "i don't feel safe",
    "i feel unsafe",
    "not safe",
    "scared",
    "afraid",
    # Medical
    "i feel dizzy",
    "i feel weak",
    "i fell",
    "i fell down",
    "chest pain",
    "cant breathe",
    "can't breathe",
    "trouble breathing",
    "heart racing",
    # Urgent situations
    "emergency",
    "911",
    "ambulance",
)

CONCERN_PHRASES: tuple[str, ...] = (
    "not feeling well",
    "feeling tired",
    "feeling confused",
    "forgot to take",
    "missed my medication",
    "feel lonely",
    "feel sad",
)

# Heart rate thresholds (bpm); strict comparisons
HEART_RATE_HIGH_BPM: float = 120
HEART_RATE_LOW_BPM: float = 50

# Detected tags produced from vitals
FALL_DETECTED = "fall_detected"
ELEVATED_HEART_RATE = "elevated_heart_rate"
LOW_HEART_RATE = "low_heart_rate"
MANUAL_TRIGGER = "manual_trigger"

# Action tags
ALERT_CAREGIVER = "alert_caregiver"
EMERGENCY_PROTOCOL = "emergency_protocol"
LOCATION_SHARE = "location_share"
CHECK_RESPONSIVE = "check_responsive"
OFFER_SUPPORT = "offer_support"
SUGGEST_CONTACT = "suggest_contact"
SUGGEST_REST = "suggest_rest"
MONITOR_VITALS = "monitor_vitals"

# Notifier event tags
EVENT_SAFETY_CONCERN = "safety_concern"
EVENT_EMERGENCY_ALERT = "emergency_alert"
EVENT_EMERGENCY_REPORT = "weekly_report_email"
EVENT_MOOD_ALERT = "mood_alert"

# Incident report
REPORT_CONTEXT_LIMIT = 280
REPORT_FIELD_SEPARATOR = " · "

# Scripted alert messages
EMERGENCY_PHRASE_MESSAGE = (
    "I hear you need help... I'm contacting your care circle right now. "
    "Stay calm, help is on the way."
)
CONCERN_PHRASE_MESSAGE = (
    "I understand you're not feeling your best... let's talk about it. "
    "Would you like me to let someone know?"
)
FALL_MESSAGE = (
    "I detected a fall... I'm getting help right now. Can you hear me? Help is coming."
)
HEART_RATE_MESSAGE = (
    "I'm noticing some unusual vitals... let's take a moment to rest. "
    "I'm letting your care circle know, just to be safe."
)
MANUAL_EMERGENCY_MESSAGE = "Help is on the way... stay calm."
