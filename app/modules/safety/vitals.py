from app.modules.safety import constants
from app.modules.safety.models import SafetyAlert, SeverityLevel, VitalsSample


def heart_rate_flags(heart_rate: float | None) -> list[str]:
    # A missing or zero reading means the sensor reported nothing.
    if not heart_rate:
        return []
    flags: list[str] = []
    if heart_rate > constants.HEART_RATE_HIGH_BPM:
        flags.append(constants.ELEVATED_HEART_RATE)
    if heart_rate < constants.HEART_RATE_LOW_BPM:
        flags.append(constants.LOW_HEART_RATE)
    return flags


def classify_vitals(vitals: VitalsSample) -> SafetyAlert:
    """A fall always wins; heart rate is only inspected when no fall was reported."""
    if vitals.fall_detected:
        return SafetyAlert(
            level=SeverityLevel.EMERGENCY,
            detected=(constants.FALL_DETECTED,),
            message=constants.FALL_MESSAGE,
            actions=(
                constants.EMERGENCY_PROTOCOL,
                constants.ALERT_CAREGIVER,
                constants.LOCATION_SHARE,
                constants.CHECK_RESPONSIVE,
            ),
            caregiver_alert=True,
        )

    flags = heart_rate_flags(vitals.heart_rate)
    if flags:
        return SafetyAlert(
            level=SeverityLevel.URGENT,
            detected=tuple(flags),
            message=constants.HEART_RATE_MESSAGE,
            actions=(
                constants.ALERT_CAREGIVER,
                constants.SUGGEST_REST,
                constants.MONITOR_VITALS,
            ),
            caregiver_alert=True,
        )

    return SafetyAlert.normal()
