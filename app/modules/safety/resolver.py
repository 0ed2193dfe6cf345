from app.modules.safety.models import SafetyAlert


def _union(first: tuple[str, ...], second: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys((*first, *second)))


def resolve_alerts(
    text_alert: SafetyAlert | None, vitals_alert: SafetyAlert | None
) -> SafetyAlert:
    """
    Merge a text-derived and a vitals-derived alert for the same request.

    The more severe alert wins outright. On a tie the detections and actions
    of both are unioned, text first, and the caregiver flags are OR-ed.
    """
    if text_alert is None and vitals_alert is None:
        return SafetyAlert.normal()
    if vitals_alert is None:
        return text_alert
    if text_alert is None:
        return vitals_alert

    if text_alert.level > vitals_alert.level:
        return text_alert
    if vitals_alert.level > text_alert.level:
        return vitals_alert
    if text_alert.is_normal:
        return text_alert

    return SafetyAlert(
        level=text_alert.level,
        detected=_union(text_alert.detected, vitals_alert.detected),
        message=text_alert.message or vitals_alert.message,
        actions=_union(text_alert.actions, vitals_alert.actions),
        caregiver_alert=text_alert.caregiver_alert or vitals_alert.caregiver_alert,
    )
