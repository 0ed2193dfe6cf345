from app.modules.safety import constants
from app.modules.safety.models import SafetyAlert, VitalsSample


def summarize_vitals(vitals: VitalsSample | None) -> str:
    if vitals is None:
        return "No vitals data provided."

    parts: list[str] = []
    if isinstance(vitals.heart_rate, (int, float)):
        parts.append(f"Heart rate: {vitals.heart_rate:g} bpm")
    if vitals.fall_detected:
        parts.append("Fall sensor triggered")
    if vitals.location is not None:
        parts.append(
            f"Location: ({vitals.location.lat:.4f}, {vitals.location.lng:.4f})"
        )
    parts.append(f"Timestamp: {vitals.timestamp or 'not recorded'}")
    return constants.REPORT_FIELD_SEPARATOR.join(parts)


def context_snippet(context: str | None) -> str:
    if not context:
        return "No transcript available."
    limit = constants.REPORT_CONTEXT_LIMIT
    if len(context) > limit:
        return f"{context[: limit - 3]}…"
    return context


def report_subject(subject_id: str) -> str:
    return f"Emergency alert for {subject_id}"


def build_incident_report(
    subject_id: str,
    alert: SafetyAlert,
    vitals: VitalsSample | None = None,
    context: str | None = None,
) -> str:
    """Human-readable incident report sent to the care circle for emergencies."""
    reasons = ", ".join(alert.detected) if alert.detected else "unspecified concern"
    actions = ", ".join(alert.actions) or "standard emergency protocol"
    return "\n".join(
        [
            report_subject(subject_id),
            "",
            f"Level: {alert.level.value.upper()}",
            f"Reasons: {reasons}",
            f"Recommended actions: {actions}",
            "",
            "Recent words:",
            context_snippet(context),
            "",
            "Vitals summary:",
            summarize_vitals(vitals),
            "",
            "This message was generated automatically to keep the care circle informed.",
        ]
    )
