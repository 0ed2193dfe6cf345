from fastapi import Depends

from app.core.clock import Clock
from app.core.tts import SpeechSynthesizer, synthesize_or_none
from app.modules.safety import constants
from app.modules.safety.escalation import EscalationOrchestrator
from app.modules.safety.matcher import detect_text_alert
from app.modules.safety.models import Location, SafetyAlert, SeverityLevel, VitalsSample
from app.modules.safety.reassurance import reassure
from app.modules.safety.resolver import resolve_alerts
from app.modules.safety.schemas import SafetyResponse
from app.modules.safety.vitals import classify_vitals
from app.shared.deps import Services, get_services


class SafetyService:
    """Classify incoming signals, escalate non-normal alerts, and shape the spoken reply."""

    def __init__(
        self,
        orchestrator: EscalationOrchestrator,
        speech: SpeechSynthesizer,
        clock: Clock,
    ) -> None:
        self._orchestrator = orchestrator
        self._speech = speech
        self._clock = clock

    async def check_vitals(self, user_id: str, vitals: VitalsSample) -> SafetyResponse:
        alert = classify_vitals(vitals)
        if alert.is_normal:
            return SafetyResponse(
                alert=alert,
                message="Vitals within normal range",
                timestamp=self._clock.now(),
            )
        return await self._escalate_and_reassure(user_id, alert, vitals, None, "vitals")

    async def trigger_emergency(
        self, user_id: str, kind: str | None, location: Location | None
    ) -> SafetyResponse:
        alert = SafetyAlert(
            level=SeverityLevel.EMERGENCY,
            detected=(kind or constants.MANUAL_TRIGGER,),
            message=constants.MANUAL_EMERGENCY_MESSAGE,
            actions=(
                constants.EMERGENCY_PROTOCOL,
                constants.ALERT_CAREGIVER,
                constants.LOCATION_SHARE,
            ),
            caregiver_alert=True,
        )
        vitals = VitalsSample(location=location, timestamp=self._clock.now())
        return await self._escalate_and_reassure(user_id, alert, vitals, None, "manual")

    async def assess(
        self, user_id: str, text: str | None, vitals: VitalsSample | None
    ) -> SafetyResponse:
        text_alert = detect_text_alert(text) if text else None
        vitals_alert = classify_vitals(vitals) if vitals else None
        alert = resolve_alerts(text_alert, vitals_alert)
        if alert.is_normal:
            return SafetyResponse(alert=alert, timestamp=self._clock.now())
        return await self._escalate_and_reassure(user_id, alert, vitals, text, "assess")

    async def _escalate_and_reassure(
        self,
        user_id: str,
        alert: SafetyAlert,
        vitals: VitalsSample | None,
        context: str | None,
        source: str,
    ) -> SafetyResponse:
        outcome = await self._orchestrator.escalate(
            user_id, alert, vitals=vitals, context=context, source=source
        )
        reassurance = reassure(alert.level)
        audio_url = await synthesize_or_none(self._speech, reassurance)
        return SafetyResponse(
            alert=alert,
            alert_id=outcome.alert_id,
            notified=outcome.notified,
            email_queued=outcome.email_queued,
            tts_text=reassurance,
            audio_url=audio_url,
            timestamp=self._clock.now(),
        )


def get_safety_service(services: Services = Depends(get_services)) -> SafetyService:
    return SafetyService(
        orchestrator=services.orchestrator,
        speech=services.speech,
        clock=services.clock,
    )
