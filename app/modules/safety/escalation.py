from __future__ import annotations

from typing import Any

import structlog

from app.core.clock import AlertIdGenerator, Clock, IdGenerator, SystemClock
from app.core.db import Store
from app.core.notifier import Notifier, ReportPayload
from app.core.tasks import TaskRunner
from app.modules.safety import constants
from app.modules.safety.models import (
    EscalationOutcome,
    SafetyAlert,
    SafetyEventRecord,
    SeverityLevel,
    VitalsSample,
)
from app.modules.safety.report import build_incident_report, report_subject

log = structlog.get_logger()


class EscalationOrchestrator:
    """
    Decide which care-circle side effects an alert needs and run them in isolation.

    - concern: one ``safety_concern`` event.
    - urgent / emergency: one ``emergency_alert`` event.
    - emergency: additionally a detailed incident report, spawned detached after
      the primary attempt and never awaited by the caller.

    The alert id is generated locally before any I/O, so a caller always gets one
    back. Collaborator failures are logged and absorbed; only an inconsistent
    alert (a bug upstream) makes ``escalate`` raise.
    """

    def __init__(
        self,
        notifier: Notifier,
        task_runner: TaskRunner,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        store: Store | None = None,
        report_recipient: str = "",
    ) -> None:
        self._notifier = notifier
        self._tasks = task_runner
        self._clock = clock or SystemClock()
        self._ids = id_generator or AlertIdGenerator()
        self._store = store
        self._report_recipient = report_recipient

    async def escalate(
        self,
        subject_id: str,
        alert: SafetyAlert,
        vitals: VitalsSample | None = None,
        context: str | None = None,
        source: str = "safety",
    ) -> EscalationOutcome:
        alert.ensure_consistent()
        alert_id = self._ids.new_id()

        if alert.is_normal:
            return EscalationOutcome(notified=False, alert_id=alert_id, email_queued=False)

        timestamp = self._clock.now()
        bound = log.bind(subject_id=subject_id, alert_id=alert_id, level=alert.level.value)

        if alert.level == SeverityLevel.CONCERN:
            notified = await self._send_event(
                constants.EVENT_SAFETY_CONCERN,
                {
                    "userId": subject_id,
                    "detected": list(alert.detected),
                    "level": alert.level.value,
                    "caregiverAlert": alert.caregiver_alert,
                    "actions": list(alert.actions),
                    "timestamp": timestamp,
                    "source": source,
                },
                bound,
            )
            self._record(subject_id, alert_id, alert, timestamp, source, notified)
            return EscalationOutcome(notified=notified, alert_id=alert_id, email_queued=False)

        notified = await self._send_event(
            constants.EVENT_EMERGENCY_ALERT,
            {
                "userId": subject_id,
                "alertId": alert_id,
                "level": alert.level.value,
                "detected": list(alert.detected),
                "vitals": vitals.model_dump(by_alias=True, mode="json") if vitals else None,
                "context": context,
                "location": (
                    vitals.location.model_dump(mode="json")
                    if vitals and vitals.location
                    else None
                ),
                "timestamp": timestamp,
                "source": source,
            },
            bound,
        )
        bound.warning(
            "safety_escalated",
            detected=list(alert.detected),
            actions=list(alert.actions),
            notified=notified,
        )

        email_queued = False
        if alert.level == SeverityLevel.EMERGENCY:
            if not self._report_recipient:
                bound.warning("report_recipient_missing")
            report = ReportPayload(
                recipient=self._report_recipient,
                subject=report_subject(subject_id),
                body=build_incident_report(subject_id, alert, vitals, context),
                timestamp=timestamp,
            )
            self._tasks.spawn(
                self._send_report(report), name=f"emergency_report:{alert_id}"
            )
            email_queued = True

        self._record(subject_id, alert_id, alert, timestamp, source, notified)
        return EscalationOutcome(
            notified=notified, alert_id=alert_id, email_queued=email_queued
        )

    async def _send_event(
        self, event_tag: str, payload: dict[str, Any], bound: Any
    ) -> bool:
        try:
            return bool(await self._notifier.send_event(event_tag, payload))
        except Exception as exc:
            bound.error("notification_failed", event_tag=event_tag, error=str(exc))
            return False

    async def _send_report(self, report: ReportPayload) -> None:
        # Failures propagate to the task runner's error sink.
        await self._notifier.send_report(constants.EVENT_EMERGENCY_REPORT, report)

    def _record(
        self,
        subject_id: str,
        alert_id: str,
        alert: SafetyAlert,
        timestamp: str,
        source: str,
        notified: bool,
    ) -> None:
        if self._store is None:
            return
        record = SafetyEventRecord(
            user_id=subject_id,
            alert_id=alert_id,
            level=alert.level,
            detected=list(alert.detected),
            actions=list(alert.actions),
            caregiver_alert=alert.caregiver_alert,
            notified=notified,
            source=source,
            timestamp=timestamp,
        )
        self._tasks.spawn(
            self._store.append(record),
            name=f"safety_event_record:{alert_id}",
        )
