import structlog
from fastapi import Depends

from app.core.clock import Clock
from app.core.db import Store
from app.core.notifier import Notifier
from app.core.tasks import TaskRunner
from app.core.tts import SpeechSynthesizer, synthesize_or_none
from app.modules.chat.persona import check_in_message, detect_emotion, plan_mood
from app.modules.checkin.models import CheckinRecord
from app.modules.checkin.schemas import CheckinPlan, CheckinResponse
from app.modules.safety.constants import EVENT_MOOD_ALERT
from app.shared.deps import Services, get_services

log = structlog.get_logger()


class CheckinService:
    """Daily check-in: a gentle plan for the day, and a heads-up to the care circle on low days."""

    DEFAULT_SUMMARY = "Let's take the day slowly… a little movement, some rest, and maybe a chat."
    DEFAULT_NEXT_STEP = "How about a short walk after breakfast?"
    DEFAULT_TAGS = ("routine", "mobility")

    def __init__(
        self,
        notifier: Notifier,
        speech: SpeechSynthesizer,
        store: Store,
        tasks: TaskRunner,
        clock: Clock,
    ) -> None:
        self._notifier = notifier
        self._speech = speech
        self._store = store
        self._tasks = tasks
        self._clock = clock

    def build_plan(self, user_input: str | None) -> CheckinPlan:
        emotion = detect_emotion(user_input) if user_input else "calm"
        return CheckinPlan(
            summary=self.DEFAULT_SUMMARY,
            next_step=self.DEFAULT_NEXT_STEP,
            mood=plan_mood(emotion),
            tags=list(self.DEFAULT_TAGS),
        )

    async def check_in(self, user_id: str, user_input: str | None) -> CheckinResponse:
        plan = self.build_plan(user_input)
        tts_text = f"{check_in_message(plan.mood)} {plan.summary}"
        audio_url = await synthesize_or_none(self._speech, tts_text)
        timestamp = self._clock.now()

        self._tasks.spawn(
            self._store.append(
                CheckinRecord(user_id=user_id, plan=plan, timestamp=timestamp)
            ),
            name="check_in_record",
        )

        mood_alert_sent = False
        if plan.mood == "low":
            mood_alert_sent = await self._send_mood_alert(user_id, timestamp)

        return CheckinResponse(
            data=plan,
            tts_text=tts_text,
            audio_url=audio_url,
            mood_alert_sent=mood_alert_sent,
            timestamp=timestamp,
        )

    async def _send_mood_alert(self, user_id: str, timestamp: str) -> bool:
        try:
            return bool(
                await self._notifier.send_event(
                    EVENT_MOOD_ALERT,
                    {"userId": user_id, "mood": "low", "timestamp": timestamp},
                )
            )
        except Exception as exc:
            log.error("mood_alert_failed", user_id=user_id, error=str(exc))
            return False


def get_checkin_service(services: Services = Depends(get_services)) -> CheckinService:
    return CheckinService(
        notifier=services.notifier,
        speech=services.speech,
        store=services.store,
        tasks=services.tasks,
        clock=services.clock,
    )
