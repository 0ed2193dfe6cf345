from datetime import datetime

import structlog
from fastapi import Depends

from app.core.clock import Clock
from app.core.db import Store
from app.core.tasks import TaskRunner
from app.core.tts import SpeechSynthesizer, synthesize_or_none
from app.modules.chat.persona import PlanMood, format_for_tts
from app.modules.wellness.models import (
    HydrationGoal,
    StressLevel,
    TimeOfDay,
    WellnessLogRecord,
    WellnessLogType,
)
from app.modules.wellness.rules import wellness_nudges
from app.modules.wellness.schemas import WellnessLogResponse, WellnessNudgesResponse
from app.shared.deps import Services, get_services

log = structlog.get_logger()

DAILY_WATER_GLASSES = 8
# Enough rows to cover a full day of logging.
LOG_LOOKBACK = 200

LOG_RESPONSES: dict[WellnessLogType, str] = {
    WellnessLogType.WATER: "Good job staying hydrated! You're doing great.",
    WellnessLogType.MEDICATION: "Thank you for taking your medication. Well done.",
    WellnessLogType.ACTIVITY: "Wonderful! Movement is so good for you.",
}


class WellnessService:
    """Daily wellness nudges, and a spoken thank-you for each thing the user logs."""

    def __init__(
        self,
        store: Store,
        speech: SpeechSynthesizer,
        tasks: TaskRunner,
        clock: Clock,
    ) -> None:
        self._store = store
        self._speech = speech
        self._tasks = tasks
        self._clock = clock

    async def water_today(self, user_id: str, day: str) -> int:
        records = await self._store.recent(WellnessLogRecord, user_id, LOG_LOOKBACK)
        return sum(
            1
            for record in records
            if record.type == WellnessLogType.WATER and record.timestamp[:10] == day
        )

    async def nudges(
        self,
        user_id: str,
        time_of_day: TimeOfDay,
        mood: PlanMood,
        stress: StressLevel | None = None,
    ) -> WellnessNudgesResponse:
        timestamp = self._clock.now()
        now = datetime.fromisoformat(timestamp)
        hydration = HydrationGoal(
            daily_glasses=DAILY_WATER_GLASSES,
            current_glasses=await self.water_today(user_id, now.date().isoformat()),
        )
        # No medication schedule or weather feed is wired in yet.
        nudges = wellness_nudges(
            time_of_day,
            medications=[],
            hydration=hydration,
            weather=None,
            mood=mood,
            hour=now.hour,
            stress_level=stress,
        )
        log.info("wellness_nudges_built", user_id=user_id, count=len(nudges))
        return WellnessNudgesResponse(data=nudges, timestamp=timestamp)

    async def log_activity(
        self, user_id: str, log_type: WellnessLogType, value: str | float | None
    ) -> WellnessLogResponse:
        timestamp = self._clock.now()
        self._tasks.spawn(
            self._store.append(
                WellnessLogRecord(
                    user_id=user_id, type=log_type, value=value, timestamp=timestamp
                )
            ),
            name=f"wellness_log:{log_type.value}",
        )
        tts_text = format_for_tts(LOG_RESPONSES[log_type])
        audio_url = await synthesize_or_none(self._speech, tts_text)
        return WellnessLogResponse(tts_text=tts_text, audio_url=audio_url, timestamp=timestamp)


def get_wellness_service(services: Services = Depends(get_services)) -> WellnessService:
    return WellnessService(
        store=services.store,
        speech=services.speech,
        tasks=services.tasks,
        clock=services.clock,
    )
