from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.modules.chat.persona import PlanMood
from app.modules.wellness.models import StressLevel, TimeOfDay
from app.modules.wellness.schemas import (
    WellnessLogRequest,
    WellnessLogResponse,
    WellnessNudgesResponse,
)
from app.modules.wellness.service import WellnessService, get_wellness_service

router = APIRouter()


@router.get(
    "/wellness/nudges",
    response_model=WellnessNudgesResponse,
    summary="Wellness nudges for right now",
)
async def read_nudges(
    user_id: str | None = Query(None, alias="userId"),
    time_of_day: TimeOfDay = Query("morning", alias="timeOfDay"),
    mood: PlanMood = Query("ok"),
    stress: StressLevel | None = Query(None),
    service: WellnessService = Depends(get_wellness_service),
) -> WellnessNudgesResponse:
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User ID is required."
        )
    return await service.nudges(user_id.strip(), time_of_day, mood, stress)


@router.post(
    "/wellness/log",
    response_model=WellnessLogResponse,
    summary="Log water, medication or activity",
)
async def log_wellness(
    payload: WellnessLogRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> WellnessLogResponse:
    return await service.log_activity(payload.user_id, payload.type, payload.value)
