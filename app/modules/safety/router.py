"""HTTP endpoints for vitals checks, the emergency button, and combined assessments."""

from fastapi import APIRouter, Depends

from app.modules.safety.checkin import TimeOfDay, check_in_questions
from app.modules.safety.schemas import (
    CheckInQuestionsResponse,
    ManualEmergencyRequest,
    SafetyAssessRequest,
    SafetyResponse,
    VitalsCheckRequest,
)
from app.modules.safety.service import SafetyService, get_safety_service

router = APIRouter()


@router.post("/vitals", response_model=SafetyResponse, summary="Check a vitals sample")
async def check_vitals(
    payload: VitalsCheckRequest,
    service: SafetyService = Depends(get_safety_service),
) -> SafetyResponse:
    """Classify vitals; falls and abnormal heart rates notify the care circle."""
    return await service.check_vitals(payload.user_id, payload.vitals)


@router.post("/emergency", response_model=SafetyResponse, summary="Manual emergency trigger")
async def trigger_emergency(
    payload: ManualEmergencyRequest,
    service: SafetyService = Depends(get_safety_service),
) -> SafetyResponse:
    return await service.trigger_emergency(payload.user_id, payload.type, payload.location)


@router.post("/assess", response_model=SafetyResponse, summary="Assess text and vitals together")
async def assess(
    payload: SafetyAssessRequest,
    service: SafetyService = Depends(get_safety_service),
) -> SafetyResponse:
    return await service.assess(payload.user_id, payload.text, payload.vitals)


@router.get(
    "/check-in/{time_of_day}",
    response_model=CheckInQuestionsResponse,
    summary="Safety check-in questions",
)
async def read_check_in_questions(time_of_day: TimeOfDay) -> CheckInQuestionsResponse:
    return CheckInQuestionsResponse(
        time_of_day=time_of_day, questions=check_in_questions(time_of_day)
    )
