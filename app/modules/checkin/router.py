from fastapi import APIRouter, Depends

from app.modules.checkin.schemas import CheckinRequest, CheckinResponse
from app.modules.checkin.service import CheckinService, get_checkin_service

router = APIRouter()


@router.post("/checkin", response_model=CheckinResponse, summary="Daily check-in")
async def daily_checkin(
    payload: CheckinRequest,
    service: CheckinService = Depends(get_checkin_service),
) -> CheckinResponse:
    """Build today's plan from how the user says they feel."""
    return await service.check_in(payload.user_id, payload.user_input)
