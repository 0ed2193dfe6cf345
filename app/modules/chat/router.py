from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.modules.chat.schemas import (
    ChatboxRequest,
    ChatboxResponse,
    ChatHistoryResponse,
    EmpathyRequest,
    EmpathyResponse,
)
from app.modules.chat.service import ChatService, get_chat_service

router = APIRouter()


@router.post("/chatbox", response_model=ChatboxResponse, summary="Talk with the companion")
async def chatbox(
    payload: ChatboxRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatboxResponse:
    """Safety phrases are handled first; everything else gets a model-backed reply."""
    text = (payload.input or "").strip()
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please share a little about how you are feeling.",
        )
    return await service.reply(payload.user_id.strip() or "anonymous", text)


@router.get(
    "/chatbox/history/{user_id}",
    response_model=ChatHistoryResponse,
    summary="Recent chatbox messages",
)
async def read_chat_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    return ChatHistoryResponse(data=await service.history(user_id, limit))


@router.post("/empathy", response_model=EmpathyResponse, summary="Empathetic reply")
async def empathy(
    payload: EmpathyRequest,
    service: ChatService = Depends(get_chat_service),
) -> EmpathyResponse:
    return await service.empathize(payload.user_id, payload.user_input)
