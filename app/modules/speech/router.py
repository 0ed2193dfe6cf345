"""Text to speech for arbitrary text (memory playback, reading replies aloud)."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.tts import SpeechError
from app.modules.chat.persona import format_for_tts
from app.shared.deps import Services, get_services
from app.shared.schemas import CamelModel

router = APIRouter()
log = structlog.get_logger()


class SpeechRequest(CamelModel):
    text: str | None = None


class SpeechResponse(CamelModel):
    success: bool = True
    audio_url: str
    timestamp: str


@router.post("/tts", response_model=SpeechResponse, summary="Generate speech audio")
async def text_to_speech(
    payload: SpeechRequest,
    services: Services = Depends(get_services),
) -> SpeechResponse:
    text = (payload.text or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required.")

    try:
        audio_url = await services.speech.synthesize(format_for_tts(text))
    except SpeechError as exc:
        log.error("tts_request_failed", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not generate audio."
        ) from exc

    return SpeechResponse(audio_url=audio_url, timestamp=services.clock.now())
