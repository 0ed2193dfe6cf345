from __future__ import annotations

import base64
from typing import Protocol

import httpx
import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"


class SpeechError(Exception):
    pass


class SpeechNotConfiguredError(SpeechError):
    pass


class SpeechSynthesisError(SpeechError):
    pass


class SpeechSynthesizer(Protocol):
    async def synthesize(self, text: str) -> str: ...


class ElevenLabsSpeechClient:
    """Text to speech; returns the audio as a ``data:audio/mpeg;base64,...`` URL."""

    def __init__(
        self,
        api_key: str | None,
        voice_id: str = settings.ELEVENLABS_VOICE_ID,
        model_id: str = settings.ELEVENLABS_TTS_MODEL,
        client: httpx.AsyncClient | None = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._voice_id = voice_id
        self._model_id = model_id
        self._client = client
        self._timeout = timeout

    @property
    def model_id(self) -> str:
        return self._model_id

    async def synthesize(self, text: str) -> str:
        if not self._api_key:
            raise SpeechNotConfiguredError("ELEVENLABS_API_KEY is missing; cannot generate audio")

        url = ELEVENLABS_TTS_URL.format(voice_id=self._voice_id)
        headers = {
            "xi-api-key": self._api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        body = {
            "text": text,
            "model_id": self._model_id,
            "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
        }
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, headers=headers, json=body, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise SpeechSynthesisError(f"tts provider unreachable: {exc}") from exc

        if response.is_error:
            logger.error(
                "tts_provider_error", status_code=response.status_code, body=response.text[:200]
            )
            raise SpeechSynthesisError(f"tts provider returned {response.status_code}")

        encoded = base64.b64encode(response.content).decode("ascii")
        logger.info("tts_generated", characters=len(text))
        return f"data:audio/mpeg;base64,{encoded}"


async def synthesize_or_none(speech: SpeechSynthesizer, text: str) -> str | None:
    """Audio is a nice-to-have on safety replies: a TTS failure yields no audio, not an error."""
    try:
        return await speech.synthesize(text)
    except SpeechError as exc:
        logger.warning("tts_unavailable", error=str(exc))
        return None
