from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    PROJECT_NAME: str = "Companion Core"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = ""  # local, dev, prod (from .env)

    # CORS (from .env, JSON list)
    BACKEND_CORS_ORIGINS: List[str] = []

    # Logging & Sentry
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str | None = None

    # MongoDB (from .env, leave empty to run without persistence)
    MONGODB_URL: str = ""
    MONGODB_DB_NAME: str = "companion"

    # Care circle notifications (webhook, e.g. an n8n workflow)
    CARE_CIRCLE_WEBHOOK_URL: str | None = None
    CARE_CIRCLE_EMAIL: str = ""

    # Text to speech (ElevenLabs)
    ELEVENLABS_API_KEY: str | None = None
    ELEVENLABS_VOICE_ID: str = "21m00Tcm4TlvDq8ikWAM"
    ELEVENLABS_TTS_MODEL: str = "eleven_monolingual_v1"

    # Chat replies (Gemini)
    GEMINI_API_KEY: str | None = None
    GEMINI_CHAT_MODEL: str = "gemini-2.0-flash"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )


settings = Settings()
