import logging
import logging.config
import sys
from typing import Any, Dict, List

import sentry_sdk
import structlog

from app.core.config import settings

# Event keys that may carry what the user said or a care-circle report body
TRANSCRIPT_KEYS = frozenset({"text", "input", "user_input", "context", "report"})


def redact_transcripts(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Replace user speech in log events with its length."""
    for key in TRANSCRIPT_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = f"<redacted {len(value)} chars>"
    return event_dict


def _init_sentry() -> None:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=1.0 if settings.ENVIRONMENT == "local" else 0.1,
        # Frames of a failed report would otherwise ship the transcript
        include_local_variables=False,
        send_default_pii=False,
    )


def _handler_config(renderer: Any, shared_processors: List[Any]) -> Dict[str, Any]:
    routed = {"handlers": ["default"], "level": "INFO", "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": renderer,
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "default": {
                "level": settings.LOG_LEVEL,
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
            },
        },
        "loggers": {
            "": {  # Root logger
                "handlers": ["default"],
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Outbound webhook / TTS / chat calls log every request at INFO
            "httpx": {**routed, "level": "WARNING"},
            "uvicorn": dict(routed),
            "uvicorn.error": dict(routed),
            "uvicorn.access": dict(routed),
        },
    }


def setup_logging() -> None:
    """
    Configure structured logging for the application.
    - Local: Pretty console logging.
    - Production: JSON logging.
    - Sentry included if DSN is set (detached task failures are reported there too).
    """
    shared_processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_transcripts,
    ]

    if settings.SENTRY_DSN:
        _init_sentry()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.ENVIRONMENT in ["local", "dev"]
        else structlog.processors.JSONRenderer()
    )
    logging.config.dictConfig(_handler_config(renderer, shared_processors))
