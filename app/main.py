from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import StructlogMiddleware
from app.modules.chat import router as chat_router
from app.modules.checkin import router as checkin_router
from app.modules.safety import router as safety_router
from app.modules.speech import router as speech_router
from app.modules.wellness import router as wellness_router
from app.shared.deps import build_services

setup_logging()
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    services = build_services()
    app.state.services = services

    yield

    # Shutdown: let detached reports and records finish before closing the DB client
    await services.tasks.drain()
    if services.mongo_client is not None:
        services.mongo_client.close()
    log.info("shutdown_complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    ## Companion Core API

    This API provides:
    * **Safety**: emergency phrase detection, vitals checks, and care circle escalation
    * **Chat**: warm companion replies with safety checks on every message
    * **Check-ins**: a gentle daily plan with a heads-up to the care circle on low days
    * **Wellness**: gentle daily nudges and a log of what the user has done
    * **Speech**: text to speech for every reply
    """,
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(StructlogMiddleware)

app.include_router(
    safety_router.router, prefix=f"{settings.API_V1_STR}/safety", tags=["safety"]
)
app.include_router(chat_router.router, prefix=settings.API_V1_STR, tags=["chat"])
app.include_router(checkin_router.router, prefix=settings.API_V1_STR, tags=["checkin"])
app.include_router(speech_router.router, prefix=settings.API_V1_STR, tags=["speech"])
app.include_router(wellness_router.router, prefix=settings.API_V1_STR, tags=["wellness"])


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}
