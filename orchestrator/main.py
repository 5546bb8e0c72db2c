"""
Orchestrator Main — FastAPI application.

Exposes the language detector over HTTP:
  POST /api/v1/detect → [cache] → [script + darija] → [remote | offline | langdetect] → [merge]
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from api.endpoints import router
from api.middleware import RequestIDMiddleware
from config.settings import get_settings
from detection.detector import get_default_detector
from orchestrator.logger import configure_logging

logger = structlog.get_logger()
settings = get_settings()


# ── Lifespan ──────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    configure_logging(settings.log_level, json_logs=settings.json_logs)
    detector = get_default_detector()
    logger.info(
        "starting_up",
        app=settings.app_name,
        version=settings.app_version,
        remote_enabled=detector.orchestrator is not None,
    )
    yield
    logger.info("shutting_down", metrics=detector.metrics.snapshot().model_dump())
    await detector.close()


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="DarijaLangID",
    description="Hybrid Darija / French / Arabic language identification.",
    version=settings.app_version,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestIDMiddleware)

# Routers
app.include_router(router)


# ── Uvicorn entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "orchestrator.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
