"""
API Endpoints — REST routes over the language detector (FastAPI router).

The detector is resolved through `get_detector` so tests can swap it via
`app.dependency_overrides`.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
import structlog

from api.schemas import CacheStats, DetectionResult, DetectRequest, MetricsSnapshot
from detection.detector import LanguageDetector, get_default_detector

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1", tags=["DarijaLangID"])


def get_detector() -> LanguageDetector:
    return get_default_detector()


@router.post("/detect", response_model=DetectionResult)
async def detect(
    request: DetectRequest,
    detector: LanguageDetector = Depends(get_detector),
) -> DetectionResult:
    """
    Identify the language of one utterance.
    Always answers 200; failures are reported in `source`/`error`.
    """
    return await detector.detect(request.text, request.options)


@router.get("/metrics", response_model=MetricsSnapshot)
async def metrics(detector: LanguageDetector = Depends(get_detector)) -> MetricsSnapshot:
    return detector.metrics.snapshot()


@router.get("/cache/stats", response_model=CacheStats)
async def cache_stats(detector: LanguageDetector = Depends(get_detector)) -> CacheStats:
    return detector.cache.stats()


@router.delete("/cache")
async def clear_cache(detector: LanguageDetector = Depends(get_detector)) -> dict:
    """Drop every cached verdict and reset the cache counters."""
    cleared = len(detector.cache)
    detector.cache.clear()
    logger.info("cache_cleared", entries=cleared)
    return {"status": "cleared", "entries": cleared}


@router.get("/health")
async def health_check(detector: LanguageDetector = Depends(get_detector)) -> dict:
    """Simple health-check endpoint."""
    orchestrator = detector.orchestrator
    return {
        "status": "healthy",
        "service": "DarijaLangID",
        "remote_enabled": orchestrator is not None,
        "fallbacks": dict(orchestrator.fallback_counts) if orchestrator else {},
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
