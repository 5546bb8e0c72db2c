"""
Cloud/Offline Orchestrator — races the remote tier against a timer.

    INIT → CACHE_CHECK → CACHE_HIT → DONE
                       → CACHE_MISS → REMOTE_ATTEMPT → REMOTE_OK → DONE
                                                     → REMOTE_TIMEOUT ┐
                                                     → REMOTE_LOW_CONFIDENCE ├→ OFFLINE_FALLBACK → DONE
                                                     → REMOTE_ERROR ┘

The cache states are walked by `LanguageDetector`; this module owns the
REMOTE_* transitions. A remote verdict below the confidence threshold is
discarded, never blended. Once the timer fires the remote task is cancelled
and any late result is ignored.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from api.schemas import ClassifierResult, FallbackReason
from detection.classifiers.base_classifier import BaseClassifier
from detection.exceptions import RemoteTimeoutError
from orchestrator.logger import get_logger
from orchestrator.telemetry import FALLBACK, REMOTE_CALLED, TelemetryEmitter

logger = get_logger("orchestrator")


class OrchestratorState(str, Enum):
    INIT = "INIT"
    CACHE_CHECK = "CACHE_CHECK"
    CACHE_HIT = "CACHE_HIT"
    CACHE_MISS = "CACHE_MISS"
    REMOTE_ATTEMPT = "REMOTE_ATTEMPT"
    REMOTE_OK = "REMOTE_OK"
    REMOTE_TIMEOUT = "REMOTE_TIMEOUT"
    REMOTE_LOW_CONFIDENCE = "REMOTE_LOW_CONFIDENCE"
    REMOTE_ERROR = "REMOTE_ERROR"
    OFFLINE_FALLBACK = "OFFLINE_FALLBACK"
    DONE = "DONE"


_REASON_STATE = {
    FallbackReason.TIMEOUT: OrchestratorState.REMOTE_TIMEOUT,
    FallbackReason.LOW_CONFIDENCE: OrchestratorState.REMOTE_LOW_CONFIDENCE,
    FallbackReason.ERROR: OrchestratorState.REMOTE_ERROR,
}


class RemoteOutcome(BaseModel):
    """Result of one remote attempt; `result` is None when falling back."""
    result: Optional[ClassifierResult] = None
    fallback_reason: Optional[FallbackReason] = None
    error: Optional[str] = None
    states: list[OrchestratorState] = Field(default_factory=list)


def _discard_late_result(task: asyncio.Future) -> None:
    # Retrieve the outcome so an abandoned call never logs "exception never retrieved".
    if not task.cancelled():
        task.exception()


class CloudOfflineOrchestrator:
    """Owns the remote attempt and the decision to fall back."""

    def __init__(
        self,
        remote: BaseClassifier,
        telemetry: Optional[TelemetryEmitter] = None,
        confidence_threshold: float = 0.85,
    ) -> None:
        self.remote = remote
        self.telemetry = telemetry or TelemetryEmitter()
        self.confidence_threshold = confidence_threshold
        self.fallback_counts: Counter[str] = Counter()
        self.last_fallback_reason: Optional[FallbackReason] = None

    async def attempt(self, text: str, timeout_ms: float) -> RemoteOutcome:
        states = [OrchestratorState.REMOTE_ATTEMPT]
        self.telemetry.emit(REMOTE_CALLED, text_length=len(text), timeout_ms=timeout_ms)

        task = asyncio.ensure_future(self.remote.classify(text))
        done, _ = await asyncio.wait({task}, timeout=max(timeout_ms, 0.0) / 1000.0)

        if not done:
            task.add_done_callback(_discard_late_result)
            task.cancel()
            error = RemoteTimeoutError(f"remote tier exceeded {timeout_ms:g}ms")
            return self._fallback(FallbackReason.TIMEOUT, states, str(error))

        try:
            result = task.result()
        except Exception as e:
            return self._fallback(FallbackReason.ERROR, states, str(e))

        if result.confidence < self.confidence_threshold:
            return self._fallback(
                FallbackReason.LOW_CONFIDENCE,
                states,
                f"remote confidence {result.confidence:.2f} below {self.confidence_threshold:.2f}",
            )

        states += [OrchestratorState.REMOTE_OK, OrchestratorState.DONE]
        return RemoteOutcome(result=result, states=states)

    def _fallback(
        self,
        reason: FallbackReason,
        states: list[OrchestratorState],
        detail: str,
    ) -> RemoteOutcome:
        self.fallback_counts[reason.value] += 1
        self.last_fallback_reason = reason
        self.telemetry.emit(FALLBACK, reason=reason.value, detail=detail)
        logger.warning("remote_fallback", reason=reason.value, detail=detail)
        states += [_REASON_STATE[reason], OrchestratorState.OFFLINE_FALLBACK, OrchestratorState.DONE]
        return RemoteOutcome(fallback_reason=reason, error=detail, states=states)
