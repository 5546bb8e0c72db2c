"""
Language Detector — the single entry point of the engine.

Pipeline per call:
  normalise → cache → script analysis + Darija score → general classifier
  (remote race | offline rules | langdetect) → decision merger → cache/metrics

`detect` is called once per user message on a chat hot path, so it never
raises: every failure is encoded in the returned result (`source=error`).
"""

from __future__ import annotations

import time
from typing import Optional

from api.schemas import (
    ClassifierResult,
    DetectionOptions,
    DetectionResult,
    DetectionSource,
    SupportedLanguage,
)
from config.settings import Settings, get_settings
from db.redis_store import RedisStore
from detection.classifiers.base_classifier import BaseClassifier
from detection.classifiers.remote import HttpModelEndpoint, RemoteModelClassifier
from detection.classifiers.rule_based import RuleBasedClassifier
from detection.classifiers.statistical import StatisticalClassifier
from detection.darija.config import DarijaConfig
from detection.darija.scorer import DarijaScorer
from detection.exceptions import TextValidationError
from detection.merger import DecisionMerger, MergeRules
from detection.metrics import DetectionMetrics
from detection.normalizer import normalize
from detection.result_cache import ResultCache
from detection.script_analyzer import ScriptAnalyzer
from orchestrator.fallback import CloudOfflineOrchestrator, OrchestratorState
from orchestrator.logger import get_logger
from orchestrator.telemetry import CACHE_HIT, RESULT, TelemetryEmitter

logger = get_logger("detector")


class LanguageDetector:
    """Wires every stage together; each collaborator can be injected."""

    def __init__(
        self,
        script_analyzer: Optional[ScriptAnalyzer] = None,
        darija_scorer: Optional[DarijaScorer] = None,
        general_classifier: Optional[BaseClassifier] = None,
        offline_classifier: Optional[BaseClassifier] = None,
        merger: Optional[DecisionMerger] = None,
        cache: Optional[ResultCache] = None,
        orchestrator: Optional[CloudOfflineOrchestrator] = None,
        telemetry: Optional[TelemetryEmitter] = None,
        metrics: Optional[DetectionMetrics] = None,
        min_text_length: int = 3,
    ) -> None:
        self.script_analyzer = script_analyzer or ScriptAnalyzer()
        self.darija_scorer = darija_scorer or DarijaScorer()
        self.general_classifier = general_classifier or StatisticalClassifier()
        self.offline_classifier = offline_classifier or RuleBasedClassifier()
        self.merger = merger or DecisionMerger()
        self.cache = cache if cache is not None else ResultCache()
        self.telemetry = telemetry or TelemetryEmitter()
        self.orchestrator = orchestrator
        self.metrics = metrics or DetectionMetrics()
        self.min_text_length = min_text_length

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LanguageDetector":
        """Build a detector (and, when configured, its remote tier) from settings."""
        settings = settings or get_settings()
        telemetry = TelemetryEmitter(buffer_size=settings.telemetry_buffer_size)

        orchestrator = None
        if settings.remote_configured:
            timeout_seconds = settings.remote_timeout_ms / 1000.0
            store = (
                RedisStore(url=settings.redis_url, prefix=settings.persistent_cache_prefix)
                if settings.redis_url
                else None
            )
            remote = RemoteModelClassifier(
                darija_endpoint=HttpModelEndpoint(
                    name="darija-model",
                    url=settings.darija_model_url,
                    api_key=settings.remote_api_key,
                    timeout_seconds=timeout_seconds,
                ),
                general_endpoint=HttpModelEndpoint(
                    name="general-model",
                    url=settings.general_model_url,
                    api_key=settings.remote_api_key,
                    timeout_seconds=timeout_seconds,
                ),
                store=store,
                darija_accept_threshold=settings.remote_confidence_threshold,
                general_override_threshold=settings.remote_general_override,
                cache_ttl_seconds=settings.persistent_cache_ttl_seconds,
            )
            orchestrator = CloudOfflineOrchestrator(
                remote,
                telemetry=telemetry,
                confidence_threshold=settings.remote_confidence_threshold,
            )

        return cls(
            darija_scorer=DarijaScorer(DarijaConfig.from_settings(settings)),
            general_classifier=StatisticalClassifier(seed=settings.langdetect_seed),
            merger=DecisionMerger(
                MergeRules(
                    indicator_boost=settings.indicator_boost,
                    indicator_boost_cap=settings.indicator_boost_cap,
                )
            ),
            cache=ResultCache(
                max_size=settings.cache_max_size,
                ttl_seconds=settings.cache_ttl_seconds,
            ),
            orchestrator=orchestrator,
            telemetry=telemetry,
            min_text_length=settings.min_text_length,
        )

    # ── Public API ────────────────────────────────────────────────────────────

    async def detect(
        self,
        text: str,
        options: Optional[DetectionOptions] = None,
    ) -> DetectionResult:
        start = time.perf_counter()
        options = options or DetectionOptions()
        try:
            result = await self._detect(text, options, start)
        except TextValidationError as e:
            result = self._error_result(str(e), start)
        except Exception as e:
            logger.error("detection_failed", error=str(e), exc_info=True)
            result = self._error_result(f"detection failed: {e}", start)

        self.metrics.record(result)
        self.telemetry.emit(
            RESULT,
            language=result.language.value,
            confidence=round(result.confidence, 4),
            source=result.source.value,
            processing_time_ms=round(result.processing_time_ms, 3),
        )
        return result

    # ── Pipeline ──────────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Close connections held by the remote tier (verdict store)."""
        if self.orchestrator is None:
            return
        close = getattr(self.orchestrator.remote, "close", None)
        if close is not None:
            await close()
            logger.info("detector_closed")

    async def _detect(
        self,
        text: str,
        options: DetectionOptions,
        start: float,
    ) -> DetectionResult:
        normalized = self._validate(text)
        states = [OrchestratorState.INIT]

        key = ResultCache.make_key(normalized, options)
        if not options.bypass_cache:
            states.append(OrchestratorState.CACHE_CHECK)
            cached = self.cache.get(key)
            if cached is not None:
                self.telemetry.emit(CACHE_HIT, language=cached.language.value)
                cached.source = DetectionSource.CACHE
                cached.processing_time_ms = _elapsed_ms(start)
                cached.metadata["states"] = [
                    s.value for s in states + [OrchestratorState.CACHE_HIT, OrchestratorState.DONE]
                ]
                return cached
            states.append(OrchestratorState.CACHE_MISS)

        script = self.script_analyzer.analyze(normalized)
        darija = self.darija_scorer.score(normalized)
        general, source, fallback_reason, remote_states = await self._classify(normalized, options)
        states += remote_states or [OrchestratorState.DONE]

        result = self.merger.merge(darija, general, script)
        result.source = source
        result.metadata["states"] = [s.value for s in states]
        result.metadata["fallback_reason"] = fallback_reason

        if result.confidence < options.min_confidence:
            result.language = SupportedLanguage.UNKNOWN
            result.metadata["below_min_confidence"] = True

        result.processing_time_ms = _elapsed_ms(start)

        # A fallback verdict is transient; the next call should retry the remote tier
        if not options.bypass_cache and fallback_reason is None:
            self.cache.put(key, result)

        logger.debug(
            "language_detected",
            language=result.language.value,
            confidence=round(result.confidence, 3),
            source=source.value,
            merge_rule=result.metadata.get("merge_rule"),
        )
        return result

    async def _classify(
        self,
        text: str,
        options: DetectionOptions,
    ) -> tuple[ClassifierResult, DetectionSource, Optional[str], list[OrchestratorState]]:
        if options.offline:
            general = await self.offline_classifier.safe_classify(text)
            return general, DetectionSource.OFFLINE_FALLBACK, None, [
                OrchestratorState.OFFLINE_FALLBACK,
                OrchestratorState.DONE,
            ]

        if self.orchestrator is not None:
            outcome = await self.orchestrator.attempt(text, options.timeout_ms)
            if outcome.result is not None:
                return outcome.result, DetectionSource.REMOTE_MODEL, None, outcome.states
            general = await self.offline_classifier.safe_classify(text)
            return (
                general,
                DetectionSource.OFFLINE_FALLBACK,
                outcome.fallback_reason.value,
                outcome.states,
            )

        general = await self.general_classifier.safe_classify(text)
        return general, DetectionSource.LOCAL_RULES, None, []

    def _validate(self, text: str) -> str:
        if not isinstance(text, str):
            raise TextValidationError("text must be a string")
        normalized = normalize(text)
        if not normalized:
            raise TextValidationError("text is empty")
        if len(normalized) < self.min_text_length:
            raise TextValidationError(
                f"text shorter than {self.min_text_length} characters"
            )
        return normalized

    @staticmethod
    def _error_result(message: str, start: float) -> DetectionResult:
        return DetectionResult(
            language=SupportedLanguage.UNKNOWN,
            confidence=0.0,
            source=DetectionSource.ERROR,
            processing_time_ms=_elapsed_ms(start),
            error=message,
        )


def _elapsed_ms(start: float) -> float:
    return max((time.perf_counter() - start) * 1000.0, 0.0)


# ── Module-level convenience ──────────────────────────────────────────────────

_default_detector: Optional[LanguageDetector] = None


def get_default_detector() -> LanguageDetector:
    """Lazily build the process-wide detector from settings."""
    global _default_detector
    if _default_detector is None:
        _default_detector = LanguageDetector.from_settings()
    return _default_detector


async def detect_language(
    text: str,
    options: Optional[DetectionOptions] = None,
) -> DetectionResult:
    return await get_default_detector().detect(text, options)
