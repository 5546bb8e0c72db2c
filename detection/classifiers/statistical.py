"""
Statistical Classifier — langdetect (n-gram profile) wrapper.

Broad-coverage backstop for non-Darija text. The profiles are loaded lazily
on first use; if they cannot be loaded every call degrades to `unknown` with
low confidence instead of raising.
"""

from __future__ import annotations

from langdetect import DetectorFactory, LangDetectException, detect_langs
from langdetect import detector_factory

from api.schemas import ClassifierResult, SupportedLanguage
from detection.classifiers.base_classifier import BaseClassifier
from detection.exceptions import ClassifierInitializationError
from detection.languages import to_supported_language

# Lazy-loaded profile state
_profiles_loaded = False


def _load_profiles(seed: int) -> None:
    """Load langdetect profiles once; deterministic results need a fixed seed."""
    global _profiles_loaded
    if _profiles_loaded:
        return
    DetectorFactory.seed = seed
    try:
        detector_factory.init_factory()
    except Exception as e:
        raise ClassifierInitializationError(f"langdetect profiles unavailable: {e}") from e
    _profiles_loaded = True


class StatisticalClassifier(BaseClassifier):
    """Local, network-free general classifier."""

    def __init__(self, seed: int = 0) -> None:
        super().__init__(name="langdetect")
        self.seed = seed

    async def classify(self, text: str) -> ClassifierResult:
        if not text or not text.strip():
            return self.unknown("empty")

        try:
            _load_profiles(self.seed)
        except ClassifierInitializationError as e:
            self.logger.error("classifier_load_failed", error=str(e))
            return self.unknown("unavailable")

        try:
            candidates = detect_langs(text)
        except LangDetectException as e:
            self.logger.warning("language_detection_failed", error=str(e))
            return self.unknown()

        if not candidates:
            return self.unknown()

        top = candidates[0]
        language = to_supported_language(top.lang)
        confidence = float(top.prob)
        if language == SupportedLanguage.UNKNOWN:
            confidence = min(confidence, 0.3)

        return ClassifierResult(
            language=language,
            confidence=max(0.0, min(confidence, 1.0)),
            provenance=self.name,
            raw_label=top.lang,
        )
