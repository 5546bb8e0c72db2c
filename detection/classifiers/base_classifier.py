"""
Base Classifier — abstract general-purpose language identifier.

Provides:
- Structured logging via structlog
- Uniform error-handling wrapper (safe_classify)
- Consistent interface via abstract `classify` method
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from api.schemas import ClassifierResult, SupportedLanguage

logger = structlog.get_logger()

FAILED_CONFIDENCE = 0.1


class BaseClassifier(ABC):
    """Every general classifier strategy subclasses BaseClassifier."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logger.bind(classifier=name)

    @abstractmethod
    async def classify(self, text: str) -> ClassifierResult:
        """Core logic — each strategy overrides this."""
        raise NotImplementedError

    def unknown(self, suffix: str = "failed") -> ClassifierResult:
        return ClassifierResult(
            language=SupportedLanguage.UNKNOWN,
            confidence=FAILED_CONFIDENCE,
            provenance=f"{self.name}-{suffix}",
        )

    async def safe_classify(self, text: str) -> ClassifierResult:
        """
        Wraps `classify()` with structured error handling.
        Returns an `unknown` verdict (instead of raising) so the pipeline can
        degrade gracefully when a classifier fails.
        """
        try:
            return await self.classify(text)
        except Exception as e:
            self.logger.error(
                "classifier_failed",
                error=str(e),
                exc_info=True,
            )
            return self.unknown("error")
