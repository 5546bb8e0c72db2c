"""
Shared test doubles: stub model endpoints, stub classifiers, an in-memory
key-value store and a controllable clock.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from api.schemas import ClassifierResult, SupportedLanguage
from detection.classifiers.base_classifier import BaseClassifier
from detection.classifiers.remote import ModelPrediction
from detection.exceptions import RemoteModelError
from detection.result_cache import ResultCache


class StubEndpoint:
    """Model endpoint returning a fixed prediction (or raising)."""

    def __init__(
        self,
        name: str,
        language: str = "ar",
        confidence: float = 0.9,
        error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self.language = language
        self.confidence = confidence
        self.error = error
        self.calls = 0

    async def predict(self, text: str) -> ModelPrediction:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ModelPrediction(language=self.language, confidence=self.confidence)


class StubClassifier(BaseClassifier):
    """General classifier with a canned verdict, optional delay or failure."""

    def __init__(
        self,
        language: SupportedLanguage = SupportedLanguage.FRENCH,
        confidence: float = 0.95,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        super().__init__(name="stub")
        self.language = language
        self.confidence = confidence
        self.delay = delay
        self.error = error
        self.calls = 0
        self.completed = 0

    async def classify(self, text: str) -> ClassifierResult:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.completed += 1
        return ClassifierResult(
            language=self.language,
            confidence=self.confidence,
            provenance=self.name,
        )


class InMemoryStore:
    """Dict-backed stand-in for the persistent key-value store."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, dict[str, Any]] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        if self.fail:
            raise ConnectionError("store unavailable")
        return self.data.get(key)

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        if self.fail:
            raise ConnectionError("store unavailable")
        self.data[key] = value
        self.ttls[key] = ttl_seconds


class FakeClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResultCache:
    return ResultCache(max_size=3, ttl_seconds=300, clock=clock)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def model_error() -> RemoteModelError:
    return RemoteModelError("model unavailable")
