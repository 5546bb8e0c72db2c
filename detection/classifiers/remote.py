"""
Remote Model Classifier — hosted Darija-specialised + general models.

Policy:
1. Ask the Darija-specialised model first; a darija verdict at ≥ 0.85 wins.
2. Otherwise ask the general model.
3. If the Darija model flagged darija and the general model is not highly
   confident (< 0.95), keep the Darija verdict.

Verdicts are cached in a persistent key-value store (24h TTL) when one is
configured. The enclosing timeout race lives in `orchestrator.fallback`.
"""

from __future__ import annotations

import hashlib
from typing import Any, Optional, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from api.schemas import ClassifierResult, SupportedLanguage
from detection.classifiers.base_classifier import BaseClassifier
from detection.exceptions import RemoteModelError
from detection.languages import to_supported_language


class ModelPrediction(BaseModel):
    """JSON body returned by a hosted language model."""
    language: str
    confidence: float


class ModelEndpoint(Protocol):
    name: str

    async def predict(self, text: str) -> ModelPrediction: ...


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[dict[str, Any]]: ...

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None: ...

    async def close(self) -> None: ...


class HttpModelEndpoint:
    """POSTs `{"text": ...}` and expects `{"language", "confidence"}` back."""

    def __init__(
        self,
        name: str,
        url: str,
        api_key: str = "",
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.name = name
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def predict(self, text: str) -> ModelPrediction:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.url, json={"text": text}, headers=headers, timeout=self.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(self.url, json={"text": text}, headers=headers)
            response.raise_for_status()
            return ModelPrediction.model_validate(response.json())
        except httpx.HTTPError as e:
            raise RemoteModelError(f"{self.name} request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise RemoteModelError(f"{self.name} returned an invalid payload: {e}") from e


def remote_cache_key(text: str) -> str:
    return "text:" + hashlib.sha256(text.strip().lower().encode("utf-8")).hexdigest()


class RemoteModelClassifier(BaseClassifier):
    """Two-model remote tier with a persistent verdict cache."""

    def __init__(
        self,
        darija_endpoint: ModelEndpoint,
        general_endpoint: ModelEndpoint,
        store: Optional[KeyValueStore] = None,
        darija_accept_threshold: float = 0.85,
        general_override_threshold: float = 0.95,
        cache_ttl_seconds: int = 86400,
    ) -> None:
        super().__init__(name="remote")
        self.darija_endpoint = darija_endpoint
        self.general_endpoint = general_endpoint
        self.store = store
        self.darija_accept_threshold = darija_accept_threshold
        self.general_override_threshold = general_override_threshold
        self.cache_ttl_seconds = cache_ttl_seconds

    async def classify(self, text: str) -> ClassifierResult:
        key = remote_cache_key(text)
        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        darija_verdict = await self._ask_darija_model(text)
        if (
            darija_verdict is not None
            and darija_verdict.confidence >= self.darija_accept_threshold
        ):
            await self._cache_set(key, darija_verdict)
            return darija_verdict

        general_verdict = self._to_result(
            await self.general_endpoint.predict(text), self.general_endpoint.name
        )

        verdict = general_verdict
        if (
            darija_verdict is not None
            and general_verdict.language != SupportedLanguage.DARIJA
            and general_verdict.confidence < self.general_override_threshold
        ):
            verdict = darija_verdict

        await self._cache_set(key, verdict)
        return verdict

    async def _ask_darija_model(self, text: str) -> Optional[ClassifierResult]:
        """Darija verdict, or None when the model says otherwise or fails."""
        try:
            prediction = await self.darija_endpoint.predict(text)
        except RemoteModelError as e:
            self.logger.warning("darija_model_failed", error=str(e))
            return None
        verdict = self._to_result(prediction, self.darija_endpoint.name)
        if verdict.language != SupportedLanguage.DARIJA:
            return None
        return verdict

    @staticmethod
    def _to_result(prediction: ModelPrediction, provenance: str) -> ClassifierResult:
        return ClassifierResult(
            language=to_supported_language(prediction.language),
            confidence=max(0.0, min(prediction.confidence, 1.0)),
            provenance=provenance,
            raw_label=prediction.language,
        )

    async def _cache_get(self, key: str) -> Optional[ClassifierResult]:
        if self.store is None:
            return None
        try:
            payload = await self.store.get(key)
            if payload is None:
                return None
            return ClassifierResult.model_validate(payload)
        except Exception as e:
            self.logger.warning("remote_cache_read_failed", error=str(e))
            return None

    async def _cache_set(self, key: str, verdict: ClassifierResult) -> None:
        if self.store is None:
            return
        try:
            await self.store.set(key, verdict.model_dump(mode="json"), self.cache_ttl_seconds)
        except Exception as e:
            self.logger.warning("remote_cache_write_failed", error=str(e))

    async def close(self) -> None:
        """Release the verdict store connection, if any."""
        if self.store is not None:
            await self.store.close()
