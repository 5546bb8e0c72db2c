"""
Tests for the cloud/offline orchestrator and the telemetry emitter.
"""

import asyncio

import pytest

from api.schemas import FallbackReason, SupportedLanguage
from conftest import StubClassifier
from orchestrator.fallback import CloudOfflineOrchestrator, OrchestratorState
from orchestrator.telemetry import FALLBACK, REMOTE_CALLED, TelemetryEmitter, TelemetryEvent


# ── Orchestrator ──────────────────────────────────────────────────────────────

class TestCloudOfflineOrchestrator:
    def setup_method(self):
        self.events = []
        self.telemetry = TelemetryEmitter(sinks=[self.events.append])

    @pytest.mark.asyncio
    async def test_confident_remote_result(self):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(confidence=0.9), self.telemetry)
        outcome = await orchestrator.attempt("bonjour", timeout_ms=400)

        assert outcome.result.language == SupportedLanguage.FRENCH
        assert outcome.fallback_reason is None
        assert outcome.states == [
            OrchestratorState.REMOTE_ATTEMPT,
            OrchestratorState.REMOTE_OK,
            OrchestratorState.DONE,
        ]
        assert [e.name for e in self.events] == [REMOTE_CALLED]

    @pytest.mark.asyncio
    async def test_timeout(self):
        slow = StubClassifier(delay=0.5)
        orchestrator = CloudOfflineOrchestrator(slow, self.telemetry)

        outcome = await orchestrator.attempt("bonjour", timeout_ms=1)

        assert outcome.result is None
        assert outcome.fallback_reason == FallbackReason.TIMEOUT
        assert orchestrator.last_fallback_reason == FallbackReason.TIMEOUT
        assert orchestrator.fallback_counts["timeout"] == 1
        assert outcome.states == [
            OrchestratorState.REMOTE_ATTEMPT,
            OrchestratorState.REMOTE_TIMEOUT,
            OrchestratorState.OFFLINE_FALLBACK,
            OrchestratorState.DONE,
        ]

    @pytest.mark.asyncio
    async def test_late_remote_result_is_ignored(self):
        slow = StubClassifier(delay=0.05)
        orchestrator = CloudOfflineOrchestrator(slow, self.telemetry)

        outcome = await orchestrator.attempt("bonjour", timeout_ms=1)
        await asyncio.sleep(0.1)

        assert outcome.result is None
        assert slow.calls == 1
        assert slow.completed == 0

    @pytest.mark.asyncio
    async def test_low_confidence_discards_remote_verdict(self):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(confidence=0.6), self.telemetry)
        outcome = await orchestrator.attempt("bonjour", timeout_ms=400)

        assert outcome.result is None
        assert outcome.fallback_reason == FallbackReason.LOW_CONFIDENCE
        assert OrchestratorState.REMOTE_LOW_CONFIDENCE in outcome.states

    @pytest.mark.asyncio
    async def test_threshold_is_inclusive(self):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(confidence=0.85), self.telemetry)
        outcome = await orchestrator.attempt("bonjour", timeout_ms=400)
        assert outcome.result is not None

    @pytest.mark.asyncio
    async def test_remote_error(self, model_error):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(error=model_error), self.telemetry)
        outcome = await orchestrator.attempt("bonjour", timeout_ms=400)

        assert outcome.fallback_reason == FallbackReason.ERROR
        assert "model unavailable" in outcome.error
        assert OrchestratorState.REMOTE_ERROR in outcome.states

    @pytest.mark.asyncio
    async def test_fallback_emits_telemetry(self):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(confidence=0.2), self.telemetry)
        await orchestrator.attempt("bonjour", timeout_ms=400)

        fallbacks = [e for e in self.events if e.name == FALLBACK]
        assert len(fallbacks) == 1
        assert fallbacks[0].attributes["reason"] == "low_confidence"

    @pytest.mark.asyncio
    async def test_counts_accumulate_per_reason(self, model_error):
        orchestrator = CloudOfflineOrchestrator(StubClassifier(error=model_error), self.telemetry)
        await orchestrator.attempt("a", timeout_ms=400)
        await orchestrator.attempt("b", timeout_ms=400)
        assert orchestrator.fallback_counts == {"error": 2}


# ── Telemetry ─────────────────────────────────────────────────────────────────

class TestTelemetryEmitter:
    def test_emit_reaches_every_sink(self):
        first, second = [], []
        emitter = TelemetryEmitter(sinks=[first.append, second.append])

        emitter.emit("lang_detect.result", language="darija")

        assert first[0].name == "lang_detect.result"
        assert second[0].attributes == {"language": "darija"}

    def test_failing_sink_is_isolated(self):
        received = []

        def broken(event):
            raise RuntimeError("sink down")

        emitter = TelemetryEmitter(sinks=[broken, received.append])
        emitter.emit("lang_detect.result")

        assert len(received) == 1

    def test_recent_buffer_is_bounded(self):
        emitter = TelemetryEmitter(sinks=[], buffer_size=3)
        for i in range(5):
            emitter.emit("lang_detect.result", i=i)

        recent = emitter.recent()
        assert len(recent) == 3
        assert [e.attributes["i"] for e in recent] == [2, 3, 4]

    def test_recent_filters_by_name(self):
        emitter = TelemetryEmitter(sinks=[])
        emitter.emit("lang_detect.cache_hit")
        emitter.emit("lang_detect.result")
        assert [e.name for e in emitter.recent("lang_detect.cache_hit")] == ["lang_detect.cache_hit"]

    def test_add_sink(self):
        received = []
        emitter = TelemetryEmitter(sinks=[])
        emitter.add_sink(received.append)
        emitter.emit("lang_detect.fallback", reason="timeout")
        assert isinstance(received[0], TelemetryEvent)

    def test_default_sink_logs(self):
        emitter = TelemetryEmitter()
        emitter.emit("lang_detect.result", language="french")
        assert emitter.recent()[0].timestamp.endswith("Z")
