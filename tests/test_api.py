"""
Tests for the HTTP surface (FastAPI TestClient).
"""

import pytest
from fastapi.testclient import TestClient

from api.endpoints import get_detector
from conftest import InMemoryStore, StubEndpoint
from detection.classifiers.remote import RemoteModelClassifier
from detection.detector import LanguageDetector
from orchestrator import main as main_module
from orchestrator.fallback import CloudOfflineOrchestrator
from orchestrator.main import app
from orchestrator.telemetry import TelemetryEmitter


@pytest.fixture
def detector():
    return LanguageDetector(telemetry=TelemetryEmitter(sinks=[]))


@pytest.fixture
def client(detector):
    app.dependency_overrides[get_detector] = lambda: detector
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestDetectEndpoint:
    def test_detect_darija(self, client):
        response = client.post("/api/v1/detect", json={"text": "wach nta mezyan?"})
        assert response.status_code == 200
        body = response.json()
        assert body["language"] == "darija"
        assert body["source"] == "local-rules"
        assert 0.6 < body["confidence"] <= 1.0

    def test_detect_with_options(self, client):
        response = client.post(
            "/api/v1/detect",
            json={"text": "Bonjour, comment allez-vous?", "options": {"offline": True}},
        )
        body = response.json()
        assert body["language"] == "french"
        assert body["source"] == "offline-fallback"

    def test_empty_text_is_not_an_http_error(self, client):
        response = client.post("/api/v1/detect", json={"text": ""})
        assert response.status_code == 200
        assert response.json()["source"] == "error"

    def test_missing_text_is_rejected(self, client):
        response = client.post("/api/v1/detect", json={})
        assert response.status_code == 422

    def test_invalid_options_are_rejected(self, client):
        response = client.post(
            "/api/v1/detect",
            json={"text": "salam", "options": {"min_confidence": 2}},
        )
        assert response.status_code == 422

    def test_request_id_is_echoed(self, client):
        response = client.post(
            "/api/v1/detect",
            json={"text": "salam khoya"},
            headers={"X-Request-ID": "req-42"},
        )
        assert response.headers["X-Request-ID"] == "req-42"
        assert "X-Response-Time-Ms" in response.headers

    def test_request_id_is_generated(self, client):
        response = client.get("/api/v1/health")
        assert response.headers["X-Request-ID"]


class TestSupportEndpoints:
    def test_metrics(self, client):
        client.post("/api/v1/detect", json={"text": "wach nta mezyan?"})
        client.post("/api/v1/detect", json={"text": ""})

        body = client.get("/api/v1/metrics").json()
        assert body["total_detections"] == 2
        assert body["errors"] == 1
        assert body["language_distribution"]["darija"] == 1

    def test_cache_stats_and_clear(self, client):
        client.post("/api/v1/detect", json={"text": "wach nta mezyan?"})
        client.post("/api/v1/detect", json={"text": "wach nta mezyan?"})

        stats = client.get("/api/v1/cache/stats").json()
        assert stats["size"] == 1
        assert stats["hits"] == 1

        cleared = client.delete("/api/v1/cache").json()
        assert cleared == {"status": "cleared", "entries": 1}
        assert client.get("/api/v1/cache/stats").json()["size"] == 0

    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["remote_enabled"] is False
        assert body["fallbacks"] == {}


class TestLifespan:
    def test_shutdown_closes_verdict_store(self, monkeypatch):
        store = InMemoryStore()
        remote = RemoteModelClassifier(
            StubEndpoint("darija-model"), StubEndpoint("general-model"), store=store
        )
        detector = LanguageDetector(
            orchestrator=CloudOfflineOrchestrator(remote),
            telemetry=TelemetryEmitter(sinks=[]),
        )
        monkeypatch.setattr(main_module, "get_default_detector", lambda: detector)

        with TestClient(app):
            assert store.closed is False

        assert store.closed is True
