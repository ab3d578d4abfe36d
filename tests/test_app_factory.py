"""Tests for the app factory: health, correlation ID, fail-fast config."""

import pytest
from fastapi.testclient import TestClient

from healthbot.api.factory import create_app
from healthbot.config import REQUIRED_VARS
from healthbot.domain.webhook_handler import WebhookHandler
from healthbot.observability.correlation import CORRELATION_ID_HEADER

from .helpers import FakeAnswerer, FakeMessenger


@pytest.fixture
def client():
    answerer = FakeAnswerer(answer="ok")
    handler = WebhookHandler(messenger=FakeMessenger(), answerer=answerer)
    return TestClient(create_app(webhook_handler=handler, rag_pipeline=answerer))


class TestHealth:
    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestCorrelationId:
    def test_generated_when_absent(self, client):
        response = client.get("/health")
        assert response.headers[CORRELATION_ID_HEADER]

    def test_echoed_when_present(self, client):
        response = client.get("/health", headers={CORRELATION_ID_HEADER: "corr-123"})
        assert response.headers[CORRELATION_ID_HEADER] == "corr-123"


class TestStartupConfig:
    def test_missing_config_fails_fast(self, monkeypatch):
        for name in REQUIRED_VARS:
            monkeypatch.delenv(name, raising=False)

        with pytest.raises(RuntimeError, match="Missing required configuration"):
            create_app()
