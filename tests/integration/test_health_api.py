"""
Integration tests for health, readiness and error handling
"""

import pytest
from unittest.mock import patch

from app.api.routes import health
from app.core import localization
from app.deps.exceptions import PersistenceFailureError
from tests.conftest import TestingSessionLocal


@pytest.mark.integration
class TestHealthEndpoints:

    @pytest.fixture(autouse=True)
    def fresh_service(self, monkeypatch):
        monkeypatch.setattr(health.health_service, "session_factory", TestingSessionLocal)
        health.health_service.clear_cache()
        yield
        health.health_service.clear_cache()

    def test_liveness(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @patch("app.services.health_service.settings")
    def test_readiness_without_keys(self, mock_settings, client, monkeypatch):
        mock_settings.ai_gateway_api_key = None
        mock_settings.dify_api_key = None
        mock_settings.database_url = "sqlite://"
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
        monkeypatch.delenv("DIFY_API_KEY", raising=False)

        response = client.get("/readyz")

        assert response.status_code == 503
        components = response.json()["components"]
        assert components["database"]["status"] == "healthy"
        assert components["dify"]["status"] == "unhealthy"

    @patch("app.services.health_service.settings")
    def test_readiness_with_keys(self, mock_settings, client):
        mock_settings.ai_gateway_api_key = "gw-key"
        mock_settings.dify_api_key = "app-key"
        mock_settings.database_url = "sqlite://"

        response = client.get("/readyz")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"


@pytest.mark.integration
class TestErrorHandling:

    def test_correlation_id_echoed(self, client, auth_headers):
        response = client.get("/api/chats", headers={**auth_headers, "X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_escaped_domain_error_becomes_json(self, client, auth_headers):
        with patch("app.api.routes.chats.ChatRepository.list_chats", side_effect=PersistenceFailureError("db down")):
            response = client.get("/api/chats", headers={**auth_headers, "X-Correlation-ID": "req-1"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == localization.SAVE_FAILED
        assert body["correlation_id"] == "req-1"

    def test_unexpected_error_is_generic(self, client, auth_headers):
        with patch("app.api.routes.directory.list_advisors", side_effect=RuntimeError("secret detail")):
            response = client.get("/api/advisors", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == localization.UNKNOWN_ERROR
        assert "secret detail" not in response.text
