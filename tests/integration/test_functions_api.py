"""
Integration tests for the AI function endpoints
"""

import pytest

from app.core import localization
from app.deps.exceptions import (
    UpstreamBillingRequiredError,
    UpstreamRateLimitedError,
    UpstreamUnavailableError,
)
from app.services.rate_limiter import rate_limiter
from app.services.repositories import ChatRepository
from tests.conftest import USER_ID, OTHER_USER_ID


@pytest.mark.integration
class TestAnalyzeDocumentFunction:

    def test_returns_analysis(self, client, auth_headers):
        response = client.post(
            "/api/functions/analyze-document",
            json={"ocrText": "Employment contract", "documentType": "contract"},
            headers=auth_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["doc_type"] == "contract"
        assert body["clarity_score"] == 70
        assert body["red_flags"] == ["पासपोर्ट राख्ने धारा"]

    def test_requires_token(self, client):
        response = client.post("/api/functions/analyze-document", json={"ocrText": "x"})
        assert response.status_code == 401

    def test_rejects_bad_token(self, client):
        response = client.post(
            "/api/functions/analyze-document",
            json={"ocrText": "x"},
            headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_rate_limited_upstream(self, client, auth_headers, fake_analyzer):
        fake_analyzer.error = UpstreamRateLimitedError()
        response = client.post("/api/functions/analyze-document", json={"ocrText": "x"}, headers=auth_headers)
        assert response.status_code == 429
        assert response.json() == {"error": localization.TOO_MANY_REQUESTS}

    def test_credit_required(self, client, auth_headers, fake_analyzer):
        fake_analyzer.error = UpstreamBillingRequiredError()
        response = client.post("/api/functions/analyze-document", json={"ocrText": "x"}, headers=auth_headers)
        assert response.status_code == 402
        assert response.json() == {"error": localization.CREDIT_REQUIRED}

    def test_other_failure_returns_degraded_body(self, client, auth_headers, fake_analyzer):
        fake_analyzer.error = UpstreamUnavailableError()
        response = client.post("/api/functions/analyze-document", json={"ocrText": "x"}, headers=auth_headers)
        assert response.status_code == 500
        body = response.json()
        assert body["doc_type"] == "other"
        assert body["clarity_score"] == 0
        assert body["summary"] == localization.ANALYSIS_FAILED_SUMMARY
        assert body["red_flags"] == []
        assert "error" in body

    def test_preflight(self, client):
        response = client.options("/api/functions/analyze-document")
        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_browser_preflight_has_empty_body(self, client):
        response = client.options(
            "/api/functions/rag-chat",
            headers={"Origin": "https://app.example.org", "Access-Control-Request-Method": "POST"}
        )
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"


@pytest.mark.integration
class TestRagChatFunction:

    def test_answer_and_persistence(self, client, auth_headers, db_session):
        chat = ChatRepository(db_session).create_chat(USER_ID)

        response = client.post(
            "/api/functions/rag-chat",
            json={"message": "मेरो तलब आएको छैन", "chatHistory": [], "chatId": chat.id, "userId": USER_ID},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["answer"] == "श्रम कानुन अनुसार तलब समयमै पाउनुपर्छ।"
        assert ChatRepository(db_session).count_messages(chat.id) == 2

    def test_chat_of_other_user_is_not_found(self, client, auth_headers, db_session):
        chat = ChatRepository(db_session).create_chat(OTHER_USER_ID)
        response = client.post(
            "/api/functions/rag-chat",
            json={"message": "hi", "chatId": chat.id},
            headers=auth_headers
        )
        assert response.status_code == 404

    def test_upstream_failure_returns_apology(self, client, auth_headers, fake_transport):
        fake_transport.error = UpstreamUnavailableError()
        response = client.post("/api/functions/rag-chat", json={"message": "hi"}, headers=auth_headers)
        assert response.status_code == 500
        assert response.json()["answer"] == localization.CHAT_APOLOGY

    def test_upstream_rate_limit(self, client, auth_headers, fake_transport):
        fake_transport.error = UpstreamRateLimitedError()
        response = client.post("/api/functions/rag-chat", json={"message": "hi"}, headers=auth_headers)
        assert response.status_code == 429
        assert response.json()["error"] == localization.TOO_MANY_REQUESTS


@pytest.mark.integration
class TestTranslateFunction:

    def test_translation(self, client, auth_headers):
        response = client.post(
            "/api/functions/translate",
            json={"text": "नमस्ते", "fromLang": "ne", "toLang": "ar"},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == {"translation": "[ar] नमस्ते"}

    def test_unknown_language_rejected(self, client, auth_headers):
        response = client.post(
            "/api/functions/translate",
            json={"text": "hi", "fromLang": "en", "toLang": "fr"},
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_failure_returns_empty_translation(self, client, auth_headers, fake_translator):
        fake_translator.error = UpstreamUnavailableError()
        response = client.post(
            "/api/functions/translate",
            json={"text": "hi", "fromLang": "en", "toLang": "ne"},
            headers=auth_headers
        )
        assert response.status_code == 500
        assert response.json()["translation"] == ""


@pytest.mark.integration
class TestInboundRateLimit:

    def test_function_routes_are_limited(self, client, auth_headers):
        rate_limiter.reset(limit=2)
        payload = {"text": "hi", "fromLang": "en", "toLang": "ne"}

        assert client.post("/api/functions/translate", json=payload, headers=auth_headers).status_code == 200
        assert client.post("/api/functions/translate", json=payload, headers=auth_headers).status_code == 200
        response = client.post("/api/functions/translate", json=payload, headers=auth_headers)

        assert response.status_code == 429
        assert response.json() == {"error": localization.TOO_MANY_REQUESTS}
        assert "Retry-After" in response.headers

    def test_other_routes_are_not_limited(self, client, auth_headers):
        rate_limiter.reset(limit=1)
        for _ in range(3):
            assert client.get("/api/chats", headers=auth_headers).status_code == 200
