"""
Integration tests for chat sessions and messages
"""

import pytest

from app.core import localization
from app.deps.exceptions import UpstreamUnavailableError


@pytest.mark.integration
class TestChatsApi:

    def test_create_list_rename_delete(self, client, auth_headers):
        created = client.post("/api/chats", json={}, headers=auth_headers)
        assert created.status_code == 201
        chat = created.json()
        assert chat["title"] == localization.DEFAULT_CHAT_TITLE

        listed = client.get("/api/chats", headers=auth_headers).json()
        assert [c["id"] for c in listed] == [chat["id"]]

        renamed = client.patch(f"/api/chats/{chat['id']}", json={"title": "भिसा समस्या"}, headers=auth_headers)
        assert renamed.json()["title"] == "भिसा समस्या"

        assert client.delete(f"/api/chats/{chat['id']}", headers=auth_headers).status_code == 204
        assert client.get("/api/chats", headers=auth_headers).json() == []

    def test_chats_are_private(self, client, auth_headers, other_auth_headers):
        chat = client.post("/api/chats", json={}, headers=auth_headers).json()

        assert client.get("/api/chats", headers=other_auth_headers).json() == []
        assert client.get(f"/api/chats/{chat['id']}/messages", headers=other_auth_headers).status_code == 404
        assert client.delete(f"/api/chats/{chat['id']}", headers=other_auth_headers).status_code == 404

    def test_first_nepali_message_names_new_chat(self, client, auth_headers):
        message = "मेरो कम्पनीले तीन महिनादेखि तलब दिएको छैन र पासपोर्ट पनि फिर्ता दिँदैन, के गर्ने?"

        response = client.post("/api/chats/messages", json={"content": message}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["error"] is None
        assert [m["role"] for m in body["messages"]] == ["user", "assistant"]
        assert all(isinstance(m["id"], int) for m in body["messages"])
        assert body["messages"][1]["metadata"] == {"source": "dify"}

        chats = client.get("/api/chats", headers=auth_headers).json()
        assert chats[0]["id"] == body["chat_id"]
        assert chats[0]["title"] == message[:50] + "..."

    def test_follow_up_keeps_title_and_order(self, client, auth_headers):
        first = client.post("/api/chats/messages", json={"content": "पहिलो"}, headers=auth_headers).json()
        chat_id = first["chat_id"]

        second = client.post(f"/api/chats/{chat_id}/messages", json={"content": "दोस्रो"}, headers=auth_headers).json()

        assert [m["content"] for m in second["messages"] if m["role"] == "user"] == ["पहिलो", "दोस्रो"]
        messages = client.get(f"/api/chats/{chat_id}/messages", headers=auth_headers).json()
        assert len(messages) == 4
        assert client.get("/api/chats", headers=auth_headers).json()[0]["title"] == "पहिलो"

    def test_send_failure_reports_localized_error(self, client, auth_headers, fake_transport):
        fake_transport.error = UpstreamUnavailableError()

        body = client.post("/api/chats/messages", json={"content": "नमस्ते"}, headers=auth_headers).json()

        assert body["error"] == localization.CHAT_SEND_FAILED
        assert body["messages"][-1]["content"] == localization.CHAT_APOLOGY
        assert body["messages"][-1]["id"].startswith("error-")

    def test_document_context_forwarded(self, client, auth_headers, fake_transport):
        client.post(
            "/api/chats/messages",
            json={"content": "यो करार ठीक छ?", "documentContext": "Document type: contract"},
            headers=auth_headers
        )
        assert fake_transport.asked[0]["document_context"] == "Document type: contract"
