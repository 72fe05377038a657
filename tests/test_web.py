"""Tests for the FastAPI moderation endpoints."""

import pytest
from fastapi.testclient import TestClient

from web.backend.app.main import app
from web.backend.app.routers import chat, moderation


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("CHATMOD_CONFIG", raising=False)
    moderation.reset_state()
    chat.reset_publisher()
    with TestClient(app) as c:
        yield c
    moderation.reset_state()
    chat.reset_publisher()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_evaluate_accepts_and_records(client):
    resp = client.post(
        "/api/moderation/evaluate",
        json={"sender_id": "alice", "text": "Hello World", "now_ms": 0},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["accepted"] is True
    assert body["reason_code"] == "none"
    assert body["output_text"] == "Hello World"

    state = client.get("/api/moderation/senders/alice").json()
    assert state["recent_messages"] == [{"text": "Hello World", "sent_at_ms": 0}]
    assert state["recent_timestamps"] == [0]


def test_evaluate_duplicate(client):
    payload = {"sender_id": "alice", "text": "Hello World", "now_ms": 0}
    client.post("/api/moderation/evaluate", json=payload)
    resp = client.post("/api/moderation/evaluate", json={**payload, "now_ms": 4000})
    body = resp.json()
    assert body["accepted"] is False
    assert body["reason_code"] == "duplicate_exact"
    assert body["reason"] == "Duplicate message detected"


def test_evaluate_empty_text_is_422(client):
    resp = client.post(
        "/api/moderation/evaluate", json={"sender_id": "alice", "text": "   "}
    )
    assert resp.status_code == 422


def test_unknown_sender_is_404(client):
    assert client.get("/api/moderation/senders/nobody").status_code == 404


def test_toggles(client):
    resp = client.put("/api/moderation/toggles", json={"profanity_filter_enabled": False})
    assert resp.status_code == 200
    config = resp.json()
    assert config["profanity_filter_enabled"] is False
    assert config["rate_limit_enabled"] is True

    body = client.post(
        "/api/moderation/evaluate",
        json={"sender_id": "alice", "text": "this is spam", "now_ms": 0},
    ).json()
    assert body["output_text"] == "this is spam"
    assert client.get("/api/moderation/config").json()["profanity_filter_enabled"] is False


def test_chat_send_and_list(client):
    resp = client.post(
        "/api/chat/send",
        json={"sender_id": "u1", "username": "Alice", "text": "HELLO EVERYONE THIS IS A TEST", "now_ms": 0},
    )
    body = resp.json()
    assert body["status"] == "sent"
    assert body["verdict"]["was_transformed"] is True
    assert body["message"]["text"] == "Hello everyone this is a test"

    messages = client.get("/api/chat/messages").json()
    assert len(messages) == 1
    assert messages[0]["moderated"] is True

    stats = client.get("/api/moderation/stats").json()
    assert stats["messages_sent"] == 1
    assert stats["messages_filtered"] == 1


def test_chat_send_blocked(client):
    payload = {"sender_id": "u1", "username": "Alice", "text": "Hello World", "now_ms": 0}
    client.post("/api/chat/send", json=payload)
    body = client.post("/api/chat/send", json={**payload, "now_ms": 100}).json()
    assert body["status"] == "blocked"
    assert body["notice"] == "Message blocked: Duplicate message detected"
    assert len(client.get("/api/chat/messages").json()) == 1
    assert client.get("/api/moderation/stats").json()["messages_blocked"] == 1


def test_chat_send_empty_is_422(client):
    resp = client.post(
        "/api/chat/send", json={"sender_id": "u1", "username": "Alice", "text": ""}
    )
    assert resp.status_code == 422
