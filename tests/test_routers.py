"""HTTP-level tests with repositories swapped for in-memory doubles."""

import pytest
from fastapi.testclient import TestClient

from marketplace.main import app
from marketplace.routers.messages import get_chat_service
from marketplace.utils.dependencies import get_current_user, get_user_repository
from marketplace.utils.security import create_access_token


@pytest.fixture
def client(chat_service, user_repo, users):
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def test_conversations_require_token(client):
    assert client.get("/messages/conversations").status_code == 401


def test_bad_token_rejected(client):
    response = client.get("/messages/conversations", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Token is not valid"


def test_token_for_unknown_user_rejected(client):
    assert client.get("/messages/conversations", headers=auth("ghost")).status_code == 401


def test_conversation_flow(client, message_repo):
    message_repo.add("bob", "alice", "desk", "Still available?", minutes=1)

    response = client.get("/messages/conversations", headers=auth("alice"))
    assert response.status_code == 200
    [conversation] = response.json()
    assert conversation["user"] == {"id": "bob", "first_name": "Bob", "last_name": "Diaz"}
    assert conversation["listing"] == {"id": "desk", "title": "Standing desk"}
    assert conversation["unread_count"] == 1

    response = client.patch("/messages/read/bob/desk", headers=auth("alice"))
    assert response.json() == {"updated": 1}
    response = client.patch("/messages/read/bob/desk", headers=auth("alice"))
    assert response.json() == {"updated": 0}

    [conversation] = client.get("/messages/conversations", headers=auth("alice")).json()
    assert conversation["unread_count"] == 0


def test_send_and_read_thread(client):
    response = client.post("/messages", json={"receiver": "bob", "listing": "bike", "content": "Hi Bob"}, headers=auth("alice"))
    assert response.status_code == 201
    assert response.json()["receiver"]["first_name"] == "Bob"

    thread = client.get("/messages/alice/bike", headers=auth("bob")).json()
    assert [m["content"] for m in thread] == ["Hi Bob"]


def test_send_errors_map_to_status_codes(client):
    to_self = client.post("/messages", json={"receiver": "alice", "listing": "bike", "content": "x"}, headers=auth("alice"))
    assert to_self.status_code == 400
    unknown = client.post("/messages", json={"receiver": "bob", "listing": "gone", "content": "x"}, headers=auth("alice"))
    assert unknown.status_code == 404


def test_delete_user_messages_needs_admin(client, message_repo):
    message_repo.add("bob", "alice", "desk", minutes=1)
    assert client.delete("/users/bob/messages", headers=auth("alice")).status_code == 403

    response = client.delete("/users/bob/messages", headers=auth("carol"))
    assert response.json() == {"deleted": 1}


def test_assistant_needs_no_auth(client):
    body = {"messages": [{"role": "user", "content": "under $50"}], "listings": [{"title": "Kettle", "price": 20, "category": "Kitchen"}]}
    response = client.post("/chat", json=body)
    assert response.status_code == 200
    assert "Kettle" in response.json()["message"]


def test_unexpected_errors_become_500(users):
    class BrokenService:
        async def list_conversations(self, user_id):
            raise RuntimeError("database went away")

    app.dependency_overrides[get_current_user] = lambda: users["alice"]
    app.dependency_overrides[get_chat_service] = lambda: BrokenService()
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/messages/conversations")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
