"""Integration tests for the message and user HTTP endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cofound.infrastructure.repositories import UserRepository

from conftest import FakeHandle


@pytest.fixture
def client(context):
    from main import create_app

    app = create_app()
    app.state.messaging_context = context
    with TestClient(app) as test_client:
        yield test_client


def test_history_requires_both_users(client, users) -> None:
    response = client.get("/messages/history", params={"user1": "X"})

    assert response.status_code == 400


def test_history_lists_the_conversation(client, users, store_message) -> None:
    store_message("X", "Y", "hi")
    store_message("Y", "X", "hello")

    response = client.get("/messages/history", params={"user1": "X", "user2": "Y"})

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert [message["content"] for message in messages] == ["hi", "hello"]
    assert messages[0]["senderId"] == "X"
    assert messages[0]["isDelivered"] is False


def test_status_reports_presence(client, users, context) -> None:
    context.registry.register("Y", FakeHandle("y"))

    response = client.get("/messages/status", params={"userId": "Y"})

    assert response.status_code == 200
    body = response.json()
    assert body["isOnline"] is True
    assert body["status"] == "offline"

    assert client.get("/messages/status", params={"userId": "ghost"}).status_code == 404


def test_only_the_sender_can_delete_a_message(client, users, store_message) -> None:
    message = store_message("X", "Y", "regret")

    assert client.delete(f"/messages/{message.id}", params={"userId": "Y"}).status_code == 403
    assert client.delete(f"/messages/{message.id}", params={"userId": "X"}).status_code == 204
    assert client.delete(f"/messages/{message.id}", params={"userId": "X"}).status_code == 404


def test_unseen_messages_are_grouped_by_sender(client, users, store_message) -> None:
    first = store_message("X", "Y", "one")
    store_message("X", "Y", "two", delivered=True)

    response = client.get("/messages/unseen/Y")

    assert response.status_code == 200
    [group] = response.json()
    assert group["senderId"] == "X"
    assert group["messageCount"] == 2
    assert group["messages"][0]["id"] == first.id
    assert set(group["messages"][0]) == {"id", "content", "createdAt"}


def test_unread_counts_only_delivered_messages(client, users, store_message) -> None:
    store_message("X", "Y", "pending")
    store_message("X", "Y", "delivered", delivered=True)

    [summary] = client.get("/messages/unread/Y").json()

    assert summary == {
        "senderId": "X",
        "count": 1,
        "latestMessage": "delivered",
        "latestMessageTimestamp": summary["latestMessageTimestamp"],
    }


def test_mark_conversation_seen_notifies_sender(client, users, store_message, context) -> None:
    message = store_message("X", "Y", "hello", delivered=True)
    sender = FakeHandle("x")
    context.registry.register("X", sender)
    context.unread.seed("Y", 1)

    response = client.put("/messages/seen", json={"senderId": "X", "recipientId": "Y"})

    assert response.status_code == 200
    assert response.json() == {"updatedMessageCount": 1, "messageIds": [message.id]}
    assert sender.events("message_seen") == [{"messageId": message.id, "isSeen": True}]
    assert context.unread.get("Y") == 0

    again = client.put("/messages/seen", json={"senderId": "X", "recipientId": "Y"})
    assert again.status_code == 404


def test_register_push_token(client, users, db_session) -> None:
    response = client.put("/users/Y/push-token", json={"pushToken": "device-token"})

    assert response.status_code == 204
    db_session.expire_all()
    assert UserRepository(db_session).get("Y").push_token == "device-token"
    assert client.put("/users/ghost/push-token", json={"pushToken": "x"}).status_code == 404


def test_online_lists_connected_identities(client, users, context) -> None:
    context.registry.register("Y", FakeHandle("y"))
    context.registry.register("X", FakeHandle("x"))

    response = client.get("/messages/online")

    assert response.status_code == 200
    assert response.json() == {"userIds": ["X", "Y"]}
