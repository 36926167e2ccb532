"""Tests for the push notification client."""

from __future__ import annotations

import json

import httpx
import pytest

from cofound.config import Settings
from cofound.domain.entities import Message, User
from cofound.domain.exceptions import DeliveryFailure
from cofound.infrastructure.push import (
    PushNotification,
    PushNotificationClient,
    build_message_notification,
)


def _settings(**overrides) -> Settings:
    values = {
        "push_api_url": "https://push.example.test/send",
        "push_server_key": "server-key",
    }
    values.update(overrides)
    return Settings(**values)


def _notification() -> PushNotification:
    return PushNotification(token="device-token", title="Hi", body="there", data={"messageId": "1"})


def test_notification_preview_is_truncated() -> None:
    message = Message(id=5, sender_id="X", recipient_id="Y", content="a" * 40)
    sender = User(id="X", name="Xavier", profile_photo="x.png")

    notification = build_message_notification(message, token="tok", sender=sender)

    assert notification.title == "Xavier sent you a message"
    assert notification.body == "a" * 30 + "..."
    assert notification.data == {"senderId": "X", "messageId": "5", "profilePhoto": "x.png"}


def test_send_posts_to_the_provider() -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": 1})

    client = PushNotificationClient(_settings(), transport=httpx.MockTransport(handler))

    assert client.send(_notification()) is True
    [request] = requests
    assert request.headers["Authorization"] == "key=server-key"
    body = json.loads(request.content)
    assert body["to"] == "device-token"
    assert body["notification"] == {"title": "Hi", "body": "there"}


def test_provider_error_raises_delivery_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "Unavailable"})

    client = PushNotificationClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(DeliveryFailure) as excinfo:
        client.send(_notification())
    assert excinfo.value.details == {"status": 503, "reason": "Unavailable"}


def test_transport_error_raises_delivery_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = PushNotificationClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(DeliveryFailure):
        client.send(_notification())


def test_unconfigured_client_is_disabled() -> None:
    client = PushNotificationClient(_settings(push_api_url=None, push_server_key=None))

    assert client.enabled is False
    assert client.send(_notification()) is False


def test_settings_require_url_and_key_together() -> None:
    with pytest.raises(ValueError):
        _settings(push_server_key=None)
