"""Tests for the delivery engine handling ``send_message`` events."""

from __future__ import annotations

import pytest

from cofound.application.use_cases.messaging import send_message
from cofound.domain.entities import MESSAGE_STATUS_DELIVERED, MESSAGE_STATUS_SENT
from cofound.infrastructure.repositories import UserRepository
from cofound.schemas import SendMessageEvent

from conftest import FakeDeliveryQueue, FakeHandle

pytestmark = pytest.mark.anyio


def _event(content: str = "hello", **overrides) -> SendMessageEvent:
    data = {"senderId": "X", "recipientId": "Y", "content": content, "tempId": "t-1"}
    data.update(overrides)
    return SendMessageEvent.model_validate(data)


async def test_online_recipient_receives_message_immediately(context, users, load_message) -> None:
    sender, recipient = FakeHandle("x"), FakeHandle("y")
    context.registry.register("X", sender)
    context.registry.register("Y", recipient)

    message = await send_message(context, sender, "X", _event())

    received = recipient.events("receive_message")
    assert len(received) == 1
    assert received[0]["content"] == "hello"
    assert received[0]["isSentByMe"] is False
    assert received[0]["isDelivered"] is True

    badge = recipient.events("message_unread_count_when_connected")[-1]
    assert len(badge) == 1
    assert badge[0]["senderId"] == "X"
    assert badge[0]["count"] == 1
    assert badge[0]["latestMessage"] == "hello"

    ack = sender.events("message_sent_ack")[0]
    assert ack["tempId"] == "t-1"
    assert ack["message"]["isSentByMe"] is True
    assert ack["message"]["isDelivered"] is True

    stored = load_message(message.id)
    assert stored.is_delivered is True
    assert stored.status == MESSAGE_STATUS_DELIVERED
    assert context.unread.get("Y") == 1
    assert context.delivery_queue.enqueued == []


async def test_every_recipient_handle_gets_the_message(context, users) -> None:
    sender = FakeHandle("x")
    phone, laptop = FakeHandle("phone"), FakeHandle("laptop")
    context.registry.register("Y", phone)
    context.registry.register("Y", laptop)

    await send_message(context, sender, "X", _event())

    assert len(phone.events("receive_message")) == 1
    assert len(laptop.events("receive_message")) == 1
    assert context.unread.get("Y") == 1


async def test_offline_recipient_without_token_waits_for_reconnect(
    context, users, load_message
) -> None:
    sender = FakeHandle("x")

    message = await send_message(context, sender, "X", _event())

    stored = load_message(message.id)
    assert stored.is_delivered is False
    assert stored.status == MESSAGE_STATUS_SENT
    assert context.delivery_queue.enqueued == []
    assert sender.events("message_sent_ack")[0]["message"]["isDelivered"] is False


async def test_offline_recipient_with_token_is_queued_for_push(context, users, db_session) -> None:
    UserRepository(db_session).set_push_token("Y", "device-token")
    sender = FakeHandle("x")

    message = await send_message(context, sender, "X", _event())

    assert [queued.id for queued in context.delivery_queue.enqueued] == [message.id]
    assert sender.events("message_sent_ack")


async def test_queue_failure_does_not_fail_the_send(users, db_session, context) -> None:
    UserRepository(db_session).set_push_token("Y", "device-token")
    context.delivery_queue = FakeDeliveryQueue(fail=True)
    sender = FakeHandle("x")

    message = await send_message(context, sender, "X", _event())

    assert message is not None
    assert sender.events("message_sent_ack")
    assert sender.events("message_failed") == []


async def test_dead_recipient_handle_falls_back_to_offline_path(
    context, users, load_message
) -> None:
    sender, stale = FakeHandle("x"), FakeHandle("stale", fail=True)
    context.registry.register("Y", stale)

    message = await send_message(context, sender, "X", _event())

    assert load_message(message.id).is_delivered is False
    assert context.unread.get("Y") == 0
    assert sender.events("message_sent_ack")[0]["message"]["isDelivered"] is False


async def test_unknown_recipient_reports_message_failed(context, users) -> None:
    sender = FakeHandle("x")

    message = await send_message(context, sender, "X", _event(recipientId="ghost"))

    assert message is None
    failure = sender.events("message_failed")[0]
    assert failure["code"] == "NotFound"
    assert failure["tempId"] == "t-1"
    assert sender.events("message_sent_ack") == []


async def test_sender_must_match_connection_identity(context, users) -> None:
    impostor = FakeHandle("y")

    message = await send_message(context, impostor, "Y", _event())

    assert message is None
    assert impostor.events("message_failed")[0]["code"] == "InvalidRequest"
