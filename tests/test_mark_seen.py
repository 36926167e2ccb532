"""Tests for the seen/ack protocol."""

from __future__ import annotations

import pytest

from cofound.application.use_cases.messaging import mark_messages_seen, send_message
from cofound.domain.entities import MESSAGE_STATUS_READ
from cofound.schemas import MessageSeenEvent, SendMessageEvent

from conftest import FakeHandle

pytestmark = pytest.mark.anyio


def _seen(message_ids, sender_id: str = "X", recipient_id: str = "Y") -> MessageSeenEvent:
    return MessageSeenEvent.model_validate(
        {"messageIds": message_ids, "senderId": sender_id, "recipientId": recipient_id}
    )


async def test_seen_flow_notifies_sender_and_clears_badge(context, users, load_message) -> None:
    sender, recipient = FakeHandle("x"), FakeHandle("y")
    context.registry.register("X", sender)
    context.registry.register("Y", recipient)
    message = await send_message(
        context,
        sender,
        "X",
        SendMessageEvent.model_validate(
            {"senderId": "X", "recipientId": "Y", "content": "hello", "tempId": 7}
        ),
    )
    assert context.unread.get("Y") == 1

    transitioned = await mark_messages_seen(context, recipient, "Y", _seen([message.id]))

    assert transitioned == [message.id]
    assert sender.events("message_seen") == [{"messageId": message.id, "isSeen": True}]
    assert recipient.events("message_seen_ack") == [
        {"messageIds": [message.id], "updatedMessageIds": [message.id]}
    ]
    assert context.unread.get("Y") == 0
    stored = load_message(message.id)
    assert stored.is_seen is True
    assert stored.status == MESSAGE_STATUS_READ
    assert stored.seen_at is not None


async def test_repeated_acknowledgement_is_idempotent(context, users, store_message) -> None:
    message = store_message("X", "Y", "hello", delivered=True)
    sender, recipient = FakeHandle("x"), FakeHandle("y")
    context.registry.register("X", sender)
    context.unread.seed("Y", 1)

    await mark_messages_seen(context, recipient, "Y", _seen([message.id]))
    again = await mark_messages_seen(context, recipient, "Y", _seen([message.id]))

    assert again == []
    assert len(sender.events("message_seen")) == 1
    assert recipient.events("message_seen_ack")[-1]["updatedMessageIds"] == []
    assert context.unread.get("Y") == 0


async def test_undelivered_messages_cannot_be_seen(context, users, store_message, load_message) -> None:
    message = store_message("X", "Y", "not yet delivered")

    transitioned = await mark_messages_seen(context, FakeHandle("y"), "Y", _seen([message.id]))

    assert transitioned == []
    assert load_message(message.id).is_seen is False


async def test_only_the_recipient_can_mark_messages_seen(context, users, store_message) -> None:
    message = store_message("X", "Y", "hello", delivered=True)
    intruder = FakeHandle("x")

    transitioned = await mark_messages_seen(context, intruder, "X", _seen([message.id]))

    assert transitioned == []
    assert intruder.events("error")[0]["code"] == "InvalidRequest"
    assert intruder.events("message_seen_ack") == []
