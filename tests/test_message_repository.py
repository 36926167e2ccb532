"""Tests for the conditional state transitions of the message store."""

from __future__ import annotations

from cofound.domain.entities import (
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_FAILED,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_SENT,
)
from cofound.infrastructure.repositories import MessageRepository


def test_created_message_starts_undelivered(db_session, users, store_message) -> None:
    message = store_message("X", "Y", "hello")

    assert message.id is not None
    assert message.status == MESSAGE_STATUS_SENT
    assert message.is_delivered is False
    assert message.is_seen is False
    assert message.created_at is not None
    assert message.lifecycle_violations() == []


def test_mark_delivered_only_succeeds_once(db_session, users, store_message, load_message) -> None:
    message = store_message("X", "Y", "hello")
    repository = MessageRepository(db_session)

    assert repository.mark_delivered(message.id) is True
    assert repository.mark_delivered(message.id) is False

    stored = load_message(message.id)
    assert stored.is_delivered is True
    assert stored.status == MESSAGE_STATUS_DELIVERED
    assert stored.delivered_at is not None
    assert stored.lifecycle_violations() == []


def test_mark_seen_skips_undelivered_and_foreign_messages(
    db_session, users, store_message, load_message
) -> None:
    delivered = store_message("X", "Y", "one", delivered=True)
    pending = store_message("X", "Y", "two")
    reverse = store_message("Y", "X", "three", delivered=True)
    repository = MessageRepository(db_session)

    transitioned = repository.mark_seen(
        [delivered.id, pending.id, reverse.id], sender_id="X", recipient_id="Y"
    )

    assert transitioned == [delivered.id]
    assert load_message(delivered.id).status == MESSAGE_STATUS_READ
    assert load_message(delivered.id).lifecycle_violations() == []
    assert load_message(pending.id).is_seen is False
    assert load_message(reverse.id).is_seen is False
    assert repository.mark_seen([delivered.id], sender_id="X", recipient_id="Y") == []


def test_mark_failed_never_overrides_a_delivery(db_session, users, store_message, load_message) -> None:
    delivered = store_message("X", "Y", "made it", delivered=True)
    stuck = store_message("X", "Y", "stuck")
    repository = MessageRepository(db_session)

    assert repository.mark_failed(delivered.id) is False
    assert repository.mark_failed(stuck.id) is True
    assert repository.mark_failed(stuck.id) is False

    assert load_message(delivered.id).status == MESSAGE_STATUS_DELIVERED
    assert load_message(stuck.id).status == MESSAGE_STATUS_FAILED
    assert load_message(stuck.id).lifecycle_violations() == []
    assert load_message(delivered.id).lifecycle_violations() == []


def test_history_returns_both_directions_in_send_order(db_session, users, store_message) -> None:
    first = store_message("X", "Y", "hi")
    second = store_message("Y", "X", "hey")
    third = store_message("X", "Y", "how are you?")

    history = MessageRepository(db_session).history("Y", "X")

    assert [message.id for message in history] == [first.id, second.id, third.id]


def test_delete_removes_the_message(db_session, users, store_message, load_message) -> None:
    message = store_message("X", "Y", "oops")

    MessageRepository(db_session).delete(message.id)

    assert load_message(message.id) is None
