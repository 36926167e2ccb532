"""Seen/ack protocol: recipients acknowledge reading a batch of messages."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from cofound.domain.exceptions import InvalidRequest
from cofound.infrastructure.realtime import (
    EVENT_ERROR,
    EVENT_MESSAGE_SEEN,
    EVENT_MESSAGE_SEEN_ACK,
    ConnectionHandle,
)
from cofound.infrastructure.repositories import MessageRepository
from cofound.schemas import MessageSeenEvent

from .context import MessagingContext

logger = logging.getLogger(__name__)


async def mark_messages_seen(
    context: MessagingContext,
    handle: ConnectionHandle,
    user_id: str,
    event: MessageSeenEvent,
) -> list[int]:
    """Mark the given messages as seen and notify their sender.

    Only delivered, unseen messages of the sender/recipient pair transition;
    everything else is skipped, which makes repeated acknowledgements
    harmless. Returns the identifiers that transitioned.
    """

    if event.recipient_id != user_id:
        error = InvalidRequest(
            "Only the recipient can mark messages as seen",
            details={"recipientId": event.recipient_id},
        )
        await context.emitter.emit(handle, EVENT_ERROR, error.to_payload())
        return []

    try:
        transitioned = await context.run_db(
            lambda session: MessageRepository(session).mark_seen(
                event.message_ids,
                sender_id=event.sender_id,
                recipient_id=event.recipient_id,
            )
        )
    except SQLAlchemyError:
        logger.exception("Failed to mark messages seen for %s", user_id)
        await context.emitter.emit(
            handle, EVENT_ERROR, {"error": "Failed to mark messages as seen"}
        )
        return []

    await notify_seen(context, sender_id=event.sender_id, recipient_id=user_id, message_ids=transitioned)
    await context.emitter.emit(
        handle,
        EVENT_MESSAGE_SEEN_ACK,
        {"messageIds": event.message_ids, "updatedMessageIds": transitioned},
    )
    return transitioned


async def notify_seen(
    context: MessagingContext,
    *,
    sender_id: str,
    recipient_id: str,
    message_ids: list[int],
) -> None:
    """Apply the counter decrement and send read receipts to the sender."""

    context.unread.decrement(recipient_id, len(message_ids))
    for message_id in message_ids:
        await context.emitter.emit_to_user(
            sender_id, EVENT_MESSAGE_SEEN, {"messageId": message_id, "isSeen": True}
        )


__all__ = ["mark_messages_seen", "notify_seen"]
