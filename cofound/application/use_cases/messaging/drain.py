"""Flush messages persisted while the recipient was unreachable."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from cofound.domain.entities import MESSAGE_STATUS_DELIVERED, Message
from cofound.infrastructure.realtime import (
    EVENT_RECEIVE_MESSAGE,
    ConnectionHandle,
    serialize_message,
)
from cofound.infrastructure.repositories import MessageRepository
from cofound.utils import now_in_app_timezone

from .context import MessagingContext

logger = logging.getLogger(__name__)


async def drain_undelivered(
    context: MessagingContext, user_id: str, handle: ConnectionHandle
) -> int:
    """Deliver the backlog of ``user_id`` over the newly opened ``handle``.

    Each message is claimed with a conditional write before it is emitted, so
    when several handles of the same identity drain at once every message is
    sent over exactly one of them. A claimed message the handle rejects goes
    to the identity's other handles, or the claim is released for a later
    drain. Returns the number of messages delivered.
    """

    pending: list[Message] = list(
        await context.run_db(
            lambda session: MessageRepository(session).list_undelivered_for(user_id)
        )
    )
    delivered = 0
    for message in pending:
        delivered_at = now_in_app_timezone()
        claimed = await context.run_db(
            lambda session, message_id=message.id: MessageRepository(session).mark_delivered(
                message_id, delivered_at=delivered_at
            )
        )
        if not claimed:
            continue

        payload = serialize_message(
            replace(
                message,
                is_delivered=True,
                delivered_at=delivered_at,
                status=MESSAGE_STATUS_DELIVERED,
            ),
            is_sent_by_me=False,
        )
        if await context.emitter.emit(handle, EVENT_RECEIVE_MESSAGE, payload):
            context.unread.increment(user_id)
            delivered += 1
            continue

        logger.warning(
            "Stopped draining for %s: handle closed after claiming message %s",
            user_id,
            message.id,
        )
        if await _hand_over(context, user_id, handle, message, payload, delivered_at):
            context.unread.increment(user_id)
            delivered += 1
        break

    if pending:
        logger.info("Drained %s of %s pending messages for %s", delivered, len(pending), user_id)
    return delivered


async def _hand_over(
    context: MessagingContext,
    user_id: str,
    dead_handle: ConnectionHandle,
    message: Message,
    payload: dict,
    delivered_at: datetime,
) -> bool:
    """Send a claimed message over the other handles, or release the claim."""

    reached = 0
    for other in context.registry.handles_for(user_id) - {dead_handle}:
        if await context.emitter.emit(other, EVENT_RECEIVE_MESSAGE, payload):
            reached += 1
    if reached:
        return True

    released = await context.run_db(
        lambda session: MessageRepository(session).release_delivery(
            message.id, delivered_at=delivered_at
        )
    )
    if released:
        logger.info("Released delivery claim of message %s for a later drain", message.id)
    return False


__all__ = ["drain_undelivered"]
