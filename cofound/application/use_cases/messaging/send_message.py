"""Delivery engine: persist a message and route it to its recipient."""

from __future__ import annotations

import logging
from dataclasses import replace

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from cofound.domain.entities import MESSAGE_STATUS_DELIVERED, Message, User
from cofound.domain.exceptions import DomainException, InvalidRequest, NotFound
from cofound.infrastructure.realtime import (
    EVENT_MESSAGE_FAILED,
    EVENT_MESSAGE_SENT_ACK,
    EVENT_RECEIVE_MESSAGE,
    EVENT_UNREAD_COUNT_WHEN_CONNECTED,
    ConnectionHandle,
    serialize_message,
    serialize_unread_summaries,
)
from cofound.infrastructure.repositories import MessageRepository, UserRepository
from cofound.schemas import SendMessageEvent
from cofound.utils import now_in_app_timezone

from .context import MessagingContext
from .unread import load_unread_summaries

logger = logging.getLogger(__name__)


async def send_message(
    context: MessagingContext,
    handle: ConnectionHandle,
    user_id: str,
    event: SendMessageEvent,
) -> Message | None:
    """Handle a ``send_message`` event received on ``handle``.

    The message is persisted before any delivery attempt. Failures are
    reported to the acting handle only, as ``message_failed``.
    """

    try:
        if event.sender_id != user_id:
            raise InvalidRequest(
                "senderId does not match the connected identity",
                details={"senderId": event.sender_id},
            )
        message, recipient = await context.run_db(
            lambda session: _persist_message(session, event)
        )
    except DomainException as exc:
        await context.emitter.emit(
            handle, EVENT_MESSAGE_FAILED, {**exc.to_payload(), "tempId": event.temp_id}
        )
        return None
    except SQLAlchemyError:
        logger.exception("Failed to persist message from %s", user_id)
        await context.emitter.emit(
            handle,
            EVENT_MESSAGE_FAILED,
            {"error": "Failed to send message", "tempId": event.temp_id},
        )
        return None

    logger.info("Message %s sent from %s to %s", message.id, message.sender_id, message.recipient_id)

    delivered_message = await deliver_live(context, message)
    if delivered_message is not None:
        message = delivered_message
    else:
        await _request_push_fallback(context, message, recipient)

    await context.emitter.emit(
        handle,
        EVENT_MESSAGE_SENT_ACK,
        {"tempId": event.temp_id, "message": serialize_message(message, is_sent_by_me=True)},
    )
    return message


async def deliver_live(context: MessagingContext, message: Message) -> Message | None:
    """Push ``message`` to every handle of its recipient.

    Returns the delivered message, or ``None`` when the recipient is offline or
    none of its handles accepted the frame.
    """

    recipient_id = message.recipient_id
    if not context.registry.is_online(recipient_id):
        return None

    delivered_at = now_in_app_timezone()
    delivered = replace(
        message,
        is_delivered=True,
        delivered_at=delivered_at,
        status=MESSAGE_STATUS_DELIVERED,
    )
    reached = await context.emitter.emit_to_user(
        recipient_id, EVENT_RECEIVE_MESSAGE, serialize_message(delivered, is_sent_by_me=False)
    )
    if reached == 0:
        logger.warning("No live handle of %s accepted message %s", recipient_id, message.id)
        return None

    try:
        claimed = await context.run_db(
            lambda session: MessageRepository(session).mark_delivered(
                message.id, delivered_at=delivered_at
            )
        )
        if claimed:
            context.unread.increment(recipient_id)
        summaries = await load_unread_summaries(context, recipient_id)
    except SQLAlchemyError:
        logger.exception("Failed to record delivery of message %s", message.id)
        return delivered

    await context.emitter.emit_to_user(
        recipient_id,
        EVENT_UNREAD_COUNT_WHEN_CONNECTED,
        serialize_unread_summaries(summaries),
    )
    return delivered


def _persist_message(session: Session, event: SendMessageEvent) -> tuple[Message, User]:
    recipient = UserRepository(session).get(event.recipient_id)
    if recipient is None:
        raise NotFound(
            "Recipient not found", details={"recipientId": event.recipient_id}
        )
    message = MessageRepository(session).create(
        Message(
            id=None,
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            content=event.content,
        )
    )
    return message, recipient


async def _request_push_fallback(
    context: MessagingContext, message: Message, recipient: User
) -> None:
    """Hand ``message`` to the delivery queue when the recipient can be notified."""

    if not recipient.push_token:
        logger.info(
            "Recipient %s is offline without a push token; message %s waits for reconnect",
            recipient.id,
            message.id,
        )
        return
    try:
        await run_in_threadpool(context.delivery_queue.enqueue, message)
    except Exception:  # noqa: BLE001 - the send itself already succeeded
        logger.exception("Failed to queue push notification for message %s", message.id)


__all__ = ["send_message", "deliver_live"]
