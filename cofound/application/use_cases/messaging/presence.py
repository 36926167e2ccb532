"""Connect and disconnect lifecycle of chat handles."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from cofound.domain.entities import USER_STATUS_OFFLINE, USER_STATUS_ONLINE, User
from cofound.domain.exceptions import NotFound
from cofound.infrastructure.realtime import (
    EVENT_ERROR,
    EVENT_USER_UNSEEN_MESSAGE_COUNT,
    ConnectionHandle,
    serialize_unread_summaries,
)
from cofound.infrastructure.repositories import UserRepository
from cofound.utils import now_in_app_timezone

from .context import MessagingContext
from .drain import drain_undelivered
from .unread import load_unread_summaries

logger = logging.getLogger(__name__)


async def resolve_identity(context: MessagingContext, user_id: str) -> User:
    """Return the directory record of ``user_id`` or raise :class:`NotFound`."""

    user = await context.run_db(lambda session: UserRepository(session).get(user_id))
    if user is None:
        raise NotFound("User not found", details={"userId": user_id})
    return user


async def connect_user(
    context: MessagingContext, user_id: str, handle: ConnectionHandle
) -> int:
    """Register ``handle``, drain the backlog and send the initial badge state.

    Returns the number of drained messages.
    """

    context.registry.register(user_id, handle)
    logger.info("Chat handle connected for %s", user_id)
    try:
        await context.run_db(
            lambda session: UserRepository(session).update_presence(
                user_id, status=USER_STATUS_ONLINE, last_seen=now_in_app_timezone()
            )
        )
        drained = await drain_undelivered(context, user_id, handle)
        summaries = await load_unread_summaries(context, user_id)
    except SQLAlchemyError:
        logger.exception("Failed to load the chat state of %s", user_id)
        await context.emitter.emit(
            handle, EVENT_ERROR, {"error": "Failed to load pending messages"}
        )
        return 0

    context.unread.seed(user_id, sum(summary.count for summary in summaries))
    await context.emitter.emit(
        handle, EVENT_USER_UNSEEN_MESSAGE_COUNT, serialize_unread_summaries(summaries)
    )
    return drained


async def disconnect_user(
    context: MessagingContext, user_id: str, handle: ConnectionHandle
) -> bool:
    """Drop ``handle``; mark the identity offline once its last handle is gone."""

    went_offline = context.registry.unregister(user_id, handle)
    if not went_offline:
        return False
    context.unread.discard(user_id)

    try:
        await context.run_db(
            lambda session: UserRepository(session).update_presence(
                user_id, status=USER_STATUS_OFFLINE, last_seen=now_in_app_timezone()
            )
        )
    except SQLAlchemyError:
        logger.exception("Failed to record offline status for %s", user_id)
    logger.info("User %s went offline", user_id)
    return True


__all__ = ["connect_user", "disconnect_user", "resolve_identity"]
