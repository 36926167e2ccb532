"""Unread aggregate: unseen, delivered messages grouped by sender."""

from __future__ import annotations

from sqlalchemy.orm import Session

from cofound.domain.entities import UnreadSummary
from cofound.infrastructure.repositories import MessageRepository

from .context import MessagingContext


def unread_by_sender(session: Session, recipient_id: str) -> list[UnreadSummary]:
    """Return one summary per sender, most recently active sender first."""

    groups: dict[str, UnreadSummary] = {}
    # Messages come back newest first, so the first one seen per sender is
    # the latest.
    for message in MessageRepository(session).list_unseen_delivered_for(recipient_id):
        current = groups.get(message.sender_id)
        if current is None:
            groups[message.sender_id] = UnreadSummary(
                sender_id=message.sender_id,
                count=1,
                latest_message=message.content,
                latest_message_timestamp=message.created_at,
            )
            continue
        groups[message.sender_id] = UnreadSummary(
            sender_id=current.sender_id,
            count=current.count + 1,
            latest_message=current.latest_message,
            latest_message_timestamp=current.latest_message_timestamp,
        )
    return list(groups.values())


async def load_unread_summaries(
    context: MessagingContext, recipient_id: str
) -> list[UnreadSummary]:
    return await context.run_db(lambda session: unread_by_sender(session, recipient_id))


__all__ = ["unread_by_sender", "load_unread_summaries"]
