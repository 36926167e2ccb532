"""Use cases behind the message history and housekeeping endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from cofound.domain.entities import Message
from cofound.domain.exceptions import Forbidden, InvalidRequest, NotFound
from cofound.infrastructure.repositories import MessageRepository


@dataclass
class UnseenGroup:
    """Unseen messages from one sender, oldest first."""

    sender_id: str
    messages: list[Message] = field(default_factory=list)

    @property
    def message_count(self) -> int:
        return len(self.messages)


def get_history(session: Session, user_a: str | None, user_b: str | None) -> Sequence[Message]:
    """Return the conversation between two identities in send order."""

    if not user_a or not user_b:
        raise InvalidRequest("Both user ids are required")
    return MessageRepository(session).history(user_a, user_b)


def delete_message(session: Session, message_id: int, *, user_id: str) -> None:
    """Delete ``message_id`` on behalf of its sender."""

    repository = MessageRepository(session)
    message = repository.get(message_id)
    if message is None:
        raise NotFound("Message not found", details={"messageId": message_id})
    if message.sender_id != user_id:
        raise Forbidden("You can only delete your own messages")
    repository.delete(message_id)


def list_unseen_grouped(session: Session, user_id: str) -> list[UnseenGroup]:
    """Group every unseen message addressed to ``user_id`` by sender."""

    groups: dict[str, UnseenGroup] = {}
    for message in MessageRepository(session).list_unseen_for(user_id):
        groups.setdefault(message.sender_id, UnseenGroup(sender_id=message.sender_id))
        groups[message.sender_id].messages.append(message)
    return list(groups.values())


def mark_conversation_seen(session: Session, *, sender_id: str, recipient_id: str) -> list[int]:
    """Mark every delivered message from ``sender_id`` to ``recipient_id`` as seen."""

    updated = MessageRepository(session).mark_all_seen_between(
        sender_id=sender_id, recipient_id=recipient_id
    )
    if not updated:
        raise NotFound("No unseen messages found between the specified users.")
    return updated


__all__ = [
    "UnseenGroup",
    "delete_message",
    "get_history",
    "list_unseen_grouped",
    "mark_conversation_seen",
]
