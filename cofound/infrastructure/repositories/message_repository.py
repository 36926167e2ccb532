"""Persistence helpers for chat message entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from cofound.domain.entities import (
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_FAILED,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_SENT,
    Message,
)
from cofound.infrastructure.models import MessageModel
from cofound.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class MessageRepository:
    """Store messages and apply their delivery state transitions.

    Every state change is a conditional write keyed on the current flag value,
    so concurrent drains or repeated acknowledgements never transition a
    message twice.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int) -> Message | None:
        model = self.session.get(MessageModel, message_id)
        return self._to_entity(model) if model else None

    def create(self, message: Message) -> Message:
        model = MessageModel(
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            status=MESSAGE_STATUS_SENT,
            is_delivered=False,
            is_seen=False,
            delivered_at=None,
            seen_at=None,
            created_at=ensure_app_naive_datetime(
                message.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, message_id: int) -> None:
        model = self.session.get(MessageModel, message_id)
        if model is None:
            msg = f"Message with id {message_id} not found"
            raise ValueError(msg)
        self.session.delete(model)
        self.session.commit()

    def list_undelivered_for(self, recipient_id: str) -> Sequence[Message]:
        query = (
            self.session.query(MessageModel)
            .filter(MessageModel.recipient_id == recipient_id)
            .filter(MessageModel.is_delivered.is_(False))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_unseen_delivered_for(self, recipient_id: str) -> Sequence[Message]:
        query = (
            self.session.query(MessageModel)
            .filter(MessageModel.recipient_id == recipient_id)
            .filter(MessageModel.is_delivered.is_(True))
            .filter(MessageModel.is_seen.is_(False))
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_unseen_for(self, recipient_id: str) -> Sequence[Message]:
        query = (
            self.session.query(MessageModel)
            .filter(MessageModel.recipient_id == recipient_id)
            .filter(MessageModel.is_seen.is_(False))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def history(self, user_a: str, user_b: str) -> Sequence[Message]:
        query = (
            self.session.query(MessageModel)
            .filter(
                or_(
                    and_(
                        MessageModel.sender_id == user_a,
                        MessageModel.recipient_id == user_b,
                    ),
                    and_(
                        MessageModel.sender_id == user_b,
                        MessageModel.recipient_id == user_a,
                    ),
                )
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def mark_delivered(
        self, message_id: int, *, delivered_at: datetime | None = None
    ) -> bool:
        """Flag ``message_id`` as delivered if nobody else did it first."""

        updated = (
            self.session.query(MessageModel)
            .filter(MessageModel.id == message_id)
            .filter(MessageModel.is_delivered.is_(False))
            .update(
                {
                    MessageModel.is_delivered: True,
                    MessageModel.delivered_at: ensure_app_naive_datetime(
                        delivered_at or now_in_app_timezone()
                    ),
                    MessageModel.status: MESSAGE_STATUS_DELIVERED,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def release_delivery(self, message_id: int, *, delivered_at: datetime) -> bool:
        """Undo a delivery claim made at ``delivered_at`` that never reached a handle.

        Only the exact claim is reverted; a message already seen or claimed
        again since then is left alone.
        """

        updated = (
            self.session.query(MessageModel)
            .filter(MessageModel.id == message_id)
            .filter(MessageModel.is_delivered.is_(True))
            .filter(MessageModel.is_seen.is_(False))
            .filter(MessageModel.delivered_at == ensure_app_naive_datetime(delivered_at))
            .update(
                {
                    MessageModel.is_delivered: False,
                    MessageModel.delivered_at: None,
                    MessageModel.status: MESSAGE_STATUS_SENT,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def mark_seen(
        self,
        message_ids: Iterable[int],
        *,
        sender_id: str,
        recipient_id: str,
        seen_at: datetime | None = None,
    ) -> list[int]:
        """Mark the delivered, unseen messages among ``message_ids`` as seen.

        Returns the identifiers that actually transitioned; ids that are already
        seen, undelivered or belong to another conversation are skipped.
        """

        ids = list(dict.fromkeys(i for i in message_ids if i is not None))
        if not ids:
            return []
        candidates = (
            self.session.query(MessageModel.id)
            .filter(MessageModel.id.in_(ids))
            .filter(MessageModel.sender_id == sender_id)
            .filter(MessageModel.recipient_id == recipient_id)
            .filter(MessageModel.is_delivered.is_(True))
            .filter(MessageModel.is_seen.is_(False))
            .order_by(MessageModel.id.asc())
        )
        return self._transition_to_seen([row.id for row in candidates], seen_at)

    def mark_all_seen_between(
        self, *, sender_id: str, recipient_id: str, seen_at: datetime | None = None
    ) -> list[int]:
        candidates = (
            self.session.query(MessageModel.id)
            .filter(MessageModel.sender_id == sender_id)
            .filter(MessageModel.recipient_id == recipient_id)
            .filter(MessageModel.is_delivered.is_(True))
            .filter(MessageModel.is_seen.is_(False))
            .order_by(MessageModel.id.asc())
        )
        return self._transition_to_seen([row.id for row in candidates], seen_at)

    def mark_failed(self, message_id: int) -> bool:
        """Record a permanent delivery failure unless the message got through."""

        updated = (
            self.session.query(MessageModel)
            .filter(MessageModel.id == message_id)
            .filter(MessageModel.is_delivered.is_(False))
            .filter(MessageModel.status != MESSAGE_STATUS_FAILED)
            .update(
                {MessageModel.status: MESSAGE_STATUS_FAILED},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def _transition_to_seen(
        self, candidate_ids: Sequence[int], seen_at: datetime | None
    ) -> list[int]:
        if not candidate_ids:
            return []
        timestamp = ensure_app_naive_datetime(seen_at or now_in_app_timezone())
        transitioned: list[int] = []
        for message_id in candidate_ids:
            # Per-row compare-and-swap so a concurrent acknowledgement of the
            # same ids is not counted twice.
            updated = (
                self.session.query(MessageModel)
                .filter(MessageModel.id == message_id)
                .filter(MessageModel.is_delivered.is_(True))
                .filter(MessageModel.is_seen.is_(False))
                .update(
                    {
                        MessageModel.is_seen: True,
                        MessageModel.seen_at: timestamp,
                        MessageModel.status: MESSAGE_STATUS_READ,
                    },
                    synchronize_session=False,
                )
            )
            if updated == 1:
                transitioned.append(message_id)
        self.session.commit()
        return transitioned

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            content=model.content,
            status=model.status,
            is_delivered=bool(model.is_delivered),
            is_seen=bool(model.is_seen),
            delivered_at=ensure_app_timezone(model.delivered_at),
            seen_at=ensure_app_timezone(model.seen_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["MessageRepository"]
