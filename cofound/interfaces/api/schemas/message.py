"""Pydantic models describing message payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from ._base import CamelModel


class MessageRead(CamelModel):
    """Representation of a stored message."""

    id: int
    sender_id: str
    recipient_id: str
    content: str
    status: str
    is_delivered: bool
    is_seen: bool
    delivered_at: datetime | None = None
    seen_at: datetime | None = None
    created_at: datetime


class MessageHistoryResponse(CamelModel):
    messages: list[MessageRead]


class UnreadSummaryRead(CamelModel):
    """Unseen, delivered messages from one sender."""

    sender_id: str
    count: int
    latest_message: str
    latest_message_timestamp: datetime | None = None


class UnseenMessageRead(CamelModel):
    id: int
    content: str
    created_at: datetime


class UnseenGroupRead(CamelModel):
    sender_id: str
    message_count: int
    messages: list[UnseenMessageRead]


class ConversationSeenRequest(CamelModel):
    """Payload used to mark a whole conversation as seen."""

    sender_id: str = Field(..., min_length=1)
    recipient_id: str = Field(..., min_length=1)


class ConversationSeenResponse(CamelModel):
    updated_message_count: int
    message_ids: list[int]


__all__ = [
    "ConversationSeenRequest",
    "ConversationSeenResponse",
    "MessageHistoryResponse",
    "MessageRead",
    "UnreadSummaryRead",
    "UnseenGroupRead",
    "UnseenMessageRead",
]
