"""Domain entity representing a direct chat message."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MESSAGE_STATUS_SENT = "sent"
MESSAGE_STATUS_DELIVERED = "delivered"
MESSAGE_STATUS_READ = "read"
MESSAGE_STATUS_FAILED = "failed"

MESSAGE_STATUSES = (
    MESSAGE_STATUS_SENT,
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_FAILED,
)


@dataclass
class Message:
    """Content sent from one identity to another and its delivery lifecycle."""

    id: int | None
    sender_id: str
    recipient_id: str
    content: str
    status: str = MESSAGE_STATUS_SENT
    is_delivered: bool = False
    is_seen: bool = False
    delivered_at: datetime | None = None
    seen_at: datetime | None = None
    created_at: datetime | None = None

    def lifecycle_violations(self) -> list[str]:
        """Return the delivery-state invariants this message breaks."""

        problems: list[str] = []
        if not self.is_delivered and self.delivered_at is not None:
            problems.append("delivered_at set on an undelivered message")
        if self.is_seen and not self.is_delivered:
            problems.append("seen message was never delivered")
        if self.seen_at is not None and not self.is_seen:
            problems.append("seen_at set on an unseen message")
        if self.status not in MESSAGE_STATUSES:
            problems.append(f"unknown status {self.status!r}")
        return problems


__all__ = [
    "Message",
    "MESSAGE_STATUSES",
    "MESSAGE_STATUS_SENT",
    "MESSAGE_STATUS_DELIVERED",
    "MESSAGE_STATUS_READ",
    "MESSAGE_STATUS_FAILED",
]
