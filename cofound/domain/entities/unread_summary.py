"""Read-side projection of unseen messages grouped by sender."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UnreadSummary:
    """Unseen message count from one sender, with the newest message."""

    sender_id: str
    count: int
    latest_message: str
    latest_message_timestamp: datetime | None


__all__ = ["UnreadSummary"]
