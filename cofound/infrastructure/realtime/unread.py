"""Process-local unread counters driving badge updates."""

from __future__ import annotations


class UnreadCounter:
    """Keep a running count of delivered-but-unseen messages per recipient.

    The counter is seeded from the store when an identity connects and dropped
    when it goes offline. Live deliveries and seen acknowledgements keep it
    current; it never goes below zero.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def get(self, user_id: str) -> int:
        return self._counts.get(user_id, 0)

    def seed(self, user_id: str, count: int) -> None:
        self._counts[user_id] = max(0, count)

    def increment(self, user_id: str, amount: int = 1) -> int:
        self._counts[user_id] = self.get(user_id) + max(0, amount)
        return self._counts[user_id]

    def decrement(self, user_id: str, amount: int) -> int:
        self._counts[user_id] = max(0, self.get(user_id) - max(0, amount))
        return self._counts[user_id]

    def discard(self, user_id: str) -> None:
        self._counts.pop(user_id, None)

    def clear(self) -> None:
        self._counts.clear()


unread_counter = UnreadCounter()


__all__ = ["UnreadCounter", "unread_counter"]
