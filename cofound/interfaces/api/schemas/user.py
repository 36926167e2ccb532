"""Pydantic models describing directory payloads."""

from __future__ import annotations

from datetime import datetime

from ._base import CamelModel


class UserStatusRead(CamelModel):
    """Presence of an identity as seen by other members."""

    status: str
    last_seen: datetime | None = None
    is_online: bool


class OnlineUsersRead(CamelModel):
    user_ids: list[str]


class PushTokenUpdate(CamelModel):
    """Device token used for push notifications; ``null`` clears it."""

    push_token: str | None = None


__all__ = ["OnlineUsersRead", "PushTokenUpdate", "UserStatusRead"]
