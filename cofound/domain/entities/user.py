"""Domain entity representing an identity in the member directory."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

USER_STATUS_ONLINE = "online"
USER_STATUS_OFFLINE = "offline"


@dataclass
class User:
    """Directory record the chat core reads and updates."""

    id: str
    name: str | None = None
    profile_photo: str | None = None
    push_token: str | None = None
    status: str = USER_STATUS_OFFLINE
    last_seen: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name or "Someone"


__all__ = ["User", "USER_STATUS_ONLINE", "USER_STATUS_OFFLINE"]
