"""In-memory presence registry for chat websocket connections."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Protocol, Set


class ConnectionHandle(Protocol):
    """One live connection (browser tab, device session) of an identity."""

    async def send_json(self, data: Any) -> None: ...


class PresenceRegistry:
    """Track which identities are reachable and through which handles.

    An identity is present if and only if it holds at least one handle. The
    map is only touched from the event loop, so it needs no locking; it is not
    shared between processes.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[ConnectionHandle]] = defaultdict(set)

    def register(self, user_id: str, handle: ConnectionHandle) -> None:
        """Add ``handle`` to the handles of ``user_id``."""

        self._connections[user_id].add(handle)

    def unregister(self, user_id: str, handle: ConnectionHandle) -> bool:
        """Remove ``handle``; return ``True`` when ``user_id`` went offline."""

        connections = self._connections.get(user_id)
        if connections is None:
            return False
        connections.discard(handle)
        if connections:
            return False
        self._connections.pop(user_id, None)
        return True

    def is_online(self, user_id: str) -> bool:
        return bool(self._connections.get(user_id))

    def handles_for(self, user_id: str) -> set[ConnectionHandle]:
        """Return a snapshot of the handles of ``user_id`` (possibly empty)."""

        return set(self._connections.get(user_id, ()))

    def online_users(self) -> set[str]:
        return {user_id for user_id, handles in self._connections.items() if handles}

    def clear(self) -> None:
        self._connections.clear()


presence_registry = PresenceRegistry()


__all__ = ["ConnectionHandle", "PresenceRegistry", "presence_registry"]
