"""Validated shapes of the events exchanged over the chat websocket."""

from .chat_events import (
    CLIENT_EVENT_TYPES,
    ClientEvent,
    InvalidClientEvent,
    MessageSeenEvent,
    PingEvent,
    SendMessageEvent,
    parse_client_event,
)

__all__ = [
    "CLIENT_EVENT_TYPES",
    "ClientEvent",
    "InvalidClientEvent",
    "MessageSeenEvent",
    "PingEvent",
    "SendMessageEvent",
    "parse_client_event",
]
