"""Realtime chat helpers for the infrastructure layer."""

from .emitter import (
    EVENT_ERROR,
    EVENT_MESSAGE_FAILED,
    EVENT_MESSAGE_SEEN,
    EVENT_MESSAGE_SEEN_ACK,
    EVENT_MESSAGE_SENT_ACK,
    EVENT_PONG,
    EVENT_RECEIVE_MESSAGE,
    EVENT_UNREAD_COUNT_WHEN_CONNECTED,
    EVENT_USER_UNSEEN_MESSAGE_COUNT,
    ChatEventEmitter,
    chat_event_emitter,
    serialize_message,
    serialize_unread_summaries,
)
from .registry import ConnectionHandle, PresenceRegistry, presence_registry
from .unread import UnreadCounter, unread_counter

__all__ = [
    "ChatEventEmitter",
    "chat_event_emitter",
    "serialize_message",
    "serialize_unread_summaries",
    "ConnectionHandle",
    "PresenceRegistry",
    "presence_registry",
    "UnreadCounter",
    "unread_counter",
    "EVENT_ERROR",
    "EVENT_MESSAGE_FAILED",
    "EVENT_MESSAGE_SEEN",
    "EVENT_MESSAGE_SEEN_ACK",
    "EVENT_MESSAGE_SENT_ACK",
    "EVENT_PONG",
    "EVENT_RECEIVE_MESSAGE",
    "EVENT_UNREAD_COUNT_WHEN_CONNECTED",
    "EVENT_USER_UNSEEN_MESSAGE_COUNT",
]
