"""Serialize chat events and push them to websocket handles."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from cofound.domain.entities import Message, UnreadSummary

from .registry import ConnectionHandle, PresenceRegistry, presence_registry

logger = logging.getLogger(__name__)

EVENT_RECEIVE_MESSAGE = "receive_message"
EVENT_MESSAGE_SENT_ACK = "message_sent_ack"
EVENT_MESSAGE_SEEN_ACK = "message_seen_ack"
EVENT_MESSAGE_SEEN = "message_seen"
EVENT_USER_UNSEEN_MESSAGE_COUNT = "user_unseen_message_count"
EVENT_UNREAD_COUNT_WHEN_CONNECTED = "message_unread_count_when_connected"
EVENT_MESSAGE_FAILED = "message_failed"
EVENT_ERROR = "error"
EVENT_PONG = "pong"


class ChatEventEmitter:
    """Deliver ``{"type", "data"}`` frames to one handle or to an identity."""

    def __init__(self, registry: PresenceRegistry) -> None:
        self._registry = registry

    async def emit(self, handle: ConnectionHandle, event_type: str, payload: Any) -> bool:
        """Send an event to ``handle``; return ``False`` if the send raised."""

        frame = {"type": event_type, "data": _to_json_compatible(payload)}
        try:
            await handle.send_json(frame)
        except Exception as exc:  # noqa: BLE001 - any transport error means a dead socket
            logger.warning("Failed to emit %s to a chat handle: %s", event_type, exc)
            return False
        return True

    async def emit_to_user(self, user_id: str, event_type: str, payload: Any) -> int:
        """Send an event to every handle of ``user_id``.

        Failed handles stay registered until their own disconnect runs.
        Returns the number of handles that accepted the frame.
        """

        reached = 0
        for handle in self._registry.handles_for(user_id):
            if await self.emit(handle, event_type, payload):
                reached += 1
        return reached


def serialize_message(message: Message, *, is_sent_by_me: bool) -> dict[str, Any]:
    """Return the wire representation of ``message``."""

    return {
        "id": message.id,
        "senderId": message.sender_id,
        "recipientId": message.recipient_id,
        "content": message.content,
        "status": message.status,
        "isDelivered": message.is_delivered,
        "isSeen": message.is_seen,
        "deliveredAt": _isoformat(message.delivered_at),
        "seenAt": _isoformat(message.seen_at),
        "createdAt": _isoformat(message.created_at),
        "isSentByMe": is_sent_by_me,
    }


def serialize_unread_summaries(summaries: list[UnreadSummary]) -> list[dict[str, Any]]:
    return [
        {
            "senderId": summary.sender_id,
            "count": summary.count,
            "latestMessage": summary.latest_message,
            "latestMessageTimestamp": _isoformat(summary.latest_message_timestamp),
        }
        for summary in summaries
    ]


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _to_json_compatible(value: Any) -> Any:
    """Convert dataclasses and ``datetime`` values nested inside ``value``."""

    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _to_json_compatible(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_json_compatible(item) for item in value]
    return value


chat_event_emitter = ChatEventEmitter(presence_registry)


__all__ = [
    "ChatEventEmitter",
    "chat_event_emitter",
    "serialize_message",
    "serialize_unread_summaries",
    "EVENT_RECEIVE_MESSAGE",
    "EVENT_MESSAGE_SENT_ACK",
    "EVENT_MESSAGE_SEEN_ACK",
    "EVENT_MESSAGE_SEEN",
    "EVENT_USER_UNSEEN_MESSAGE_COUNT",
    "EVENT_UNREAD_COUNT_WHEN_CONNECTED",
    "EVENT_MESSAGE_FAILED",
    "EVENT_ERROR",
    "EVENT_PONG",
]
