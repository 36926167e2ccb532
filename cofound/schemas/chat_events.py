"""Client-to-server chat events.

Frames arrive as ``{"type": <event>, "data": {...}}``. Each event type maps to
exactly one model; anything that does not validate is rejected at the
transport boundary with :class:`InvalidRequest`.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cofound.domain.exceptions import InvalidRequest


class InvalidClientEvent(InvalidRequest):
    """A known event type whose data failed validation."""

    def __init__(self, message: str, *, event_type: str, data: dict[str, Any], details=None) -> None:
        super().__init__(message, code="InvalidRequest", details=details)
        self.event_type = event_type
        self.data = data


class _ClientEventBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    event_type: ClassVar[str]


class SendMessageEvent(_ClientEventBase):
    """``send_message {senderId, recipientId, content, tempId}``."""

    event_type: ClassVar[str] = "send_message"

    sender_id: str = Field(alias="senderId", min_length=1)
    recipient_id: str = Field(alias="recipientId", min_length=1)
    content: str = Field(min_length=1)
    temp_id: str | int | None = Field(default=None, alias="tempId")


class MessageSeenEvent(_ClientEventBase):
    """``message_seen {messageIds, senderId, recipientId}``."""

    event_type: ClassVar[str] = "message_seen"

    message_ids: list[int] = Field(alias="messageIds")
    sender_id: str = Field(alias="senderId", min_length=1)
    recipient_id: str = Field(alias="recipientId", min_length=1)


class PingEvent(_ClientEventBase):
    """Keep-alive frame answered with ``pong``."""

    event_type: ClassVar[str] = "ping"


ClientEvent = Union[SendMessageEvent, MessageSeenEvent, PingEvent]

CLIENT_EVENT_TYPES: dict[str, type[_ClientEventBase]] = {
    model.event_type: model for model in (SendMessageEvent, MessageSeenEvent, PingEvent)
}


def _decode(value: Any, *, what: str) -> Any:
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise InvalidRequest(f"{what} is not valid JSON") from exc
    return value


def parse_client_event(frame: Any) -> ClientEvent:
    """Validate a raw websocket frame and return the matching event model."""

    frame = _decode(frame, what="Frame")
    if not isinstance(frame, dict):
        raise InvalidRequest("Frame must be a JSON object")

    event_type = frame.get("type")
    model = CLIENT_EVENT_TYPES.get(event_type) if isinstance(event_type, str) else None
    if model is None:
        raise InvalidRequest("Unknown event type", details={"type": event_type})

    data = _decode(frame.get("data") or {}, what="Event data")
    if not isinstance(data, dict):
        raise InvalidRequest("Event data must be a JSON object", details={"type": event_type})
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise InvalidClientEvent(
            "Invalid data format.",
            event_type=event_type,
            data=data,
            details={"type": event_type, "errors": errors},
        ) from exc


__all__ = [
    "CLIENT_EVENT_TYPES",
    "ClientEvent",
    "InvalidClientEvent",
    "MessageSeenEvent",
    "PingEvent",
    "SendMessageEvent",
    "parse_client_event",
]
