"""Realtime messaging use cases: delivery, drain, seen/ack and retries."""

from .context import DeliveryQueue, MessagingContext, build_default_context
from .drain import drain_undelivered
from .mark_seen import mark_messages_seen, notify_seen
from .presence import connect_user, disconnect_user, resolve_identity
from .retry_delivery import attempt_delivery, backoff_delay
from .send_message import deliver_live, send_message
from .unread import load_unread_summaries, unread_by_sender

__all__ = [
    "DeliveryQueue",
    "MessagingContext",
    "build_default_context",
    "drain_undelivered",
    "mark_messages_seen",
    "notify_seen",
    "connect_user",
    "disconnect_user",
    "resolve_identity",
    "attempt_delivery",
    "backoff_delay",
    "deliver_live",
    "send_message",
    "load_unread_summaries",
    "unread_by_sender",
]
