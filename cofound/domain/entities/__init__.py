"""Domain entities exposed by the application."""

from .delivery_job import (
    DELIVERY_OUTCOME_PUSHED,
    DELIVERY_OUTCOME_FAILED,
    DELIVERY_OUTCOME_RETRY,
    DELIVERY_OUTCOME_SKIPPED,
    DeliveryJob,
    DeliveryResult,
)
from .message import (
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_FAILED,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_SENT,
    MESSAGE_STATUSES,
    Message,
)
from .unread_summary import UnreadSummary
from .user import USER_STATUS_OFFLINE, USER_STATUS_ONLINE, User

__all__ = [
    "DeliveryJob",
    "DeliveryResult",
    "DELIVERY_OUTCOME_PUSHED",
    "DELIVERY_OUTCOME_SKIPPED",
    "DELIVERY_OUTCOME_RETRY",
    "DELIVERY_OUTCOME_FAILED",
    "Message",
    "MESSAGE_STATUSES",
    "MESSAGE_STATUS_SENT",
    "MESSAGE_STATUS_DELIVERED",
    "MESSAGE_STATUS_READ",
    "MESSAGE_STATUS_FAILED",
    "UnreadSummary",
    "User",
    "USER_STATUS_ONLINE",
    "USER_STATUS_OFFLINE",
]
