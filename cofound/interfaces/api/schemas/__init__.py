from .message import (
    ConversationSeenRequest,
    ConversationSeenResponse,
    MessageHistoryResponse,
    MessageRead,
    UnreadSummaryRead,
    UnseenGroupRead,
    UnseenMessageRead,
)
from .user import OnlineUsersRead, PushTokenUpdate, UserStatusRead

__all__ = [
    "ConversationSeenRequest",
    "ConversationSeenResponse",
    "MessageHistoryResponse",
    "MessageRead",
    "UnreadSummaryRead",
    "UnseenGroupRead",
    "UnseenMessageRead",
    "OnlineUsersRead",
    "PushTokenUpdate",
    "UserStatusRead",
]
