"""ORM models used by the application infrastructure."""

from .message import MessageModel
from .user import UserModel

__all__ = ["MessageModel", "UserModel"]
