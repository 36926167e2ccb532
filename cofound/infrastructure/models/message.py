"""SQLAlchemy model for persisted chat messages."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression

from cofound.infrastructure.database import Base
from cofound.utils import now_in_app_naive_datetime


class MessageModel(Base):
    """Database representation of a direct message and its delivery state."""

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_recipient_delivery", "recipient_id", "is_delivered", "is_seen"),
        Index("ix_message_pair", "sender_id", "recipient_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String(64), nullable=False, index=True)
    recipient_id = Column(String(64), nullable=False, index=True)
    content = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="sent")
    is_delivered = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_seen = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    delivered_at = Column(DateTime(), nullable=True)
    seen_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["MessageModel"]
