"""SQLAlchemy model for the member directory."""

from sqlalchemy import Column, DateTime, String, Text

from cofound.infrastructure.database import Base


class UserModel(Base):
    """Identity record holding presence and push-notification details."""

    __tablename__ = "user"

    id = Column(String(64), primary_key=True)
    name = Column(String(120), nullable=True)
    profile_photo = Column(Text, nullable=True)
    push_token = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="offline")
    last_seen = Column(DateTime(), nullable=True)


__all__ = ["UserModel"]
