"""Use cases touching the member directory."""

from __future__ import annotations

from sqlalchemy.orm import Session

from cofound.domain.entities import User
from cofound.domain.exceptions import NotFound
from cofound.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: str | None) -> User:
    """Return the requested identity or raise :class:`NotFound`."""

    user = UserRepository(session).get(user_id) if user_id else None
    if user is None:
        raise NotFound("User not found", details={"userId": user_id})
    return user


def register_push_token(session: Session, user_id: str, push_token: str | None) -> User:
    """Store (or clear) the device push token of ``user_id``."""

    user = UserRepository(session).set_push_token(user_id, push_token)
    if user is None:
        raise NotFound("User not found", details={"userId": user_id})
    return user


__all__ = ["get_user", "register_push_token"]
