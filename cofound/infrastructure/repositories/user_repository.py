"""Persistence layer for the member directory."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from cofound.domain.entities import User
from cofound.infrastructure.models import UserModel
from cofound.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Provide lookups and presence updates for :class:`User` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            name=user.name,
            profile_photo=user.profile_photo,
            push_token=user.push_token,
            status=user.status,
            last_seen=ensure_app_naive_datetime(user.last_seen),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_presence(self, user_id: str, *, status: str, last_seen: datetime) -> bool:
        updated = (
            self.session.query(UserModel)
            .filter(UserModel.id == user_id)
            .update(
                {
                    UserModel.status: status,
                    UserModel.last_seen: ensure_app_naive_datetime(last_seen),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def set_push_token(self, user_id: str, push_token: str | None) -> User | None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        model.push_token = push_token or None
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            profile_photo=model.profile_photo,
            push_token=model.push_token,
            status=model.status,
            last_seen=ensure_app_timezone(model.last_seen),
        )


__all__ = ["UserRepository"]
