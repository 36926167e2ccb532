"""Shared fixtures for the chat core tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest

TEST_DB_PATH = Path(__file__).parent / "test_chat.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.pop("PUSH_API_URL", None)
os.environ.pop("PUSH_SERVER_KEY", None)

from cofound.application.use_cases.messaging import MessagingContext  # noqa: E402
from cofound.domain.entities import Message, User  # noqa: E402
from cofound.infrastructure import database  # noqa: E402
from cofound.infrastructure.realtime import (  # noqa: E402
    ChatEventEmitter,
    PresenceRegistry,
    UnreadCounter,
    presence_registry,
    unread_counter,
)
from cofound.infrastructure.repositories import MessageRepository, UserRepository  # noqa: E402


class FakeHandle:
    """Connection handle recording every frame it is sent."""

    def __init__(self, name: str = "handle", *, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.frames: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError(f"{self.name} is closed")
        # Round-trip through JSON like a real socket would.
        self.frames.append(json.loads(json.dumps(data)))

    def events(self, event_type: str) -> list[Any]:
        return [frame["data"] for frame in self.frames if frame["type"] == event_type]

    def types(self) -> list[str]:
        return [frame["type"] for frame in self.frames]

    def __repr__(self) -> str:
        return f"FakeHandle({self.name!r})"


class FakeDeliveryQueue:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.enqueued: list[Message] = []

    def enqueue(self, message: Message) -> None:
        if self.fail:
            raise ConnectionError("broker unavailable")
        self.enqueued.append(message)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_state():
    """Give every test empty tables and empty process-wide realtime state."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    presence_registry.clear()
    unread_counter.clear()
    yield
    presence_registry.clear()
    unread_counter.clear()


@pytest.fixture(scope="session", autouse=True)
def remove_test_database():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db_session):
    """Seed the two members used across scenarios: X sends, Y receives."""

    repository = UserRepository(db_session)
    return {
        "X": repository.create(User(id="X", name="Xavier", profile_photo="x.png")),
        "Y": repository.create(User(id="Y", name="Yasmin")),
    }


@pytest.fixture
def delivery_queue():
    return FakeDeliveryQueue()


@pytest.fixture
def context(delivery_queue):
    registry = PresenceRegistry()
    return MessagingContext(
        registry=registry,
        emitter=ChatEventEmitter(registry),
        unread=UnreadCounter(),
        delivery_queue=delivery_queue,
    )


@pytest.fixture
def store_message(db_session):
    """Persist a message directly, optionally already delivered."""

    def _store(sender_id: str, recipient_id: str, content: str, *, delivered: bool = False) -> Message:
        repository = MessageRepository(db_session)
        message = repository.create(
            Message(id=None, sender_id=sender_id, recipient_id=recipient_id, content=content)
        )
        if delivered:
            repository.mark_delivered(message.id)
            db_session.expire_all()
            message = repository.get(message.id)
        return message

    return _store


@pytest.fixture
def load_message():
    """Read a message back through a fresh session."""

    def _load(message_id: int) -> Message | None:
        with database.SessionLocal() as session:
            return MessageRepository(session).get(message_id)

    return _load
