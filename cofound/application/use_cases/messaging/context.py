"""Collaborators shared by the realtime messaging use cases."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from sqlalchemy.orm import Session

from cofound.domain.entities import Message
from cofound.infrastructure.database import run_in_session
from cofound.infrastructure.realtime import (
    ChatEventEmitter,
    PresenceRegistry,
    UnreadCounter,
    chat_event_emitter,
    presence_registry,
    unread_counter,
)

T = TypeVar("T")


class DeliveryQueue(Protocol):
    """Durable queue accepting messages that could not be delivered live."""

    def enqueue(self, message: Message) -> None: ...


@dataclass
class MessagingContext:
    """Presence, transport, counters and persistence used by the chat core."""

    registry: PresenceRegistry
    emitter: ChatEventEmitter
    unread: UnreadCounter
    delivery_queue: DeliveryQueue
    session_factory: Callable[[], Session] | None = field(default=None)

    async def run_db(self, operation: Callable[[Session], T]) -> T:
        return await run_in_session(operation, self.session_factory)


def build_default_context() -> MessagingContext:
    """Return the context wired to the process-wide registry and Celery queue."""

    from cofound.infrastructure.delivery_queue import CeleryDeliveryQueue

    return MessagingContext(
        registry=presence_registry,
        emitter=chat_event_emitter,
        unread=unread_counter,
        delivery_queue=CeleryDeliveryQueue(),
    )


__all__ = ["DeliveryQueue", "MessagingContext", "build_default_context"]
