"""Queued attempt to deliver a message that could not be pushed live."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DELIVERY_OUTCOME_PUSHED = "pushed"
DELIVERY_OUTCOME_SKIPPED = "skipped"
DELIVERY_OUTCOME_RETRY = "retry"
DELIVERY_OUTCOME_FAILED = "failed"


@dataclass
class DeliveryJob:
    """Job payload stored on the delivery queue as ``{message, attempts}``."""

    message: dict[str, Any]
    attempts: int = 0

    @property
    def message_id(self) -> int:
        return int(self.message["id"])

    def to_payload(self) -> dict[str, Any]:
        return {"message": dict(self.message), "attempts": self.attempts}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "DeliveryJob":
        if "message" not in payload or "id" not in (payload.get("message") or {}):
            raise ValueError("Delivery job payload must include a message with an id")
        return cls(message=dict(payload["message"]), attempts=int(payload.get("attempts", 0)))


@dataclass
class DeliveryResult:
    """Outcome of a single worker attempt."""

    outcome: str
    attempts: int
    retry_in: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "DeliveryJob",
    "DeliveryResult",
    "DELIVERY_OUTCOME_PUSHED",
    "DELIVERY_OUTCOME_SKIPPED",
    "DELIVERY_OUTCOME_RETRY",
    "DELIVERY_OUTCOME_FAILED",
]
