"""Domain-specific exceptions for the messaging core.

Handlers at the websocket boundary convert these into ``error`` or
``message_failed`` events; HTTP routes use :meth:`to_http_exception`.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class InvalidRequest(DomainException):
    """Raised when an event or request is missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(DomainException):
    """Raised when a referenced identity or message does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(DomainException):
    """Raised when an identity acts on a message it does not own."""

    status_code = status.HTTP_403_FORBIDDEN


class DeliveryFailure(DomainException):
    """Transient failure of a live push or push-notification attempt."""

    status_code = status.HTTP_502_BAD_GATEWAY


class PermanentFailure(DomainException):
    """The retry budget of a delivery job is exhausted."""


__all__ = [
    "DomainException",
    "InvalidRequest",
    "NotFound",
    "Forbidden",
    "DeliveryFailure",
    "PermanentFailure",
]
