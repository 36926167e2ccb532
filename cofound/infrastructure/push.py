"""Push notification client for recipients that are not connected."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cofound.config import Settings, get_settings
from cofound.domain.entities import Message, User
from cofound.domain.exceptions import DeliveryFailure

logger = logging.getLogger(__name__)

_PREVIEW_LENGTH = 30


@dataclass(frozen=True)
class PushNotification:
    """Provider-neutral description of a notification."""

    token: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)

    def to_request_body(self) -> dict[str, Any]:
        return {
            "to": self.token,
            "notification": {"title": self.title, "body": self.body},
            "data": self.data,
        }


def build_message_notification(
    message: Message, *, token: str, sender: User | None
) -> PushNotification:
    """Describe the notification announcing ``message`` to its recipient."""

    preview = message.content
    if len(preview) > _PREVIEW_LENGTH:
        preview = f"{preview[:_PREVIEW_LENGTH]}..."
    sender_name = sender.display_name if sender else "Someone"
    return PushNotification(
        token=token,
        title=f"{sender_name} sent you a message",
        body=preview,
        data={
            "senderId": message.sender_id,
            "messageId": str(message.id),
            "profilePhoto": (sender.profile_photo or "") if sender else "",
        },
    )


def _extract_error_details(response: httpx.Response) -> str | None:
    """Return a human readable description for a provider error payload."""

    body = response.text.strip()
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return body


class PushNotificationClient:
    """Send notifications through an FCM-compatible HTTP endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._settings.push_api_url and self._settings.push_server_key)

    def send(self, notification: PushNotification) -> bool:
        """Send ``notification``.

        Returns ``False`` when push delivery is not configured. Raises
        :class:`DeliveryFailure` when the provider cannot be reached or rejects
        the request, so the caller can retry.
        """

        if not self.enabled:
            logger.info("Push configuration incomplete; skipping notification")
            return False

        headers = {
            "Authorization": f"key={self._settings.push_server_key}",
            "Content-Type": "application/json",
        }
        try:
            with httpx.Client(
                timeout=self._settings.push_timeout_seconds, transport=self._transport
            ) as client:
                response = client.post(
                    self._settings.push_api_url,
                    json=notification.to_request_body(),
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise DeliveryFailure(
                "Push provider request failed", details={"reason": str(exc)}
            ) from exc

        if not response.is_success:
            details = _extract_error_details(response)
            logger.error(
                "Push provider responded with status %s: %s",
                response.status_code,
                details or "<empty body>",
            )
            raise DeliveryFailure(
                "Push provider rejected the notification",
                details={"status": response.status_code, "reason": details},
            )
        return True


__all__ = [
    "PushNotification",
    "PushNotificationClient",
    "build_message_notification",
]
