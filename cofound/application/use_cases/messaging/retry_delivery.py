"""One worker attempt of a queued delivery job."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from cofound.domain.entities import (
    DELIVERY_OUTCOME_FAILED,
    DELIVERY_OUTCOME_PUSHED,
    DELIVERY_OUTCOME_RETRY,
    DELIVERY_OUTCOME_SKIPPED,
    MESSAGE_STATUS_FAILED,
    DeliveryJob,
    DeliveryResult,
)
from cofound.domain.exceptions import DeliveryFailure
from cofound.infrastructure.push import PushNotificationClient, build_message_notification
from cofound.infrastructure.repositories import MessageRepository, UserRepository

logger = logging.getLogger(__name__)


def backoff_delay(attempts: int, base_delay: float) -> float:
    """Delay before the next attempt after ``attempts`` failures (2s, 4s, 8s...)."""

    return base_delay * (2 ** max(0, attempts - 1))


def attempt_delivery(
    session: Session,
    job: DeliveryJob,
    push_client: PushNotificationClient,
    *,
    max_attempts: int,
    backoff_seconds: float,
) -> DeliveryResult:
    """Try to notify the recipient of ``job``'s message once.

    A failed attempt is rescheduled with exponential backoff until
    ``max_attempts`` failures have been recorded; the message is then marked
    ``failed`` and the job is not retried again.
    """

    messages = MessageRepository(session)
    message = messages.get(job.message_id)
    if message is None:
        return DeliveryResult(DELIVERY_OUTCOME_SKIPPED, job.attempts, details={"reason": "deleted"})
    if message.is_delivered or message.status == MESSAGE_STATUS_FAILED:
        return DeliveryResult(
            DELIVERY_OUTCOME_SKIPPED, job.attempts, details={"reason": message.status}
        )

    users = UserRepository(session)
    recipient = users.get(message.recipient_id)
    if recipient is None or not recipient.push_token:
        return DeliveryResult(
            DELIVERY_OUTCOME_SKIPPED, job.attempts, details={"reason": "no push token"}
        )

    notification = build_message_notification(
        message, token=recipient.push_token, sender=users.get(message.sender_id)
    )
    try:
        sent = push_client.send(notification)
    except DeliveryFailure as exc:
        attempts = job.attempts + 1
        if attempts >= max_attempts:
            messages.mark_failed(message.id)
            logger.error(
                "Delivery of message %s failed permanently after %s attempts: %s",
                message.id,
                attempts,
                exc.message,
            )
            return DeliveryResult(DELIVERY_OUTCOME_FAILED, attempts, error=exc.message)

        delay = backoff_delay(attempts, backoff_seconds)
        logger.warning(
            "Delivery attempt %s/%s for message %s failed; retrying in %.1fs: %s",
            attempts,
            max_attempts,
            message.id,
            delay,
            exc.message,
        )
        return DeliveryResult(DELIVERY_OUTCOME_RETRY, attempts, retry_in=delay, error=exc.message)

    if not sent:
        return DeliveryResult(
            DELIVERY_OUTCOME_SKIPPED, job.attempts + 1, details={"reason": "push disabled"}
        )
    logger.info("Push notification sent for message %s", message.id)
    return DeliveryResult(DELIVERY_OUTCOME_PUSHED, job.attempts + 1)


__all__ = ["attempt_delivery", "backoff_delay"]
