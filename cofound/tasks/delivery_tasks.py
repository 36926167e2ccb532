"""Celery task that works through the durable delivery queue."""

from __future__ import annotations

import logging
from typing import Any

from celery import Task

from cofound.application.use_cases.messaging.retry_delivery import attempt_delivery
from cofound.config import get_settings
from cofound.domain.entities import (
    DELIVERY_OUTCOME_FAILED,
    DELIVERY_OUTCOME_RETRY,
    DeliveryJob,
)
from cofound.domain.exceptions import DeliveryFailure, PermanentFailure
from cofound.infrastructure import database
from cofound.infrastructure.celery_app import DELIVERY_TASK_NAME, celery_app
from cofound.infrastructure.push import PushNotificationClient

logger = logging.getLogger(__name__)


class DeliveryTask(Task):
    """Task base logging terminal failures of delivery jobs."""

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error("Delivery task %s failed: %s", task_id, exc, exc_info=einfo)


@celery_app.task(
    bind=True,
    base=DeliveryTask,
    name=DELIVERY_TASK_NAME,
    max_retries=None,
    acks_late=True,
)
def deliver_message_task(self, job_payload: dict[str, Any]) -> dict[str, Any]:
    """
    Run one delivery attempt for a queued ``{message, attempts}`` job.

    Attempts are counted in the job payload itself, so the count survives
    worker restarts; Celery only provides the delayed re-delivery.
    """
    job = DeliveryJob.from_payload(job_payload)
    settings = get_settings()

    with database.SessionLocal() as session:
        result = attempt_delivery(
            session,
            job,
            PushNotificationClient(settings),
            max_attempts=settings.delivery_max_attempts,
            backoff_seconds=settings.delivery_backoff_seconds,
        )

    if result.outcome == DELIVERY_OUTCOME_RETRY:
        next_job = DeliveryJob(message=job.message, attempts=result.attempts)
        raise self.retry(
            args=[next_job.to_payload()],
            countdown=result.retry_in,
            exc=DeliveryFailure(result.error or "Delivery attempt failed"),
        )
    if result.outcome == DELIVERY_OUTCOME_FAILED:
        raise PermanentFailure(
            "Maximum delivery attempts reached",
            details={"messageId": job.message_id, "attempts": result.attempts},
        )

    return {
        "status": result.outcome,
        "message_id": job.message_id,
        "attempts": result.attempts,
    }


__all__ = ["DeliveryTask", "deliver_message_task"]
