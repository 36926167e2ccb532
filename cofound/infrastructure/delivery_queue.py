"""Adapter that places delivery jobs on the durable Celery queue."""

from __future__ import annotations

import logging

from cofound.config import get_settings
from cofound.domain.entities import DeliveryJob, Message
from cofound.infrastructure.realtime import serialize_message

logger = logging.getLogger(__name__)


class CeleryDeliveryQueue:
    """Enqueue ``{message, attempts}`` jobs for the delivery worker."""

    def __init__(self, queue_name: str | None = None) -> None:
        self._queue_name = queue_name or get_settings().delivery_queue_name

    def enqueue(self, message: Message) -> None:
        """Schedule the first delivery attempt for ``message``."""

        from cofound.tasks.delivery_tasks import deliver_message_task

        job = DeliveryJob(message=serialize_message(message, is_sent_by_me=False))
        deliver_message_task.apply_async(args=[job.to_payload()], queue=self._queue_name)
        logger.info(
            "Queued delivery job for message %s on %s", message.id, self._queue_name
        )


__all__ = ["CeleryDeliveryQueue"]
