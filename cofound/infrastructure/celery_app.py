"""Celery application backing the durable message delivery queue."""

from __future__ import annotations

from celery import Celery

from cofound.config import Settings, get_settings

DELIVERY_TASK_NAME = "cofound.deliver_message"


def create_celery_app(settings: Settings | None = None) -> Celery:
    """
    Create and configure the Celery application.

    Args:
        settings: Optional settings instance (defaults to the cached settings)

    Returns:
        Configured Celery instance
    """
    settings = settings or get_settings()
    celery = Celery(
        "cofound",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["cofound.tasks.delivery_tasks"],
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_time_limit=120,
        task_soft_time_limit=90,
        worker_prefetch_multiplier=1,
        worker_max_tasks_per_child=1000,
        # A job is acknowledged only after the attempt finishes, so a worker
        # crash puts it back on the broker instead of losing it.
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        task_ignore_result=True,
        task_routes={DELIVERY_TASK_NAME: {"queue": settings.delivery_queue_name}},
        task_default_queue=settings.delivery_queue_name,
        worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
        worker_task_log_format=(
            "[%(asctime)s: %(levelname)s/%(processName)s][%(task_name)s(%(task_id)s)] %(message)s"
        ),
        worker_hijack_root_logger=False,
    )
    return celery


celery_app = create_celery_app()


__all__ = ["DELIVERY_TASK_NAME", "celery_app", "create_celery_app"]
