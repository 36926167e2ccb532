"""Celery worker entry point for the message delivery queue.

Logging is configured before Celery is imported so worker records go to
stdout with the same format as the API.
"""

from cofound.logging_config import configure_logging

configure_logging()

from cofound.infrastructure.celery_app import celery_app  # noqa: E402

if __name__ == "__main__":
    celery_app.start()
