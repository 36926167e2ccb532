"""Celery tasks executed by the delivery worker."""
