"""
Celery configuration and application setup.

Celery is used when the delivery backend is "celery": the API hands the
verification email to a worker instead of talking SMTP itself. This allows us to:
1. Return API responses without waiting on the SMTP server
2. Retry failed email sends automatically
3. Scale email processing independently

Decision: Using centralized configuration from config.settings.
All Celery settings are loaded from environment variables via pydantic-settings.
"""

import logging

from celery import Celery
from config.settings import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "email_verification_tasks",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    # Task settings
    task_serializer=settings.celery_task_serializer,
    accept_content=settings.celery_accept_content,
    result_serializer=settings.celery_result_serializer,
    timezone=settings.celery_timezone,
    enable_utc=settings.celery_enable_utc,
    # Acknowledge only after completion, requeue if the worker dies mid-send
    task_acks_late=settings.celery_task_acks_late,
    task_reject_on_worker_lost=settings.celery_task_reject_on_worker_lost,
    # Performance settings
    worker_prefetch_multiplier=settings.celery_worker_prefetch_multiplier,
    worker_max_tasks_per_child=settings.celery_worker_max_tasks_per_child,
    result_expires=settings.celery_result_expires,
)

celery_app.autodiscover_tasks(["src.infrastructure.tasks.email"])

logger.info("Celery application configured")
