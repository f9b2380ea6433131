"""
Email-related Celery tasks.

These tasks run in Celery workers, separate from the API process.

Decision: Organized in a dedicated 'email' package under tasks/ so
autodiscover_tasks() finds it by the Celery tasks.py convention.
"""

import asyncio
import logging
from typing import Any

from config.settings import settings

from src.application.delivery_gateway import DeliveryError, DeliveryGateway
from src.infrastructure.delivery.smtp_delivery_gateway import SmtpDeliveryGateway
from src.infrastructure.tasks.celery_config import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    autoretry_for=(DeliveryError,),
    retry_backoff=True,
    retry_backoff_max=60,
    retry_jitter=True,
    max_retries=3,
)
def send_verification_email_task(self: Any, recipient: str, code: str) -> str:
    """
    Celery task to send a verification email.

    Args:
        self: Celery task instance (from bind=True)
        recipient: Recipient email address
        code: Verification code

    Returns:
        Status message

    Retry Configuration:
    - autoretry_for: Retry when the SMTP exchange fails
    - retry_backoff: Exponential backoff (2^retry_num seconds)
    - retry_backoff_max: Capped at 60 seconds; the code expires in minutes,
      so a retry that lands later than that is pointless
    - max_retries: Maximum 3 retry attempts
    """
    try:
        logger.info(
            f"[CELERY] Sending verification email to {recipient} (Task: {self.request.id})"
        )

        # New gateway per task so each task owns its SMTP connection
        gateway = SmtpDeliveryGateway.from_settings(settings)
        asyncio.run(gateway.dispatch(recipient, code))

        logger.info(f"[CELERY] Verification email sent to {recipient}")
        return f"Email sent to {recipient}"

    except DeliveryError as e:
        logger.error(
            f"[CELERY] Failed to send verification email to {recipient} "
            f"(Attempt {self.request.retries + 1}/{self.max_retries}): {e}"
        )
        raise


class CeleryDeliveryGateway(DeliveryGateway):
    """
    Delivery gateway that queues the email for a Celery worker.

    Decision: "Accepted" here means the broker took the task. Actual SMTP
    delivery happens later in the worker, with retries. The code is stored as
    soon as the task is queued, so it may be valid slightly before the email
    arrives.
    """

    async def dispatch(self, recipient: str, code: str) -> None:
        """
        Enqueue the verification email task.

        Args:
            recipient: Recipient email
            code: Verification code

        Raises:
            DeliveryError: If the broker can't be reached or refuses the task
        """
        try:
            # delay() talks to the broker synchronously
            task = await asyncio.to_thread(send_verification_email_task.delay, recipient, code)
        except Exception as e:
            logger.error(f"[CELERY] Failed to enqueue verification email for {recipient}: {e}")
            raise DeliveryError(f"Could not queue verification email: {e}") from e

        logger.info(f"[CELERY] Enqueued verification email task {task.id} for {recipient}")
