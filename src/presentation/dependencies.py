"""
FastAPI dependency injection.

This module wires together our layers (domain, application, infrastructure).

Decision: The code store is created once in the application lifespan and kept
on app.state. Dependencies read it from there instead of from a module-level
singleton, so each app instance (and each test) owns its own store.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from config.settings import settings
from fastapi import Depends, Request

from src.application.delivery_gateway import DeliveryGateway
from src.application.verification_manager import VerificationManager
from src.domain.code_store import CodeStore

logger = logging.getLogger(__name__)


def get_code_store(request: Request) -> CodeStore:
    """
    Get the application's code store.

    Args:
        request: Current request (injected)

    Returns:
        The CodeStore created at startup

    Raises:
        RuntimeError: If the lifespan hasn't run
    """
    code_store: CodeStore | None = getattr(request.app.state, "code_store", None)
    if code_store is None:
        raise RuntimeError("Code store not initialized. Is the application lifespan running?")
    return code_store


@lru_cache
def get_smtp_delivery_gateway() -> DeliveryGateway:
    """
    Get the SMTP delivery gateway (singleton).

    Decision: We use lru_cache so the gateway and its Jinja environment are
    built once and shared. Each dispatch still opens its own SMTP connection.
    """
    from src.infrastructure.delivery.smtp_delivery_gateway import SmtpDeliveryGateway

    return SmtpDeliveryGateway.from_settings(settings)


def get_delivery_gateway() -> DeliveryGateway:
    """
    Get the delivery gateway selected by DELIVERY_BACKEND.

    Returns:
        SMTP, Celery or console gateway

    Decision: Integration tests override this dependency with a recording
    gateway using FastAPI's dependency_overrides.
    """
    if settings.delivery_backend == "celery":
        from src.infrastructure.tasks.email.tasks import CeleryDeliveryGateway

        return CeleryDeliveryGateway()

    if settings.delivery_backend == "console":
        from src.infrastructure.delivery.console_delivery_gateway import ConsoleDeliveryGateway

        return ConsoleDeliveryGateway()

    return get_smtp_delivery_gateway()


def get_verification_manager(
    code_store: Annotated[CodeStore, Depends(get_code_store)],
    delivery_gateway: Annotated[DeliveryGateway, Depends(get_delivery_gateway)],
) -> VerificationManager:
    """
    Get VerificationManager with dependencies injected.

    Args:
        code_store: Shared code store (injected)
        delivery_gateway: Delivery channel (injected)

    Returns:
        VerificationManager instance
    """
    return VerificationManager(
        code_store=code_store,
        delivery_gateway=delivery_gateway,
        validity_window=timedelta(seconds=settings.verification_code_ttl_seconds),
        delivery_timeout_seconds=settings.delivery_timeout_seconds,
    )
