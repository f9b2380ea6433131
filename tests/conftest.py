"""
Pytest configuration and shared fixtures.

This file provides common fixtures and configuration for all tests.

Decision: pytest-asyncio runs with asyncio_mode = "auto" configured in
pyproject.toml, so async tests and fixtures need no extra markers.
"""

import os
from datetime import UTC, datetime, timedelta

import pytest

# Set test environment variables before anything imports config.settings
# Use .setdefault() to respect values already set by docker-compose or other sources
os.environ.setdefault("LOG_LEVEL", "ERROR")
os.environ.setdefault("DELIVERY_BACKEND", "console")
os.environ.setdefault("CELERY_BROKER_URL", "redis://localhost:6379/1")

# Disable middleware features for tests by default
os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("CODE_STORE_SWEEP_INTERVAL_SECONDS", "0")


class FakeClock:
    """Controllable UTC clock for expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at a fixed instant."""
    return FakeClock()
