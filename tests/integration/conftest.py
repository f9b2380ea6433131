"""
pytest fixtures for integration tests.

Integration tests use:
- FastAPI's TestClient (in-process, no Docker needed)
- The real lifespan, so each client gets a fresh in-memory code store
- Dependency overrides to inject RecordingDeliveryGateway instead of SMTP

Decision: Using TestClient instead of httpx to Docker API is faster
and more appropriate for integration tests. We save Docker/Behave for E2E.
"""

import pytest
from fastapi.testclient import TestClient

from src.main import app
from src.presentation.dependencies import get_delivery_gateway
from tests.mocks.mock_delivery_gateway import RecordingDeliveryGateway


@pytest.fixture
def delivery_gateway():
    """Gateway that records every dispatched code."""
    return RecordingDeliveryGateway()


@pytest.fixture
def api_client(delivery_gateway):
    """
    Create FastAPI TestClient with the recording gateway injected.

    Returns:
        TestClient instance for making API requests

    Decision: Using TestClient as a context manager ensures the app's
    lifespan events (startup/shutdown) are triggered, which creates the
    code store. A new client means a new, empty store.
    """
    app.dependency_overrides[get_delivery_gateway] = lambda: delivery_gateway

    with TestClient(app) as client:
        yield client

    # Clean up overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def send_code(api_client):
    """
    Helper fixture to request a verification code.

    Usage:
        def test_something(send_code):
            response = send_code("user@example.com")
            assert response.status_code == 200
    """

    def _send(email: str):
        return api_client.post("/api/v1/verification/send", json={"email": email})

    return _send


@pytest.fixture
def verify_code(api_client):
    """Helper fixture to submit a code for verification."""

    def _verify(email: str, code: str):
        return api_client.post(
            "/api/v1/verification/verify", json={"email": email, "code": code}
        )

    return _verify


@pytest.fixture
def get_sent_code(delivery_gateway):
    """
    Helper to extract the code last "emailed" to an address.

    Decision: Reads the recording gateway directly; the API never returns
    the code.
    """

    def _get_code(email: str) -> str:
        code = delivery_gateway.last_code_for(email)
        assert code is not None, f"No code sent to {email}. Sent: {delivery_gateway.dispatched}"
        return code

    return _get_code
