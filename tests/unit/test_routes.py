"""
Tests for API routes (presentation layer).

These tests verify the API endpoints with a mocked VerificationManager.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from src.application.verification_manager import VerificationErrorKind, VerificationResult
from src.main import app
from src.presentation.dependencies import get_verification_manager

SEND_URL = "/api/v1/verification/send"
VERIFY_URL = "/api/v1/verification/verify"
INVALID_OR_EXPIRED = "Invalid or expired verification code."


@pytest.fixture
def mock_manager():
    """Create mock verification manager."""
    mock = Mock()
    mock.send_verification_code = AsyncMock(
        return_value=VerificationResult.success("Verification email sent successfully")
    )
    mock.verify_verification_code = AsyncMock(
        return_value=VerificationResult.success("Verification successful.")
    )
    return mock


@pytest.fixture
def client(mock_manager):
    """Create test client with mocked dependencies."""
    app.dependency_overrides[get_verification_manager] = lambda: mock_manager

    yield TestClient(app)

    # Clean up
    app.dependency_overrides = {}


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self):
        """Test health check returns healthy once the store is up."""
        with TestClient(app) as client:
            response = client.get("/api/v1/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"] == {"code_store": "healthy"}
        assert "timestamp" in data

    def test_metrics_disabled(self, client):
        response = client.get("/api/v1/metrics")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["error"] == "MetricsDisabled"


class TestSendEndpoint:
    """Tests for the send endpoint."""

    def test_send_success(self, client, mock_manager):
        response = client.post(SEND_URL, json={"email": "user@example.com"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "succeeded": True,
            "message": "Verification email sent successfully",
        }
        mock_manager.send_verification_code.assert_awaited_once_with("user@example.com")

    def test_send_invalid_recipient(self, client, mock_manager):
        mock_manager.send_verification_code.return_value = VerificationResult.failure(
            VerificationErrorKind.INVALID_RECIPIENT, "Email address is required"
        )

        response = client.post(SEND_URL, json={"email": ""})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"succeeded": False, "error": "Email address is required"}

    def test_send_delivery_failed(self, client, mock_manager):
        mock_manager.send_verification_code.return_value = VerificationResult.failure(
            VerificationErrorKind.DELIVERY_FAILED,
            "Failed to send verification email: SMTP delivery failed",
        )

        response = client.post(SEND_URL, json={"email": "user@example.com"})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["succeeded"] is False
        assert response.json()["error"].startswith("Failed to send verification email")

    def test_send_internal_error(self, client, mock_manager):
        mock_manager.send_verification_code.return_value = VerificationResult.failure(
            VerificationErrorKind.INTERNAL_ERROR, "An unexpected error occurred"
        )

        response = client.post(SEND_URL, json={"email": "user@example.com"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    def test_send_missing_email(self, client, mock_manager):
        response = client.post(SEND_URL, json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["succeeded"] is False
        assert data["error"] == "Request validation failed"
        mock_manager.send_verification_code.assert_not_called()


class TestVerifyEndpoint:
    """Tests for the verify endpoint."""

    def test_verify_success(self, client, mock_manager):
        response = client.post(VERIFY_URL, json={"email": "User@Example.com", "code": "482913"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"succeeded": True, "message": "Verification successful."}
        mock_manager.verify_verification_code.assert_awaited_once_with(
            "User@Example.com", "482913"
        )

    def test_verify_invalid_code(self, client, mock_manager):
        mock_manager.verify_verification_code.return_value = VerificationResult.failure(
            VerificationErrorKind.INVALID_OR_EXPIRED_CODE, INVALID_OR_EXPIRED
        )

        response = client.post(VERIFY_URL, json={"email": "user@example.com", "code": "000000"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"succeeded": False, "error": INVALID_OR_EXPIRED}

    def test_verify_internal_error(self, client, mock_manager):
        mock_manager.verify_verification_code.return_value = VerificationResult.failure(
            VerificationErrorKind.INTERNAL_ERROR, "An unexpected error occurred"
        )

        response = client.post(VERIFY_URL, json={"email": "user@example.com", "code": "482913"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"email": "user@example.com"},
            {"email": "user@example.com", "code": ""},
            {"email": "", "code": "482913"},
        ],
    )
    def test_malformed_verify_gets_generic_error(self, client, mock_manager, payload):
        response = client.post(VERIFY_URL, json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"succeeded": False, "error": INVALID_OR_EXPIRED}
        mock_manager.verify_verification_code.assert_not_called()
