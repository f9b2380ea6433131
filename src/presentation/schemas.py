"""
API request/response schemas (DTOs).

These Pydantic models define the API contract for requests and responses.

Decision: Send requests take the email as a plain string. Address validation
is a domain rule (recipient.validate_recipient) so the HTTP layer and any
other caller of the manager reject the same inputs with the same message.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class SendVerificationRequest(BaseModel):
    """Request schema for issuing a verification code."""

    email: str = Field(
        ...,
        max_length=320,
        description="Recipient email address",
        examples=["user@example.com"],
    )


class VerifyVerificationCodeRequest(BaseModel):
    """Request schema for checking a verification code."""

    email: str = Field(
        ...,
        min_length=1,
        max_length=320,
        description="Email address the code was sent to (case-insensitive)",
        examples=["user@example.com"],
    )
    code: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Verification code received by email",
        examples=["482913"],
    )


class VerificationResponse(BaseModel):
    """Outcome of a send or verify request."""

    succeeded: bool = Field(..., description="Whether the operation succeeded")
    message: str | None = Field(
        None,
        description="Success message",
        examples=["Verification email sent successfully"],
    )
    error: str | None = Field(
        None,
        description="Human-readable error message",
        examples=["Invalid or expired verification code."],
    )


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status", examples=["healthy"])
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Current server time")
    checks: dict[str, str] = Field(default_factory=dict, description="Component checks")
