"""
Domain-specific exceptions.

These exceptions represent business rule violations and domain errors.
They are independent of infrastructure concerns.
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    pass


class InvalidRecipientError(DomainError):
    """Raised when a recipient email address is blank or malformed."""

    def __init__(self, email: str, reason: str | None = None):
        self.email = email
        self.reason = reason
        if not email or not email.strip():
            super().__init__("Email address is required")
        elif reason:
            super().__init__(f"Invalid email address: '{email}' ({reason})")
        else:
            super().__init__(f"Invalid email address: '{email}'")


class InvalidOrExpiredCodeError(DomainError):
    """
    Raised when a submitted code has no matching live record.

    Wrong code, expired code and never-requested code all map to this single
    error so callers cannot tell which case occurred.
    """

    MESSAGE = "Invalid or expired verification code."

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)
