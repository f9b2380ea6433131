"""
VerificationCode value object.

Represents an issued code together with its validity window.
Instances live only inside a CodeStore; callers only ever see the code string.
"""

import secrets
from datetime import UTC, datetime, timedelta

from src.domain.exceptions import InvalidOrExpiredCodeError


class VerificationCode:
    """
    Value object representing an issued verification code.

    The code is valid from created_at until expires_at (exclusive).
    """

    def __init__(self, code: str, created_at: datetime, expires_in: timedelta):
        """
        Initialize a VerificationCode.

        Args:
            code: The code value as sent to the recipient
            created_at: When the code was stored
            expires_in: How long the code stays valid
        """
        self._code = code
        self._created_at = created_at
        self._expires_at = created_at + expires_in

    def verify(self, provided_code: str, current_time: datetime | None = None) -> None:
        """
        Verify that the provided code matches and the record is still live.

        Args:
            provided_code: The code submitted by the client
            current_time: The current time (default: now, allows testing with specific times)

        Raises:
            InvalidOrExpiredCodeError: If the code doesn't match or has expired

        Decision: Comparison is constant-time on the UTF-8 bytes so response
        timing doesn't reveal how many leading digits were right.
        """
        if self.is_expired(current_time):
            raise InvalidOrExpiredCodeError()

        if not secrets.compare_digest(provided_code.encode("utf-8"), self._code.encode("utf-8")):
            raise InvalidOrExpiredCodeError()

    def is_expired(self, current_time: datetime | None = None) -> bool:
        """
        Check if the code has expired.

        Args:
            current_time: The time to check against (default: now)

        Returns:
            True if expired, False otherwise
        """
        check_time = current_time or datetime.now(UTC)
        return check_time >= self._expires_at

    @property
    def code(self) -> str:
        """Get the code value."""
        return self._code

    @property
    def created_at(self) -> datetime:
        """Get when the code was stored."""
        return self._created_at

    @property
    def expires_at(self) -> datetime:
        """Get when the code expires."""
        return self._expires_at

    def __repr__(self) -> str:
        # Never render the code itself
        return f"VerificationCode(expires_at={self._expires_at.isoformat()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerificationCode):
            return False
        return self._code == other._code and self._created_at == other._created_at
