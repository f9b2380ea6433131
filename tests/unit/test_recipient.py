"""
Unit tests for recipient validation and normalization.
"""

import pytest

from src.domain.exceptions import InvalidRecipientError
from src.domain.recipient import normalize_recipient, validate_recipient


class TestNormalizeRecipient:
    def test_lowercases(self) -> None:
        assert normalize_recipient("User@Example.COM") == "user@example.com"

    def test_strips_surrounding_whitespace(self) -> None:
        assert normalize_recipient("  u@x.com\n") == "u@x.com"


class TestValidateRecipient:
    def test_valid_address_returns_key(self) -> None:
        assert validate_recipient("Someone@Example.com") == "someone@example.com"

    @pytest.mark.parametrize("email", ["", "   ", "\t"])
    def test_blank_address_is_required(self, email: str) -> None:
        with pytest.raises(InvalidRecipientError) as exc_info:
            validate_recipient(email)

        assert str(exc_info.value) == "Email address is required"

    @pytest.mark.parametrize("email", ["not-an-email", "a@", "@b.com", "a b@c.com", "a@@b.com"])
    def test_malformed_address_is_rejected(self, email: str) -> None:
        with pytest.raises(InvalidRecipientError) as exc_info:
            validate_recipient(email)

        assert "Invalid email address" in str(exc_info.value)
        assert exc_info.value.reason
        assert exc_info.value.reason in str(exc_info.value)
