"""
Recipient rules.

A recipient is an email address. Codes are keyed by the normalized form of
the address so lookups are case-insensitive.
"""

from email_validator import EmailNotValidError, validate_email

from src.domain.exceptions import InvalidRecipientError


def normalize_recipient(email: str) -> str:
    """
    Derive the recipient key from a raw email address.

    Args:
        email: Raw email address as submitted by the client

    Returns:
        The address stripped of surrounding whitespace and lowercased
    """
    return email.strip().lower()


def validate_recipient(email: str) -> str:
    """
    Check that a recipient is a non-blank, well-formed email address.

    Args:
        email: Raw email address as submitted by the client

    Returns:
        The recipient key (see normalize_recipient)

    Raises:
        InvalidRecipientError: If the address is blank or malformed

    Decision: Syntax check only. Deliverability (DNS/MX) lookups would put a
    network round trip in front of every send and the delivery gateway will
    reject unroutable addresses anyway.
    """
    if not email or not email.strip():
        raise InvalidRecipientError(email or "")

    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidRecipientError(email, reason=str(e)) from e

    return normalize_recipient(email)
