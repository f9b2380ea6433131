"""
Verification manager use case.

Orchestrates the code lifecycle:
1. Issuance: validate recipient, generate code, dispatch it, store it
2. Validation: look the code up, compare, consume it on match

Every failure is returned as a VerificationResult. Nothing raised by the
generator, the gateway or the store escapes to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from src.application.delivery_gateway import DeliveryError, DeliveryGateway
from src.domain.code_generator import CodeGenerator
from src.domain.code_store import CodeStore
from src.domain.exceptions import InvalidOrExpiredCodeError, InvalidRecipientError
from src.domain.recipient import normalize_recipient, validate_recipient

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY_WINDOW = timedelta(minutes=5)
DEFAULT_DELIVERY_TIMEOUT_SECONDS = 10.0

SEND_SUCCESS_MESSAGE = "Verification email sent successfully"
VERIFY_SUCCESS_MESSAGE = "Verification successful."
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


class VerificationErrorKind(str, Enum):
    """Why a send or verify request failed."""

    INVALID_RECIPIENT = "InvalidRecipient"
    DELIVERY_FAILED = "DeliveryFailed"
    INVALID_OR_EXPIRED_CODE = "InvalidOrExpiredCode"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a send or verify request."""

    succeeded: bool
    message: str | None = None
    error: str | None = None
    error_kind: VerificationErrorKind | None = None

    @classmethod
    def success(cls, message: str) -> "VerificationResult":
        return cls(succeeded=True, message=message)

    @classmethod
    def failure(cls, error_kind: VerificationErrorKind, error: str) -> "VerificationResult":
        return cls(succeeded=False, error=error, error_kind=error_kind)


class VerificationManager:
    """
    Use case for issuing and validating verification codes.

    Decision: We use dependency injection for the store, the gateway and the
    generator. The store in particular is created once at startup and shared;
    the manager itself holds no state and is cheap to build per request.
    """

    def __init__(
        self,
        code_store: CodeStore,
        delivery_gateway: DeliveryGateway,
        code_generator: CodeGenerator | None = None,
        validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
        delivery_timeout_seconds: float | None = DEFAULT_DELIVERY_TIMEOUT_SECONDS,
    ):
        """
        Initialize the use case.

        Args:
            code_store: Store holding the currently valid code per recipient
            delivery_gateway: Channel that delivers codes to recipients
            code_generator: Source of new codes (default: CodeGenerator())
            validity_window: How long an issued code stays valid
            delivery_timeout_seconds: Upper bound on a dispatch call (None: no bound)
        """
        self.code_store = code_store
        self.delivery_gateway = delivery_gateway
        self.code_generator = code_generator or CodeGenerator()
        self.validity_window = validity_window
        self.delivery_timeout_seconds = delivery_timeout_seconds

    async def send_verification_code(self, recipient: str) -> VerificationResult:
        """
        Issue a new code to a recipient.

        Process:
        1. Validate the recipient address
        2. Generate a code
        3. Dispatch it through the delivery gateway
        4. Store it for the validity window, replacing any outstanding code

        Args:
            recipient: Recipient's email address

        Returns:
            Success result (the code itself is never included), or a failure
            with kind INVALID_RECIPIENT, DELIVERY_FAILED or INTERNAL_ERROR

        Decision: The code is stored only after the gateway accepted it. A
        rejected, failed or timed-out dispatch leaves any previous code for
        this recipient as it was.
        """
        try:
            key = validate_recipient(recipient)
        except InvalidRecipientError as e:
            logger.warning(f"Send rejected: {e!s}")
            return VerificationResult.failure(VerificationErrorKind.INVALID_RECIPIENT, str(e))

        try:
            code = self.code_generator.generate()
        except Exception as e:
            logger.error(f"Code generation failed for {key}: {e}", exc_info=True)
            return VerificationResult.failure(
                VerificationErrorKind.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
            )

        try:
            await asyncio.wait_for(
                self.delivery_gateway.dispatch(recipient.strip(), code),
                timeout=self.delivery_timeout_seconds,
            )
        except DeliveryError as e:
            logger.warning(f"Delivery rejected for {key}: {e!s}")
            return VerificationResult.failure(
                VerificationErrorKind.DELIVERY_FAILED,
                f"Failed to send verification email: {e!s}",
            )
        except TimeoutError:
            logger.warning(
                f"Delivery timed out for {key} after {self.delivery_timeout_seconds}s"
            )
            return VerificationResult.failure(
                VerificationErrorKind.DELIVERY_FAILED,
                "Failed to send verification email: delivery timed out",
            )
        except Exception as e:
            logger.error(f"Unexpected delivery failure for {key}: {e}", exc_info=True)
            return VerificationResult.failure(
                VerificationErrorKind.DELIVERY_FAILED,
                f"Failed to send verification email: {e!s}",
            )

        try:
            self.code_store.put(key, code, self.validity_window)
        except Exception as e:
            logger.error(f"Failed to store verification code for {key}: {e}", exc_info=True)
            return VerificationResult.failure(
                VerificationErrorKind.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
            )

        logger.info(f"Verification code issued for {key}")
        return VerificationResult.success(SEND_SUCCESS_MESSAGE)

    async def verify_verification_code(self, recipient: str, code: str) -> VerificationResult:
        """
        Check a submitted code and consume it on match.

        Args:
            recipient: Recipient's email address (any case)
            code: Code submitted by the client

        Returns:
            Success result, or a failure with kind INVALID_OR_EXPIRED_CODE
            (or INTERNAL_ERROR if the store itself fails)

        Decision: Wrong code, expired code and no code at all produce the same
        error so the response can't be used as an oracle. There is no attempt
        counter here; brute-force protection belongs in front of this endpoint.
        """
        key = normalize_recipient(recipient)

        try:
            self.code_store.consume(key, code)
        except InvalidOrExpiredCodeError as e:
            logger.warning(f"Verification failed for {key}")
            return VerificationResult.failure(
                VerificationErrorKind.INVALID_OR_EXPIRED_CODE, str(e)
            )
        except Exception as e:
            logger.error(f"Code store failure while verifying {key}: {e}", exc_info=True)
            return VerificationResult.failure(
                VerificationErrorKind.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
            )

        logger.info(f"Verification succeeded for {key}")
        return VerificationResult.success(VERIFY_SUCCESS_MESSAGE)

    def save_verification_code(
        self, recipient: str, code: str, valid_for: timedelta | None = None
    ) -> None:
        """
        Store a known code for a recipient without dispatching it.

        Args:
            recipient: Recipient's email address (any case)
            code: Code value to store
            valid_for: Validity window (default: the manager's window)
        """
        self.code_store.put(
            normalize_recipient(recipient),
            code,
            self.validity_window if valid_for is None else valid_for,
        )
