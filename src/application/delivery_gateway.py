"""
Delivery gateway interface (Port).

Defines the contract for handing a verification code to an outbound channel.
The infrastructure layer will provide the adapter implementations.
"""

from abc import ABC, abstractmethod


class DeliveryGateway(ABC):
    """
    Abstract interface for dispatching verification codes.

    This is a "port" in Hexagonal Architecture.
    The infrastructure layer provides the concrete adapters (SMTP, Celery, console).

    Decision: dispatch() returning normally means the channel *accepted* the
    message (SMTP server took it, broker queued it). It does not mean the
    recipient received it. The manager only stores a code once dispatch()
    has returned.
    """

    @abstractmethod
    async def dispatch(self, recipient: str, code: str) -> None:
        """
        Send a verification code to a recipient.

        Args:
            recipient: Recipient's email address
            code: The code to deliver

        Raises:
            DeliveryError: If the channel rejects the message
        """
        pass


class DeliveryError(Exception):
    """Raised when a delivery channel rejects or fails to accept a message."""

    pass
