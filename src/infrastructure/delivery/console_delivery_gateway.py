"""
Console delivery gateway.

Logs verification codes instead of sending them. For local development only:
the code ends up in the application log.
"""

import logging

from src.application.delivery_gateway import DeliveryGateway

logger = logging.getLogger(__name__)


class ConsoleDeliveryGateway(DeliveryGateway):
    """
    Implements DeliveryGateway by logging at INFO level.

    Always accepts, so every send stores a code.
    """

    async def dispatch(self, recipient: str, code: str) -> None:
        logger.info(f"[VERIFICATION] Email: {recipient} Code: {code}")
