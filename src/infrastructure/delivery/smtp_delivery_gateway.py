"""
SMTP delivery gateway.

Sends verification codes by email over SMTP.
For local development, we use Mailhog (SMTP testing server with web UI).

Decision: The adapter can be swapped with any other channel (HTTP email API,
SMS provider) without touching the verification logic, which only knows the
DeliveryGateway port.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import aiosmtplib
from jinja2 import Environment, FileSystemLoader

from src.application.delivery_gateway import DeliveryError, DeliveryGateway

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class SmtpDeliveryGateway(DeliveryGateway):
    """
    Delivery gateway that emails codes via SMTP.

    dispatch() returns once the SMTP server has accepted the message, which
    is as far as "delivered" can be observed from here.
    """

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_username: str | None = None,
        smtp_password: str | None = None,
        from_email: str = "noreply@example.com",
        validity_minutes: int = 5,
        verification_page_url: str = "https://example.com/verify",
        privacy_policy_url: str = "https://example.com/privacy-policy",
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize the SMTP delivery gateway.

        Args:
            smtp_host: SMTP server hostname
            smtp_port: SMTP server port
            smtp_username: SMTP authentication username (optional for Mailhog)
            smtp_password: SMTP authentication password (optional for Mailhog)
            from_email: Sender email address
            validity_minutes: Validity window quoted in the email body
            verification_page_url: Page the email links to
            privacy_policy_url: Privacy policy linked in the footer
            timeout_seconds: SMTP connection/command timeout
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.validity_minutes = validity_minutes
        self.verification_page_url = verification_page_url
        self.privacy_policy_url = privacy_policy_url
        self.timeout_seconds = timeout_seconds

        self.jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=True,  # Prevent XSS in HTML emails
        )

        logger.info(
            f"SMTP delivery gateway initialized: {smtp_host}:{smtp_port} "
            f"(auth: {'yes' if smtp_username else 'no'})"
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "SmtpDeliveryGateway":
        """
        Create a gateway from application settings.

        Args:
            settings: The config.settings.Settings instance
        """
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.smtp_from_email,
            validity_minutes=max(1, settings.verification_code_ttl_seconds // 60),
            verification_page_url=settings.verification_page_url,
            privacy_policy_url=settings.privacy_policy_url,
            timeout_seconds=settings.smtp_timeout_seconds,
        )

    def build_message(self, recipient: str, code: str) -> MIMEMultipart:
        """
        Render the verification email.

        Args:
            recipient: Recipient email
            code: Verification code

        Returns:
            A multipart/alternative message with plain text and HTML parts
        """
        message = MIMEMultipart("alternative")
        message["Subject"] = f"Your verification code is {code}"
        message["From"] = self.from_email
        message["To"] = recipient

        context = {
            "code": code,
            "validity_minutes": self.validity_minutes,
            "verification_link": f"{self.verification_page_url}?{urlencode({'email': recipient})}",
            "privacy_policy_url": self.privacy_policy_url,
        }

        text_content = self.jinja_env.get_template("verification_code.txt").render(context)
        html_content = self.jinja_env.get_template("verification_code.html").render(context)

        # Plain text first so clients that can't render HTML fall back to it
        message.attach(MIMEText(text_content, "plain", _charset="utf-8"))
        message.attach(MIMEText(html_content, "html", _charset="utf-8"))
        return message

    async def dispatch(self, recipient: str, code: str) -> None:
        """
        Email a verification code.

        Args:
            recipient: Recipient email
            code: Verification code

        Raises:
            DeliveryError: If the SMTP exchange fails (connection, auth, rejection)
        """
        message = self.build_message(recipient, code)

        try:
            logger.info(f"Sending verification code to {recipient} via SMTP")

            async with aiosmtplib.SMTP(
                hostname=self.smtp_host,
                port=self.smtp_port,
                timeout=self.timeout_seconds,
            ) as smtp:
                # Authenticate if credentials provided (not needed for Mailhog)
                if self.smtp_username and self.smtp_password:
                    await smtp.login(self.smtp_username, self.smtp_password)

                await smtp.send_message(message)

            logger.info(f"Verification email accepted by SMTP server for {recipient}")

        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send verification email to {recipient}: {e}")
            raise DeliveryError(f"SMTP delivery failed: {e}") from e
