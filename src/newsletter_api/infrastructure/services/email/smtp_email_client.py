"""SMTP email client backed by FastMail.

Sends one multipart message per call. Delivery is attempted once; a failure
or timeout surfaces as ``EmailDeliveryError`` and the caller decides what to
do with the subscription attempt.
"""

import asyncio

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.schemas import MultipartSubtypeEnum

from newsletter_api.core.config.settings import Settings
from newsletter_api.core.exceptions import EmailDeliveryError
from newsletter_api.core.logging import mask_email
from newsletter_api.domain.interfaces.notification import IEmailClient

logger = structlog.get_logger(__name__)


def build_connection_config(settings: Settings) -> ConnectionConfig:
    username = settings.EMAIL_SMTP_USERNAME or ""
    password = (
        settings.EMAIL_SMTP_PASSWORD.get_secret_value()
        if settings.EMAIL_SMTP_PASSWORD
        else ""
    )
    return ConnectionConfig(
        MAIL_USERNAME=username,
        MAIL_PASSWORD=password,
        MAIL_FROM=settings.EMAIL_SENDER,
        MAIL_FROM_NAME=settings.EMAIL_SENDER_NAME,
        MAIL_PORT=settings.EMAIL_SMTP_PORT,
        MAIL_SERVER=settings.EMAIL_SMTP_HOST,
        MAIL_STARTTLS=settings.EMAIL_SMTP_START_TLS,
        MAIL_SSL_TLS=settings.EMAIL_SMTP_USE_TLS,
        USE_CREDENTIALS=bool(username and password),
        VALIDATE_CERTS=True,
    )


class SmtpEmailClient(IEmailClient):
    """Email client delivering through an SMTP relay."""

    def __init__(self, mailer: FastMail, timeout_seconds: float):
        self._mailer = mailer
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpEmailClient":
        logger.info(
            "SMTP email client configured",
            host=settings.EMAIL_SMTP_HOST,
            port=settings.EMAIL_SMTP_PORT,
            credentials=bool(settings.EMAIL_SMTP_USERNAME),
        )
        return cls(FastMail(build_connection_config(settings)), settings.EMAIL_TIMEOUT_SECONDS)

    async def send_email(
        self, recipient: str, subject: str, html_body: str, text_body: str
    ) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=html_body,
            alternative_body=text_body,
            subtype=MessageType.html,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )
        try:
            await asyncio.wait_for(self._mailer.send_message(message), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("Email delivery timed out", recipient=mask_email(recipient))
            raise EmailDeliveryError(
                f"Email delivery timed out after {self._timeout} seconds",
                context="send_email",
                cause=e,
            ) from e
        except Exception as e:
            logger.error(
                "Email delivery failed",
                recipient=mask_email(recipient),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise EmailDeliveryError(
                "Failed to deliver email", context="send_email", cause=e
            ) from e

        logger.info("Email delivered", recipient=mask_email(recipient), subject=subject)
