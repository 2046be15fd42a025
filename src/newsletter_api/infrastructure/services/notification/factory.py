"""Builds the notification channel selected by configuration."""

import structlog

from newsletter_api.core.config.settings import Settings
from newsletter_api.domain.interfaces.notification import INotificationChannel
from newsletter_api.infrastructure.services.email.confirmation_email import (
    ConfirmationEmailBuilder,
)
from newsletter_api.infrastructure.services.email.smtp_email_client import SmtpEmailClient
from newsletter_api.infrastructure.services.email.templates import get_template_environment
from newsletter_api.infrastructure.services.notification.channels import (
    EchoNotificationChannel,
    EmailNotificationChannel,
)

logger = structlog.get_logger(__name__)


def build_notification_channel(settings: Settings) -> INotificationChannel:
    """Create the channel named by ``NOTIFICATION_CHANNEL``.

    Called once while the application starts.

    Raises:
        TemplateRenderError: If the email templates directory is missing.
    """
    if settings.NOTIFICATION_CHANNEL == "echo":
        logger.info("Notification channel selected", channel="echo")
        return EchoNotificationChannel()

    builder = ConfirmationEmailBuilder(
        environment=get_template_environment(settings.EMAIL_TEMPLATES_DIR),
        project_name=settings.PROJECT_NAME,
    )
    logger.info("Notification channel selected", channel="email")
    return EmailNotificationChannel(
        email_client=SmtpEmailClient.from_settings(settings),
        email_builder=builder,
    )
