"""Notification channel implementations.

- ``EmailNotificationChannel`` renders the confirmation email and sends it.
- ``EchoNotificationChannel`` sends nothing and returns the link so it can be
  put in the HTTP response; meant for local development and tests.
"""

from typing import Any, Dict, Optional

import structlog

from newsletter_api.core.logging import mask_email
from newsletter_api.domain.interfaces.notification import (
    ConfirmationNotice,
    IConfirmationEmailBuilder,
    IEmailClient,
    INotificationChannel,
)

logger = structlog.get_logger(__name__)


class EmailNotificationChannel(INotificationChannel):
    """Delivers confirmation links by email."""

    def __init__(self, email_client: IEmailClient, email_builder: IConfirmationEmailBuilder):
        self._email_client = email_client
        self._email_builder = email_builder

    async def send_confirmation(self, notice: ConfirmationNotice) -> Optional[Dict[str, Any]]:
        email = self._email_builder.build(notice)
        await self._email_client.send_email(
            recipient=notice.recipient,
            subject=email.subject,
            html_body=email.html_body,
            text_body=email.text_body,
        )
        return None


class EchoNotificationChannel(INotificationChannel):
    """Returns the confirmation link instead of delivering it."""

    async def send_confirmation(self, notice: ConfirmationNotice) -> Optional[Dict[str, Any]]:
        logger.info(
            "Confirmation link echoed (no email sent)",
            recipient=mask_email(notice.recipient),
        )
        return {"confirmation_link": notice.confirmation_link}
