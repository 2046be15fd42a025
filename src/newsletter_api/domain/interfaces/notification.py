"""Notification ports.

A subscription attempt ends by handing the confirmation link to an
``INotificationChannel``. Which channel is used is decided once, when the
application is built, never per request.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ConfirmationNotice:
    """Everything a channel needs to deliver a confirmation link.

    Attributes:
        recipient: Email address of the subscriber.
        name: Display name of the subscriber.
        confirmation_link: Absolute URL that redeems the token.
    """

    recipient: str
    name: str
    confirmation_link: str


@dataclass(frozen=True)
class ConfirmationEmail:
    """A rendered confirmation email."""

    subject: str
    html_body: str
    text_body: str


class INotificationChannel(ABC):
    """Delivers confirmation links to subscribers."""

    @abstractmethod
    async def send_confirmation(
        self, notice: ConfirmationNotice
    ) -> Optional[Dict[str, Any]]:
        """Deliver ``notice``.

        Returns:
            A payload to include in the HTTP response, or ``None``.

        Raises:
            Exception: Any failure; the caller abandons the subscription attempt.
        """
        raise NotImplementedError


class IEmailClient(ABC):
    """Sends a single email. Failures are reported, never retried."""

    @abstractmethod
    async def send_email(
        self, recipient: str, subject: str, html_body: str, text_body: str
    ) -> None:
        """Send one multipart (HTML and plain text) message.

        Raises:
            EmailDeliveryError: If the message could not be handed over.
        """
        raise NotImplementedError


class IConfirmationEmailBuilder(ABC):
    """Turns a confirmation notice into a rendered email."""

    @abstractmethod
    def build(self, notice: ConfirmationNotice) -> ConfirmationEmail:
        """Render the email.

        Raises:
            TemplateRenderError: If a template is missing or fails to render.
        """
        raise NotImplementedError
