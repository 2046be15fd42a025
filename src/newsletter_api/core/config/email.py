"""Email and notification settings for the newsletter service.

This module defines the SMTP connection used to deliver confirmation emails,
the location of the email templates and which notification channel the
subscription flow uses.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings

DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parents[2] / "templates" / "email")


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Security considerations:
    - SMTP credentials are handled as SecretStr to prevent logging
    - STARTTLS is enabled by default

    Attributes:
        EMAIL_SMTP_HOST: SMTP server hostname
        EMAIL_SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for implicit TLS)
        EMAIL_SMTP_USERNAME: SMTP authentication username
        EMAIL_SMTP_PASSWORD: SMTP authentication password (SecretStr)
        EMAIL_SMTP_START_TLS: Upgrade the connection with STARTTLS
        EMAIL_SMTP_USE_TLS: Connect with implicit TLS
        EMAIL_SENDER: Sender address of confirmation emails
        EMAIL_SENDER_NAME: Sender display name
        EMAIL_TIMEOUT_SECONDS: Upper bound on a single SMTP exchange
        EMAIL_TEMPLATES_DIR: Directory containing confirmation templates
        NOTIFICATION_CHANNEL: ``email`` sends mail, ``echo`` returns the link
    """

    EMAIL_SMTP_HOST: str = Field(
        default="localhost",
        description="SMTP server hostname"
    )
    EMAIL_SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port (587 for STARTTLS, 465 for implicit TLS)"
    )
    EMAIL_SMTP_USERNAME: Optional[str] = Field(
        default=None,
        description="SMTP authentication username"
    )
    EMAIL_SMTP_PASSWORD: Optional[SecretStr] = Field(
        default=None,
        description="SMTP authentication password"
    )
    EMAIL_SMTP_START_TLS: bool = Field(
        default=True,
        description="Upgrade the SMTP connection with STARTTLS"
    )
    EMAIL_SMTP_USE_TLS: bool = Field(
        default=False,
        description="Connect to the SMTP server with implicit TLS"
    )

    EMAIL_SENDER: EmailStr = Field(
        default="newsletter@example.com",
        description="Sender address of confirmation emails"
    )
    EMAIL_SENDER_NAME: str = Field(
        default="Newsletter",
        description="Sender display name"
    )
    EMAIL_TIMEOUT_SECONDS: int = Field(
        default=10,
        ge=1,
        le=120,
        description="Timeout for a single SMTP delivery"
    )
    EMAIL_TEMPLATES_DIR: str = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Directory containing email templates"
    )

    NOTIFICATION_CHANNEL: Literal["email", "echo"] = Field(
        default="email",
        description="How confirmation links reach the subscriber"
    )

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.NOTIFICATION_CHANNEL != "email":
            return
        if getattr(self, "APP_ENV", "development") not in {"production", "staging"}:
            return

        if not self.EMAIL_SMTP_USERNAME or not self.EMAIL_SMTP_PASSWORD:
            raise ValueError(
                "EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD are required in production"
            )

        if not (self.EMAIL_SMTP_START_TLS or self.EMAIL_SMTP_USE_TLS):
            raise ValueError(
                "Either EMAIL_SMTP_START_TLS or EMAIL_SMTP_USE_TLS must be enabled"
            )

        if self.EMAIL_SMTP_START_TLS and self.EMAIL_SMTP_USE_TLS:
            raise ValueError(
                "Cannot enable both EMAIL_SMTP_START_TLS and EMAIL_SMTP_USE_TLS"
            )
