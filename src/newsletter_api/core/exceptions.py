"""Structured exception hierarchy for the newsletter service.

Every failure the subscription and confirmation flows can produce is one of
the classes below. Each carries a machine-readable ``code``, a human-readable
``message``, the ``context`` naming the step that failed and, when the error
wraps a lower-level exception, its ``cause``.

The hierarchy maps onto HTTP outcomes in ``newsletter_api.core.handlers``:

- ``ValidationError``                  -> 400 Bad Request
- ``UnknownTokenError``                -> 401 Unauthorized
- ``SubscriberAlreadyConfirmedError``  -> 409 Conflict
- ``StorageError``, ``UnexpectedError`` and anything else -> 500
"""

from __future__ import annotations

from typing import Final, Optional

__all__: Final = [
    "NewsletterError",
    "ValidationError",
    "DuplicateEmailError",
    "StorageError",
    "UnexpectedError",
    "UnknownTokenError",
    "SubscriberAlreadyConfirmedError",
    "EmailDeliveryError",
    "TemplateRenderError",
]


class NewsletterError(Exception):
    """Base exception class for all custom errors in the newsletter service.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
        context (str | None): The operation that was running when the error
            occurred, e.g. ``"insert_subscriber"``.
        cause (BaseException | None): The lower-level exception being wrapped.
    """

    message: str
    code: str = "generic_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.code = code or type(self).code
        self.context = context
        self.cause = cause
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Return the message prefixed with its context and followed by its cause."""
        text = f"{self.context}: {self.message}" if self.context else self.message
        if self.cause is not None:
            text = f"{text} (caused by {type(self.cause).__name__}: {self.cause})"
        return text


# ---------------------------------------------------------------------------
# Subscription errors
# ---------------------------------------------------------------------------


class ValidationError(NewsletterError):
    """Raised when a submitted name or email does not pass field validation."""

    code = "validation_error"


class DuplicateEmailError(NewsletterError):
    """Raised by the store when the unique email constraint rejects an insert.

    The subscription flow treats this as a signal to rotate the existing
    subscriber's token; it never reaches a client on its own.
    """

    code = "duplicate_email"


class StorageError(NewsletterError):
    """Raised for any failure while reading or writing subscriber state."""

    code = "storage_error"


class UnexpectedError(NewsletterError):
    """Raised for failures outside the store, such as email dispatch."""

    code = "unexpected_error"


# ---------------------------------------------------------------------------
# Confirmation errors
# ---------------------------------------------------------------------------


class UnknownTokenError(NewsletterError):
    """Raised when a confirmation token does not match any subscriber."""

    code = "unknown_token"


class SubscriberAlreadyConfirmedError(NewsletterError):
    """Raised when a confirmation token belongs to an already confirmed subscriber."""

    code = "already_confirmed"


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class EmailDeliveryError(NewsletterError):
    """Raised when the SMTP transport fails to hand the message over."""

    code = "email_delivery_error"


class TemplateRenderError(NewsletterError):
    """Raised when a confirmation email template cannot be rendered."""

    code = "template_render_error"
