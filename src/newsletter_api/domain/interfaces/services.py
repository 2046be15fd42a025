"""Service interfaces used by the API layer."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SubscriptionResult:
    """Outcome of a successful subscription attempt.

    Attributes:
        subscriber_id: The new or existing subscriber.
        already_exists: ``True`` when the email was already subscribed and the
            token was rotated instead of a subscriber being created.
        payload: Response body contributed by the notification channel.
    """

    subscriber_id: uuid.UUID
    already_exists: bool
    payload: Optional[Dict[str, Any]] = None


class ISubscriptionService(ABC):
    """Accepts subscription requests."""

    @abstractmethod
    async def subscribe(self, raw_name: str, raw_email: str) -> SubscriptionResult:
        """Validate, persist and notify.

        Raises:
            ValidationError: Invalid name or email.
            StorageError: Store or commit failure.
            UnexpectedError: Transaction could not be opened or the
                notification failed.
        """
        raise NotImplementedError


class IConfirmationService(ABC):
    """Redeems confirmation tokens."""

    @abstractmethod
    async def confirm(self, token: str) -> uuid.UUID:
        """Confirm the subscriber owning ``token``.

        Returns:
            The identifier of the confirmed subscriber.

        Raises:
            UnknownTokenError: No subscriber owns the token.
            SubscriberAlreadyConfirmedError: The subscriber is already confirmed.
            StorageError: Lookup or update failure.
        """
        raise NotImplementedError
