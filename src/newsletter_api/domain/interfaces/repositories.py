"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the abstract base class (interface) for the subscriber
store, which acts as a "port" in the context of Hexagonal Architecture. The
domain services use it without being coupled to SQL.

The concrete implementation resides in the `infrastructure` layer, acting as
the "adapter" that translates the domain's requests into database queries.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from newsletter_api.domain.entities.subscriber import SubscriberStatus
from newsletter_api.domain.interfaces.transaction import ITransaction
from newsletter_api.domain.value_objects.new_subscriber import NewSubscriber
from newsletter_api.domain.value_objects.subscription_token import SubscriptionToken


@dataclass(frozen=True)
class SubscriberTokenMatch:
    """The subscriber a confirmation token belongs to."""

    subscriber_id: uuid.UUID
    status: SubscriberStatus


class ISubscriberRepository(ABC):
    """An interface defining the contract for subscriber persistence operations.

    Mutating operations that are part of a subscription attempt take the
    caller's transaction handle and become durable only when it commits.
    Every failure other than a duplicate email surfaces as ``StorageError``.
    """

    @abstractmethod
    async def insert_subscriber(
        self, tx: ITransaction, new_subscriber: NewSubscriber
    ) -> uuid.UUID:
        """Creates a subscriber with status ``pending_confirmation``.

        Args:
            tx: The transaction the insert belongs to.
            new_subscriber: Validated name and email.

        Returns:
            The identifier of the new subscriber.

        Raises:
            DuplicateEmailError: If the email is already subscribed. The
                transaction can no longer be used and must be rolled back.
            StorageError: For any other failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_subscriber_id_by_name(self, name: str) -> Optional[uuid.UUID]:
        """Looks up a subscriber by display name, outside any transaction.

        Returns:
            The identifier, or ``None`` if no subscriber has that name.
        """
        raise NotImplementedError

    @abstractmethod
    async def insert_token(
        self, tx: ITransaction, subscriber_id: uuid.UUID, token: SubscriptionToken
    ) -> None:
        """Stores the first confirmation token of a subscriber."""
        raise NotImplementedError

    @abstractmethod
    async def replace_token(
        self, tx: ITransaction, subscriber_id: uuid.UUID, token: SubscriptionToken
    ) -> None:
        """Overwrites the existing confirmation token of a subscriber.

        Raises:
            StorageError: If the write fails or the subscriber has no token row.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_subscriber_by_token(
        self, token: str
    ) -> Optional[SubscriberTokenMatch]:
        """Finds the subscriber owning ``token`` by exact match.

        Returns:
            The owner and its status, or ``None`` if the token is unknown.
        """
        raise NotImplementedError

    @abstractmethod
    async def mark_confirmed(self, subscriber_id: uuid.UUID) -> bool:
        """Moves a subscriber to ``confirmed`` in its own short transaction.

        Returns:
            ``True`` if this call changed the status, ``False`` if the
            subscriber was already confirmed when the update ran.
        """
        raise NotImplementedError
