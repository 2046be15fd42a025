"""Subscriber Repository implementation using SQLAlchemy.

This module provides the repository pattern implementation for the
``subscriptions`` and ``subscription_tokens`` tables. It is the only code
that touches those tables.

Statements that are part of a subscription attempt run on the caller's
transaction handle. Lookups and the confirmation update open their own short
sessions from the shared session factory.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from structlog import get_logger

from newsletter_api.core.exceptions import DuplicateEmailError, StorageError
from newsletter_api.domain.entities.subscriber import (
    EMAIL_UNIQUE_CONSTRAINT,
    ConfirmationToken,
    Subscriber,
    SubscriberStatus,
)
from newsletter_api.domain.interfaces.repositories import (
    ISubscriberRepository,
    SubscriberTokenMatch,
)
from newsletter_api.domain.interfaces.transaction import ITransaction
from newsletter_api.domain.value_objects.new_subscriber import NewSubscriber
from newsletter_api.domain.value_objects.subscription_token import SubscriptionToken

logger = get_logger(__name__)

# Markers of a unique violation on subscriptions.email, per backend:
# PostgreSQL names the constraint, SQLite names the column.
_DUPLICATE_EMAIL_MARKERS = (EMAIL_UNIQUE_CONSTRAINT, "subscriptions.email")


def _is_duplicate_email(error: IntegrityError) -> bool:
    message = str(error.orig) if error.orig is not None else str(error)
    return any(marker in message for marker in _DUPLICATE_EMAIL_MARKERS)


class SubscriberRepository(ISubscriberRepository):
    """SQLAlchemy implementation of the subscriber store."""

    def __init__(self, session_factory: sessionmaker):
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory producing ``AsyncSession`` objects for
                operations that do not run on a caller's transaction.
        """
        self._session_factory = session_factory

    async def insert_subscriber(
        self, tx: ITransaction, new_subscriber: NewSubscriber
    ) -> uuid.UUID:
        subscriber_id = uuid.uuid4()
        statement = insert(Subscriber).values(
            id=subscriber_id,
            email=new_subscriber.email.value,
            name=new_subscriber.name.value,
            subscribed_at=datetime.now(timezone.utc),
            status=SubscriberStatus.PENDING_CONFIRMATION.value,
        )
        try:
            await tx.execute(statement)
        except IntegrityError as e:
            if _is_duplicate_email(e):
                logger.debug(
                    "Subscriber email already exists",
                    email=new_subscriber.email.mask_for_logging(),
                    operation="insert_subscriber",
                )
                raise DuplicateEmailError(
                    "A subscriber with this email already exists",
                    context="insert_subscriber",
                    cause=e,
                ) from e
            raise self._storage_error("insert_subscriber", e) from e
        except SQLAlchemyError as e:
            raise self._storage_error("insert_subscriber", e) from e

        logger.debug(
            "Subscriber inserted",
            subscriber_id=str(subscriber_id),
            operation="insert_subscriber",
        )
        return subscriber_id

    async def get_subscriber_id_by_name(self, name: str) -> Optional[uuid.UUID]:
        statement = (
            select(Subscriber.id)
            .where(Subscriber.name == name)
            .order_by(Subscriber.subscribed_at.desc())
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                subscriber_id = result.scalars().first()
        except SQLAlchemyError as e:
            raise self._storage_error("get_subscriber_id_by_name", e) from e

        logger.debug(
            "Subscriber lookup by name completed",
            found=subscriber_id is not None,
            operation="get_subscriber_id_by_name",
        )
        return subscriber_id

    async def insert_token(
        self, tx: ITransaction, subscriber_id: uuid.UUID, token: SubscriptionToken
    ) -> None:
        statement = insert(ConfirmationToken).values(
            subscription_token=token.value,
            subscriber_id=subscriber_id,
        )
        try:
            await tx.execute(statement)
        except SQLAlchemyError as e:
            raise self._storage_error("insert_token", e) from e

    async def replace_token(
        self, tx: ITransaction, subscriber_id: uuid.UUID, token: SubscriptionToken
    ) -> None:
        statement = (
            update(ConfirmationToken)
            .where(ConfirmationToken.subscriber_id == subscriber_id)
            .values(subscription_token=token.value)
        )
        try:
            result = await tx.execute(statement)
        except SQLAlchemyError as e:
            raise self._storage_error("replace_token", e) from e

        if result.rowcount == 0:
            logger.error(
                "No token row to replace",
                subscriber_id=str(subscriber_id),
                operation="replace_token",
            )
            raise StorageError(
                "Subscriber has no confirmation token to replace",
                context="replace_token",
            )

    async def get_subscriber_by_token(
        self, token: str
    ) -> Optional[SubscriberTokenMatch]:
        statement = (
            select(Subscriber.id, Subscriber.status)
            .join(ConfirmationToken, ConfirmationToken.subscriber_id == Subscriber.id)
            .where(ConfirmationToken.subscription_token == token)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.first()
        except SQLAlchemyError as e:
            raise self._storage_error("get_subscriber_by_token", e) from e

        if row is None:
            return None
        return SubscriberTokenMatch(subscriber_id=row.id, status=SubscriberStatus(row.status))

    async def mark_confirmed(self, subscriber_id: uuid.UUID) -> bool:
        # Confirmed rows are left untouched so the status never moves backwards;
        # a concurrent redemption that lost the race updates nothing.
        statement = (
            update(Subscriber)
            .where(Subscriber.id == subscriber_id)
            .where(Subscriber.status != SubscriberStatus.CONFIRMED.value)
            .values(status=SubscriberStatus.CONFIRMED.value)
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(statement)
        except SQLAlchemyError as e:
            raise self._storage_error("mark_confirmed", e) from e

        updated = result.rowcount == 1
        logger.debug(
            "Subscriber confirmation update completed",
            subscriber_id=str(subscriber_id),
            updated=updated,
            operation="mark_confirmed",
        )
        return updated

    @staticmethod
    def _storage_error(operation: str, error: Exception) -> StorageError:
        logger.error(
            "Subscriber store operation failed",
            error=str(error),
            error_type=type(error).__name__,
            operation=operation,
        )
        return StorageError(
            f"Subscriber store operation '{operation}' failed",
            context=operation,
            cause=error,
        )
