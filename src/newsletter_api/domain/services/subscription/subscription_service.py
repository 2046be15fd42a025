"""Subscription Domain Service.

Runs one subscription attempt from raw form input to a committed subscriber
with a live confirmation token:

1. Validate the input; nothing touches the store when it is rejected.
2. Open a transaction and insert the subscriber.
3. When the email is already subscribed, roll back, resolve the existing
   subscriber and open a fresh transaction; the attempt then rotates that
   subscriber's token instead of failing.
4. Store the new token and hand the confirmation link to the notification
   channel.
5. Commit only once the notification succeeded, so a failed delivery leaves
   no trace in the store.
"""

import uuid
from typing import Any, Dict, Optional, Tuple

import structlog

from newsletter_api.core.exceptions import (
    DuplicateEmailError,
    StorageError,
    UnexpectedError,
)
from newsletter_api.core.logging import token_prefix
from newsletter_api.domain.interfaces import (
    ConfirmationNotice,
    INotificationChannel,
    ISubscriberRepository,
    ISubscriptionService,
    ITransaction,
    ITransactionManager,
    SubscriptionResult,
)
from newsletter_api.domain.value_objects.new_subscriber import NewSubscriber
from newsletter_api.domain.value_objects.subscription_token import SubscriptionToken

logger = structlog.get_logger(__name__)

CONFIRMATION_PATH = "/subscriptions/confirm"


class SubscriptionService(ISubscriptionService):
    """Domain service accepting newsletter subscriptions.

    Responsibilities:
    - Validate subscriber input
    - Create the subscriber or rotate the token of an existing one
    - Deliver the confirmation link
    - Keep store writes and delivery atomic
    """

    def __init__(
        self,
        repository: ISubscriberRepository,
        transaction_manager: ITransactionManager,
        notification_channel: INotificationChannel,
        base_url: str,
    ):
        """Initialize subscription service with dependencies.

        Args:
            repository: Subscriber store
            transaction_manager: Opens transactions on the subscriber store
            notification_channel: Delivers confirmation links
            base_url: Public base URL of the service, without trailing slash
        """
        self._repository = repository
        self._transactions = transaction_manager
        self._channel = notification_channel
        self._base_url = base_url.rstrip("/")

    async def subscribe(self, raw_name: str, raw_email: str) -> SubscriptionResult:
        new_subscriber = NewSubscriber.parse(raw_name, raw_email)
        email_masked = new_subscriber.email.mask_for_logging()

        tx = await self._begin()
        subscriber_id, already_exists, tx = await self._store_subscriber(tx, new_subscriber)

        token = SubscriptionToken.generate()
        try:
            if already_exists:
                await self._repository.replace_token(tx, subscriber_id, token)
            else:
                await self._repository.insert_token(tx, subscriber_id, token)
            payload = await self._notify(new_subscriber, token)
        except Exception:
            await self._abandon(tx)
            raise

        try:
            await tx.commit()
        finally:
            await tx.close()

        logger.info(
            "Subscription stored",
            subscriber_id=str(subscriber_id),
            email=email_masked,
            already_exists=already_exists,
            token_prefix=token_prefix(token.value),
        )
        return SubscriptionResult(
            subscriber_id=subscriber_id,
            already_exists=already_exists,
            payload=payload,
        )

    def confirmation_link(self, token: SubscriptionToken) -> str:
        """Absolute URL that redeems ``token``."""
        return f"{self._base_url}{CONFIRMATION_PATH}?subscription_token={token.value}"

    async def _begin(self) -> ITransaction:
        try:
            return await self._transactions.begin()
        except Exception as e:
            logger.error("Failed to open a transaction", error=str(e))
            raise UnexpectedError(
                "Failed to acquire a database connection",
                context="begin_transaction",
                cause=e,
            ) from e

    async def _store_subscriber(
        self, tx: ITransaction, new_subscriber: NewSubscriber
    ) -> Tuple[uuid.UUID, bool, ITransaction]:
        """Insert the subscriber, falling back to the existing one on a duplicate email.

        Returns the subscriber id, whether it already existed and the
        transaction the rest of the attempt must run in.
        """
        try:
            subscriber_id = await self._repository.insert_subscriber(tx, new_subscriber)
            return subscriber_id, False, tx
        except DuplicateEmailError:
            # The failed insert poisoned the transaction.
            await self._abandon(tx)
        except Exception:
            await self._abandon(tx)
            raise

        logger.info(
            "Email already subscribed, rotating token",
            email=new_subscriber.email.mask_for_logging(),
        )
        # Resolved by name, not email, and outside any transaction. The row can
        # change before the new transaction opens. When two subscribers share
        # a name, the newest one's token is rotated and its link is mailed to
        # this email address.
        subscriber_id = await self._repository.get_subscriber_id_by_name(
            new_subscriber.name.value
        )
        if subscriber_id is None:
            raise StorageError(
                "Subscriber with a duplicate email could not be resolved by name",
                context="get_subscriber_id_by_name",
            )
        return subscriber_id, True, await self._begin()

    async def _notify(
        self, new_subscriber: NewSubscriber, token: SubscriptionToken
    ) -> Optional[Dict[str, Any]]:
        notice = ConfirmationNotice(
            recipient=new_subscriber.email.value,
            name=new_subscriber.name.value,
            confirmation_link=self.confirmation_link(token),
        )
        try:
            return await self._channel.send_confirmation(notice)
        except Exception as e:
            logger.error(
                "Failed to deliver confirmation",
                email=new_subscriber.email.mask_for_logging(),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UnexpectedError(
                "Failed to send a confirmation email",
                context="send_confirmation",
                cause=e,
            ) from e

    async def _abandon(self, tx: ITransaction) -> None:
        """Roll back and release ``tx`` while an error is propagating."""
        try:
            if tx.is_active:
                await tx.rollback()
        except Exception as e:
            logger.error("Rollback failed", error=str(e))
        finally:
            await tx.close()
