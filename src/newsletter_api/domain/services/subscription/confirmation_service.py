"""Confirmation Domain Service.

Redeems a confirmation token: the owning subscriber moves from
``pending_confirmation`` to ``confirmed``, once.
"""

import uuid

import structlog

from newsletter_api.core.exceptions import (
    SubscriberAlreadyConfirmedError,
    UnknownTokenError,
)
from newsletter_api.core.logging import token_prefix
from newsletter_api.domain.entities.subscriber import SubscriberStatus
from newsletter_api.domain.interfaces import IConfirmationService, ISubscriberRepository

logger = structlog.get_logger(__name__)


class ConfirmationService(IConfirmationService):
    """Domain service for confirming subscriptions."""

    def __init__(self, repository: ISubscriberRepository):
        self._repository = repository

    async def confirm(self, token: str) -> uuid.UUID:
        match = await self._repository.get_subscriber_by_token(token)
        if match is None:
            logger.info("Unknown confirmation token", token_prefix=token_prefix(token))
            raise UnknownTokenError(
                "The confirmation token is not valid",
                context="get_subscriber_by_token",
            )

        if match.status == SubscriberStatus.CONFIRMED:
            logger.info(
                "Subscriber already confirmed",
                subscriber_id=str(match.subscriber_id),
            )
            raise SubscriberAlreadyConfirmedError(
                "The subscription has already been confirmed",
                context="confirm",
            )

        if not await self._repository.mark_confirmed(match.subscriber_id):
            # Another redemption of the same token confirmed it first.
            logger.info(
                "Subscriber confirmed by a concurrent request",
                subscriber_id=str(match.subscriber_id),
            )
            raise SubscriberAlreadyConfirmedError(
                "The subscription has already been confirmed",
                context="mark_confirmed",
            )

        logger.info("Subscriber confirmed", subscriber_id=str(match.subscriber_id))
        return match.subscriber_id
