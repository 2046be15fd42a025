import uuid
from unittest.mock import AsyncMock

import pytest

from newsletter_api.core.exceptions import (
    StorageError,
    SubscriberAlreadyConfirmedError,
    UnknownTokenError,
)
from newsletter_api.domain.entities.subscriber import SubscriberStatus
from newsletter_api.domain.interfaces import SubscriberTokenMatch
from newsletter_api.domain.services.subscription.confirmation_service import ConfirmationService


@pytest.mark.asyncio
async def test_confirm_pending_subscriber():
    subscriber_id = uuid.uuid4()
    repo = AsyncMock()
    repo.mark_confirmed.return_value = True
    repo.get_subscriber_by_token.return_value = SubscriberTokenMatch(
        subscriber_id, SubscriberStatus.PENDING_CONFIRMATION
    )

    result = await ConfirmationService(repo).confirm("abc")

    assert result == subscriber_id
    repo.get_subscriber_by_token.assert_awaited_once_with("abc")
    repo.mark_confirmed.assert_awaited_once_with(subscriber_id)


@pytest.mark.asyncio
async def test_confirm_unknown_token():
    repo = AsyncMock()
    repo.get_subscriber_by_token.return_value = None

    with pytest.raises(UnknownTokenError):
        await ConfirmationService(repo).confirm("wrong")
    repo.mark_confirmed.assert_not_called()


@pytest.mark.asyncio
async def test_confirm_already_confirmed_subscriber():
    repo = AsyncMock()
    repo.get_subscriber_by_token.return_value = SubscriberTokenMatch(
        uuid.uuid4(), SubscriberStatus.CONFIRMED
    )

    with pytest.raises(SubscriberAlreadyConfirmedError):
        await ConfirmationService(repo).confirm("abc")
    repo.mark_confirmed.assert_not_called()


@pytest.mark.asyncio
async def test_confirm_propagates_storage_errors():
    repo = AsyncMock()
    repo.get_subscriber_by_token.return_value = SubscriberTokenMatch(
        uuid.uuid4(), SubscriberStatus.PENDING_CONFIRMATION
    )
    repo.mark_confirmed.side_effect = StorageError("update failed", context="mark_confirmed")

    with pytest.raises(StorageError):
        await ConfirmationService(repo).confirm("abc")


@pytest.mark.asyncio
async def test_confirm_lost_to_a_concurrent_redemption():
    repo = AsyncMock()
    repo.get_subscriber_by_token.return_value = SubscriberTokenMatch(
        uuid.uuid4(), SubscriberStatus.PENDING_CONFIRMATION
    )
    repo.mark_confirmed.return_value = False

    with pytest.raises(SubscriberAlreadyConfirmedError) as exc_info:
        await ConfirmationService(repo).confirm("abc")

    assert exc_info.value.context == "mark_confirmed"
