import asyncio
import uuid

import pytest
import pytest_asyncio

from newsletter_api.core.exceptions import (
    DuplicateEmailError,
    StorageError,
    SubscriberAlreadyConfirmedError,
)
from newsletter_api.domain.entities.subscriber import SubscriberStatus
from newsletter_api.domain.services.subscription import ConfirmationService
from newsletter_api.domain.value_objects import NewSubscriber, SubscriptionToken
from newsletter_api.infrastructure.database import (
    SqlAlchemyTransactionManager,
    build_engine,
    build_session_factory,
    create_db_and_tables,
)
from newsletter_api.infrastructure.repositories import SubscriberRepository
from settings_factory import make_settings

pytestmark = pytest.mark.integration

LE_GUIN = NewSubscriber.parse("le guin", "ursula_le_guin@gmail.com")


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(make_settings(tmp_path))
    await create_db_and_tables(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def repository(session_factory):
    return SubscriberRepository(session_factory)


@pytest.fixture
def transactions(session_factory):
    return SqlAlchemyTransactionManager(session_factory)


async def store(repository, transactions, new_subscriber=LE_GUIN, token=None):
    tx = await transactions.begin()
    try:
        subscriber_id = await repository.insert_subscriber(tx, new_subscriber)
        await repository.insert_token(tx, subscriber_id, token or SubscriptionToken.generate())
        await tx.commit()
    finally:
        await tx.close()
    return subscriber_id


@pytest.mark.asyncio
async def test_inserted_subscriber_is_pending(repository, transactions):
    token = SubscriptionToken.generate()

    subscriber_id = await store(repository, transactions, token=token)

    match = await repository.get_subscriber_by_token(token.value)
    assert isinstance(subscriber_id, uuid.UUID)
    assert match.subscriber_id == subscriber_id
    assert match.status == SubscriberStatus.PENDING_CONFIRMATION


@pytest.mark.asyncio
async def test_duplicate_email_is_reported(repository, transactions):
    await store(repository, transactions)

    tx = await transactions.begin()
    try:
        with pytest.raises(DuplicateEmailError):
            await repository.insert_subscriber(tx, LE_GUIN)
        await tx.rollback()
    finally:
        await tx.close()


@pytest.mark.asyncio
async def test_rolled_back_insert_leaves_nothing_behind(repository, transactions):
    tx = await transactions.begin()
    await repository.insert_subscriber(tx, LE_GUIN)
    await tx.rollback()
    await tx.close()

    assert await repository.get_subscriber_id_by_name("le guin") is None


@pytest.mark.asyncio
async def test_lookup_by_name(repository, transactions):
    subscriber_id = await store(repository, transactions)

    assert await repository.get_subscriber_id_by_name("le guin") == subscriber_id
    assert await repository.get_subscriber_id_by_name("someone else") is None


@pytest.mark.asyncio
async def test_replace_token_overwrites_the_old_one(repository, transactions):
    old_token = SubscriptionToken.generate()
    new_token = SubscriptionToken.generate()
    subscriber_id = await store(repository, transactions, token=old_token)

    tx = await transactions.begin()
    await repository.replace_token(tx, subscriber_id, new_token)
    await tx.commit()
    await tx.close()

    assert await repository.get_subscriber_by_token(old_token.value) is None
    match = await repository.get_subscriber_by_token(new_token.value)
    assert match.subscriber_id == subscriber_id


@pytest.mark.asyncio
async def test_replace_token_without_a_row_fails(repository, transactions):
    tx = await transactions.begin()
    try:
        with pytest.raises(StorageError):
            await repository.replace_token(tx, uuid.uuid4(), SubscriptionToken.generate())
    finally:
        await tx.close()


@pytest.mark.asyncio
async def test_token_lookup_is_exact(repository, transactions):
    token = SubscriptionToken.generate()
    await store(repository, transactions, token=token)

    assert await repository.get_subscriber_by_token(token.value[:10]) is None
    assert await repository.get_subscriber_by_token("%") is None


@pytest.mark.asyncio
async def test_mark_confirmed(repository, transactions):
    token = SubscriptionToken.generate()
    subscriber_id = await store(repository, transactions, token=token)

    assert await repository.mark_confirmed(subscriber_id) is True
    assert await repository.mark_confirmed(subscriber_id) is False

    match = await repository.get_subscriber_by_token(token.value)
    assert match.status == SubscriberStatus.CONFIRMED


@pytest.mark.asyncio
async def test_concurrent_redemptions_confirm_exactly_once(repository, transactions):
    token = SubscriptionToken.generate()
    subscriber_id = await store(repository, transactions, token=token)
    service = ConfirmationService(repository)

    outcomes = await asyncio.gather(
        service.confirm(token.value),
        service.confirm(token.value),
        return_exceptions=True,
    )

    confirmed = [o for o in outcomes if not isinstance(o, BaseException)]
    conflicts = [o for o in outcomes if isinstance(o, SubscriberAlreadyConfirmedError)]
    assert confirmed == [subscriber_id]
    assert len(conflicts) == 1


@pytest.mark.asyncio
async def test_lookup_by_shared_name_returns_the_newest_subscriber(repository, transactions):
    await store(repository, transactions)
    namesake_id = await store(
        repository, transactions, NewSubscriber.parse("le guin", "another_le_guin@gmail.com")
    )

    assert await repository.get_subscriber_id_by_name("le guin") == namesake_id
