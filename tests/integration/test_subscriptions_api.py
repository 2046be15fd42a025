import asyncio

import pytest
from fastapi import status
from httpx import AsyncClient

from db_helpers import fetch_subscribers, fetch_tokens, token_from_email
from newsletter_api.core.exceptions import EmailDeliveryError
from newsletter_api.domain.entities.subscriber import SubscriberStatus

LE_GUIN = {"name": "le guin", "email": "ursula_le_guin@gmail.com"}

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_subscribe_returns_200_for_valid_form_data(async_client: AsyncClient, app):
    response = await async_client.post("/subscriptions", data=LE_GUIN)

    assert response.status_code == status.HTTP_200_OK
    subscribers = await fetch_subscribers(app)
    assert len(subscribers) == 1
    assert subscribers[0].email == "ursula_le_guin@gmail.com"
    assert subscribers[0].name == "le guin"
    assert subscribers[0].status == SubscriberStatus.PENDING_CONFIRMATION.value


@pytest.mark.asyncio
async def test_subscribe_stores_one_token_for_the_new_subscriber(async_client: AsyncClient, app):
    await async_client.post("/subscriptions", data=LE_GUIN)

    subscribers = await fetch_subscribers(app)
    tokens = await fetch_tokens(app)
    assert len(tokens) == 1
    assert tokens[0].subscriber_id == subscribers[0].id
    assert len(tokens[0].subscription_token) == 25
    assert tokens[0].subscription_token.isalnum()


@pytest.mark.asyncio
async def test_subscribe_sends_one_email_with_the_stored_token(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)

    email_client.send_email.assert_awaited_once()
    kwargs = email_client.send_email.call_args.kwargs
    assert kwargs["recipient"] == "ursula_le_guin@gmail.com"
    assert "le guin" in kwargs["text_body"]
    tokens = await fetch_tokens(app)
    assert token_from_email(email_client) == tokens[0].subscription_token


@pytest.mark.asyncio
async def test_confirmation_link_points_at_the_confirm_endpoint(async_client: AsyncClient, email_client):
    await async_client.post("/subscriptions", data=LE_GUIN)

    text_body = email_client.send_email.call_args.kwargs["text_body"]
    assert "http://testserver/subscriptions/confirm?subscription_token=" in text_body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "form, reason",
    [
        ({"name": "le guin"}, "missing the email"),
        ({"email": "ursula_le_guin@gmail.com"}, "missing the name"),
        ({}, "missing both name and email"),
        ({"name": "", "email": "ursula_le_guin@gmail.com"}, "empty name"),
        ({"name": "Ursula", "email": ""}, "empty email"),
        ({"name": "Ursula", "email": "definitely-not-an-email"}, "invalid email"),
        ({"name": "   ", "email": "ursula_le_guin@gmail.com"}, "whitespace-only name"),
        ({"name": "<script>", "email": "ursula_le_guin@gmail.com"}, "forbidden characters"),
    ],
)
async def test_subscribe_returns_400_for_invalid_form_data(
    async_client: AsyncClient, app, email_client, form, reason
):
    response = await async_client.post("/subscriptions", data=form)

    assert response.status_code == status.HTTP_400_BAD_REQUEST, reason
    assert await fetch_subscribers(app) == []
    email_client.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_subscribing_twice_rotates_the_token(async_client: AsyncClient, app, email_client):
    first = await async_client.post("/subscriptions", data=LE_GUIN)
    first_token = token_from_email(email_client)
    second = await async_client.post("/subscriptions", data=LE_GUIN)
    second_token = token_from_email(email_client)

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_200_OK
    assert first_token != second_token
    assert len(await fetch_subscribers(app)) == 1
    tokens = await fetch_tokens(app)
    assert [t.subscription_token for t in tokens] == [second_token]
    assert email_client.send_email.await_count == 2


@pytest.mark.asyncio
async def test_only_the_newest_link_confirms_after_resubscribing(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)
    old_token = token_from_email(email_client)
    await async_client.post("/subscriptions", data=LE_GUIN)
    new_token = token_from_email(email_client)

    old = await async_client.get("/subscriptions/confirm", params={"subscription_token": old_token})
    new = await async_client.get("/subscriptions/confirm", params={"subscription_token": new_token})

    assert old.status_code == status.HTTP_401_UNAUTHORIZED
    assert new.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_email_failure_returns_500_and_leaves_no_trace(
    async_client: AsyncClient, app, email_client
):
    email_client.send_email.side_effect = EmailDeliveryError("SMTP relay refused the message")

    response = await async_client.post("/subscriptions", data=LE_GUIN)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert await fetch_subscribers(app) == []
    assert await fetch_tokens(app) == []


@pytest.mark.asyncio
async def test_email_failure_on_resubscribe_keeps_the_previous_token(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)
    first_token = token_from_email(email_client)
    email_client.send_email.side_effect = EmailDeliveryError("SMTP relay refused the message")

    response = await async_client.post("/subscriptions", data=LE_GUIN)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    tokens = await fetch_tokens(app)
    assert [t.subscription_token for t in tokens] == [first_token]


@pytest.mark.asyncio
async def test_concurrent_subscriptions_for_the_same_email_both_succeed(
    async_client: AsyncClient, app, email_client
):
    responses = await asyncio.gather(
        async_client.post("/subscriptions", data=LE_GUIN),
        async_client.post("/subscriptions", data=LE_GUIN),
    )

    assert [r.status_code for r in responses] == [status.HTTP_200_OK, status.HTTP_200_OK]
    assert len(await fetch_subscribers(app)) == 1
    assert len(await fetch_tokens(app)) == 1
    assert email_client.send_email.await_count == 2
