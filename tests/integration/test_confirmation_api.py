import asyncio

import pytest
from fastapi import status
from httpx import AsyncClient

from db_helpers import fetch_subscribers, token_from_email
from newsletter_api.domain.entities.subscriber import SubscriberStatus

LE_GUIN = {"name": "le guin", "email": "ursula_le_guin@gmail.com"}

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_confirm_without_token_is_rejected(async_client: AsyncClient):
    response = await async_client.get("/subscriptions/confirm")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_confirm_with_unknown_token_returns_401(async_client: AsyncClient):
    response = await async_client.get(
        "/subscriptions/confirm", params={"subscription_token": "aaaaaaaaaaaaaaaaaaaaaaaaa"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_confirm_does_not_match_token_patterns(async_client: AsyncClient, email_client):
    await async_client.post("/subscriptions", data=LE_GUIN)

    response = await async_client.get("/subscriptions/confirm", params={"subscription_token": "%"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_clicking_the_confirmation_link_confirms_the_subscriber(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)
    token = token_from_email(email_client)

    response = await async_client.get("/subscriptions/confirm", params={"subscription_token": token})

    assert response.status_code == status.HTTP_200_OK
    subscribers = await fetch_subscribers(app)
    assert subscribers[0].status == SubscriberStatus.CONFIRMED.value


@pytest.mark.asyncio
async def test_second_click_on_the_link_returns_409(async_client: AsyncClient, app, email_client):
    await async_client.post("/subscriptions", data=LE_GUIN)
    token = token_from_email(email_client)

    first = await async_client.get("/subscriptions/confirm", params={"subscription_token": token})
    second = await async_client.get("/subscriptions/confirm", params={"subscription_token": token})

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_409_CONFLICT
    subscribers = await fetch_subscribers(app)
    assert subscribers[0].status == SubscriberStatus.CONFIRMED.value


@pytest.mark.asyncio
async def test_resubscribing_after_confirmation_keeps_the_subscriber_confirmed(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)
    await async_client.get(
        "/subscriptions/confirm", params={"subscription_token": token_from_email(email_client)}
    )

    response = await async_client.post("/subscriptions", data=LE_GUIN)
    new_token = token_from_email(email_client)
    confirm = await async_client.get(
        "/subscriptions/confirm", params={"subscription_token": new_token}
    )

    assert response.status_code == status.HTTP_200_OK
    assert confirm.status_code == status.HTTP_409_CONFLICT
    subscribers = await fetch_subscribers(app)
    assert subscribers[0].status == SubscriberStatus.CONFIRMED.value


@pytest.mark.asyncio
async def test_simultaneous_clicks_confirm_once_and_conflict_once(
    async_client: AsyncClient, app, email_client
):
    await async_client.post("/subscriptions", data=LE_GUIN)
    params = {"subscription_token": token_from_email(email_client)}

    responses = await asyncio.gather(
        async_client.get("/subscriptions/confirm", params=params),
        async_client.get("/subscriptions/confirm", params=params),
    )

    assert sorted(r.status_code for r in responses) == [
        status.HTTP_200_OK,
        status.HTTP_409_CONFLICT,
    ]
    subscribers = await fetch_subscribers(app)
    assert subscribers[0].status == SubscriberStatus.CONFIRMED.value
