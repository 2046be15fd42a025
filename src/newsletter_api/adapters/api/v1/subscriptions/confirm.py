"""Subscription confirmation endpoint.

Redeems the token carried by the link from the confirmation email.
"""

import uuid

import structlog
from fastapi import APIRouter, Query, Response, status

from newsletter_api.core.logging import token_prefix
from newsletter_api.infrastructure.dependency_injection.subscription_dependencies import (
    ConfirmationServiceDep,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/confirm",
    status_code=status.HTTP_200_OK,
    response_model=None,
    summary="Confirm a pending subscription",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Unknown token"},
        status.HTTP_409_CONFLICT: {"description": "Subscription already confirmed"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Storage failure"},
    },
)
async def confirm(
    service: ConfirmationServiceDep,
    subscription_token: str = Query(..., description="Token from the confirmation link"),
) -> Response:
    request_logger = logger.bind(
        correlation_id=str(uuid.uuid4()),
        endpoint="confirm",
        operation="subscription_confirmation",
    )
    request_logger.info(
        "Subscription confirmation attempt initiated",
        token_prefix=token_prefix(subscription_token),
    )

    subscriber_id = await service.confirm(subscription_token)

    request_logger.info("Subscription confirmed", subscriber_id=str(subscriber_id))
    return Response(status_code=status.HTTP_200_OK)
