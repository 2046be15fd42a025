"""Subscription endpoint.

Thin API layer: the form fields go straight to the subscription service.
Errors are mapped to HTTP responses by the handlers in ``newsletter_api.core.handlers``.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import APIRouter, Form, Response, status
from fastapi.responses import JSONResponse

from newsletter_api.core.logging import mask_email
from newsletter_api.infrastructure.dependency_injection.subscription_dependencies import (
    SubscriptionServiceDep,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=None,
    summary="Subscribe to the newsletter",
    description=(
        "Registers a subscriber and sends a confirmation link. Subscribing an "
        "address again replaces its confirmation link; only the newest one works."
    ),
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid name or email"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Storage or delivery failure"},
    },
)
async def subscribe(
    service: SubscriptionServiceDep,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
) -> Response:
    """Accept a subscription form.

    Missing and empty fields are passed on as empty strings so that they are
    rejected by validation with a 400, like any other invalid value.
    """
    request_logger = logger.bind(
        correlation_id=str(uuid.uuid4()),
        endpoint="subscribe",
        operation="subscription",
    )
    request_logger.info("Subscription attempt initiated", email_masked=mask_email(email))

    result = await service.subscribe(raw_name=name, raw_email=email)

    request_logger.info(
        "Subscription attempt succeeded",
        subscriber_id=str(result.subscriber_id),
        already_exists=result.already_exists,
    )
    if result.payload:
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.payload)
    return Response(status_code=status.HTTP_200_OK)
