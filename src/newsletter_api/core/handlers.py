"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for the newsletter exceptions,
translating them into HTTP responses of the form ``{"detail": ...}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from newsletter_api.core.exceptions import (
    NewsletterError,
    StorageError,
    SubscriberAlreadyConfirmedError,
    UnknownTokenError,
    ValidationError,
)

__all__ = [
    "validation_error_handler",
    "unknown_token_error_handler",
    "already_confirmed_error_handler",
    "storage_error_handler",
    "newsletter_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`.

    Raised when a subscription form carries an invalid name or email.
    """
    logger.info(
        "Subscription input rejected",
        error_code=exc.code,
        context=exc.context,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def unknown_token_error_handler(request: Request, exc: UnknownTokenError) -> JSONResponse:
    """Handles `UnknownTokenError`, returning a `401 Unauthorized`."""
    logger.warning(
        "Unknown confirmation token",
        error_code=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message},
    )


async def already_confirmed_error_handler(
    request: Request, exc: SubscriberAlreadyConfirmedError
) -> JSONResponse:
    """Handles `SubscriberAlreadyConfirmedError`, returning a `409 Conflict`."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.message},
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Handles `StorageError`, returning a `500 Internal Server Error`.

    The underlying database error is logged but never exposed to the client.
    """
    logger.critical(
        "A subscriber store error occurred",
        error_code=exc.code,
        error_message=exc.describe(),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "A database error occurred."},
    )


async def newsletter_error_handler(request: Request, exc: NewsletterError) -> JSONResponse:
    """Handles the base `NewsletterError`, returning a `500 Internal Server Error`.

    Fallback for errors without a more specific handler, notably
    `UnexpectedError` raised when a confirmation email cannot be sent.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.describe(),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the base
    `NewsletterError` handler only catches what the others do not.
    """
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UnknownTokenError, unknown_token_error_handler)
    app.add_exception_handler(SubscriberAlreadyConfirmedError, already_confirmed_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(NewsletterError, newsletter_error_handler)
