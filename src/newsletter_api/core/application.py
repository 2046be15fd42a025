"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI
application with exception handlers and routers registered.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from newsletter_api.adapters.api.v1 import api_router
from newsletter_api.core.config.settings import Settings
from newsletter_api.core.config.settings import settings as default_settings
from newsletter_api.core.handlers import register_exception_handlers
from newsletter_api.core.lifecycle import create_lifespan_manager


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration to build the application from. Defaults to
            the process-wide settings loaded from the environment.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Newsletter subscriptions with double opt-in confirmation.",
        debug=settings.DEBUG,
        lifespan=create_lifespan_manager(settings),
        default_response_class=JSONResponse,
    )
    app.state.settings = settings

    # Register exception handlers
    register_exception_handlers(app)

    # Routes are served from the root: confirmation links point at them.
    app.include_router(api_router)

    return app
