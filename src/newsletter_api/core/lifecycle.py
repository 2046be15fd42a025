"""Application lifecycle management.

This module handles application startup and shutdown, creating the
long-lived resources the request handlers share and releasing them again.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from newsletter_api.core.config.settings import Settings
from newsletter_api.core.logging import logger
from newsletter_api.infrastructure.database import (
    build_engine,
    build_session_factory,
    check_database_health,
    create_db_and_tables,
)
from newsletter_api.infrastructure.services.notification import build_notification_channel


def create_lifespan_manager(settings: Settings):
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Startup builds the engine and session factory, verifies the database,
        creates the tables when configured to and selects the notification
        channel. Everything is stored on ``app.state``.

        Raises:
            RuntimeError: If database is unavailable during startup
        """
        # Startup
        engine = build_engine(settings)
        if not await check_database_health(engine):
            logger.error("database_unavailable_on_startup")
            await engine.dispose()
            raise RuntimeError("Database unavailable")
        if settings.DATABASE_CREATE_TABLES:
            await create_db_and_tables(engine)

        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.notification_channel = build_notification_channel(settings)
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            notification_channel=settings.NOTIFICATION_CHANNEL,
        )

        yield

        # Shutdown
        await engine.dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
