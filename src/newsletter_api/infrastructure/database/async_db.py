"""
Asynchronous Database Utilities Module

This module builds the SQLAlchemy asyncio engine and session factory used by
the subscriber store, and provides the startup helpers that verify
connectivity and create the schema.

**Security Note**: DATABASE_URL carries credentials; it is never logged.

Key Components:
    - build_engine: The asynchronous engine configured from settings.
    - build_session_factory: A factory for creating asynchronous sessions.
    - check_database_health: Connectivity check with retry logic.
    - create_db_and_tables: Creates the subscriber tables.
"""

import time

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql import text
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from newsletter_api.core.config.settings import Settings

# Registers the tables on SQLModel.metadata.
from newsletter_api.domain import entities  # noqa: F401

logger = get_logger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the asynchronous engine for the subscriber store.

    Pool sizing is only applied to server databases; SQLite uses SQLAlchemy's
    default pool for file and memory databases.
    """
    options = {"echo": settings.DATABASE_ECHO, "future": True}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,  # Check connection health before use
        )
    return create_async_engine(settings.DATABASE_URL, **options)


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def check_database_health(engine: AsyncEngine) -> bool:
    """
    Performs a health check on the database connection.

    Transient connection errors are retried a few times before the check
    gives up. Only used at startup; request handling never retries.

    Returns:
        bool: True if database is healthy and responsive, False otherwise.
    """
    start_time = time.time()
    try:
        await _ping(engine)
    except SQLAlchemyError as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            execution_time=time.time() - start_time,
        )
        return False
    logger.info(
        "database_health_check_success",
        execution_time=time.time() - start_time,
    )
    return True


async def create_db_and_tables(engine: AsyncEngine) -> None:
    """
    Creates the subscriber tables with logging.
    """
    start_time = time.time()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )
