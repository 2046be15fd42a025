"""SQLAlchemy implementation of the transaction port.

Each ``SqlAlchemyTransaction`` owns one ``AsyncSession``; sessions are never
shared between transactions or requests.
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker
from structlog import get_logger

from newsletter_api.core.exceptions import StorageError
from newsletter_api.domain.interfaces.transaction import ITransaction, ITransactionManager

logger = get_logger(__name__)


class SqlAlchemyTransaction(ITransaction):
    """A transaction bound to its own ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._finished = False

    @property
    def is_active(self) -> bool:
        return not self._finished

    async def execute(self, statement: Any) -> Any:
        if self._finished:
            raise StorageError("Transaction is already finished", context="execute")
        return await self._session.execute(statement)

    async def commit(self) -> None:
        self._finished = True
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error("Transaction commit failed", error=str(e))
            raise StorageError(
                "Failed to commit the transaction", context="commit", cause=e
            ) from e

    async def rollback(self) -> None:
        self._finished = True
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to roll back the transaction", context="rollback", cause=e
            ) from e

    async def close(self) -> None:
        # Closing a session rolls back whatever it did not commit.
        self._finished = True
        await self._session.close()


class SqlAlchemyTransactionManager(ITransactionManager):
    """Opens transactions from a shared session factory."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def begin(self) -> SqlAlchemyTransaction:
        session: AsyncSession = self._session_factory()
        try:
            # Acquire the connection now so failures surface here.
            await session.connection()
        except SQLAlchemyError as e:
            await session.close()
            raise StorageError(
                "Failed to open a transaction", context="begin", cause=e
            ) from e
        return SqlAlchemyTransaction(session)
