"""Transaction port.

Store mutations that belong to one subscription attempt must commit or roll
back together. Rather than leaking a database session into the domain, the
subscription flow asks an ``ITransactionManager`` for an ``ITransaction`` and
passes that handle to every mutating store call.
"""

from abc import ABC, abstractmethod
from typing import Any


class ITransaction(ABC):
    """A unit of work that is either committed or rolled back.

    After ``commit`` or ``rollback`` the handle is finished and must not be
    used for further statements. ``close`` releases the underlying connection
    and rolls back anything that was not committed.
    """

    @abstractmethod
    async def execute(self, statement: Any) -> Any:
        """Run a statement inside the transaction and return its result."""
        raise NotImplementedError

    @abstractmethod
    async def commit(self) -> None:
        """Make every statement of the transaction durable."""
        raise NotImplementedError

    @abstractmethod
    async def rollback(self) -> None:
        """Discard every statement of the transaction."""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release the transaction, rolling back if it is still open."""
        raise NotImplementedError

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """``True`` until the transaction has been committed or rolled back."""
        raise NotImplementedError


class ITransactionManager(ABC):
    """Opens transactions against the subscriber store."""

    @abstractmethod
    async def begin(self) -> ITransaction:
        """Open a new transaction.

        Raises:
            StorageError: If no connection could be acquired.
        """
        raise NotImplementedError
