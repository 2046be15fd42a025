from .async_db import (
    build_engine,
    build_session_factory,
    check_database_health,
    create_db_and_tables,
)
from .transaction import SqlAlchemyTransaction, SqlAlchemyTransactionManager

__all__ = [
    "build_engine",
    "build_session_factory",
    "check_database_health",
    "create_db_and_tables",
    "SqlAlchemyTransaction",
    "SqlAlchemyTransactionManager",
]
