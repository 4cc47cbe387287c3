"""
Pooled and transactional database handles.

``Database`` runs every statement on a connection checked out for that
statement alone. ``Database.get_connection()`` reserves one connection and
opens a transaction on it; the returned ``TransactionalConnection`` exposes
the same query surface until it is committed or rolled back, which always
gives the connection back to the pool.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Mapping

from sqlalchemy import Connection, Engine, RootTransaction

from worklog.core.logging import get_logger
from worklog.db.errors import TransactionClosedError
from worklog.db.gateway import QueryExecutor, Row, run_statement

logger = get_logger(__name__)


class TransactionState(str, Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionalConnection(QueryExecutor):
    """A single pooled connection with an open transaction."""

    def __init__(self, connection: Connection, transaction: RootTransaction) -> None:
        self._connection = connection
        self._transaction = transaction
        self.state = TransactionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    def _ensure_active(self) -> None:
        if not self.is_active:
            raise TransactionClosedError(f"Transaction already {self.state.value}")

    def _run(self, sql: str, params: Mapping[str, Any]) -> list[Row]:
        self._ensure_active()
        return run_statement(self._connection, sql, params)

    def commit(self) -> None:
        """Commit the transaction and release the connection, even if COMMIT fails."""
        self._ensure_active()
        self.state = TransactionState.COMMITTED
        try:
            self._transaction.commit()
        finally:
            self._connection.close()

    def rollback(self) -> None:
        """Roll back the transaction and release the connection, even if ROLLBACK fails."""
        self._ensure_active()
        self.state = TransactionState.ROLLED_BACK
        try:
            self._transaction.rollback()
        finally:
            self._connection.close()


class Database(QueryExecutor):
    """Entry point to the store: pooled queries plus transaction acquisition."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def _run(self, sql: str, params: Mapping[str, Any]) -> list[Row]:
        with self.engine.begin() as connection:
            return run_statement(connection, sql, params)

    def get_connection(self) -> TransactionalConnection:
        """
        Check a connection out of the pool and begin a transaction on it.

        The caller owns exactly one terminal call: ``commit()`` or ``rollback()``.
        """
        connection = self.engine.connect()
        try:
            transaction = connection.begin()
        except Exception:
            connection.close()
            raise
        return TransactionalConnection(connection, transaction)

    @contextmanager
    def transaction(self) -> Iterator[TransactionalConnection]:
        """
        Scoped transaction: commit on normal exit, roll back on any exception.

        A failing rollback is logged and never replaces the original error.
        """
        tx = self.get_connection()
        try:
            yield tx
        except BaseException:
            if tx.is_active:
                try:
                    tx.rollback()
                except Exception:
                    logger.exception("Rollback failed")
            raise
        if tx.is_active:
            tx.commit()
