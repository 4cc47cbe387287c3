"""
Database-layer errors and integrity violation classification.
"""

from enum import Enum

from sqlalchemy.exc import IntegrityError

# SQLSTATE codes (PostgreSQL, also reported by psycopg as ``pgcode``/``sqlstate``)
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"


class QueryParameterError(ValueError):
    """The number of bound values does not match the placeholders in the SQL text."""


class TransactionClosedError(RuntimeError):
    """A transactional connection was used after commit or rollback."""


class IntegrityKind(Enum):
    """Constraint categories the repositories know how to translate."""

    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    OTHER = "other"


def classify_integrity_error(error: IntegrityError) -> IntegrityKind:
    """
    Tell which kind of constraint an IntegrityError comes from.

    PostgreSQL drivers expose the SQLSTATE; the sqlite3 module exposes the
    extended error name on Python 3.11+ and only a message on older builds.
    """
    orig = getattr(error, "orig", None) or error

    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate == PG_UNIQUE_VIOLATION:
        return IntegrityKind.UNIQUE
    if sqlstate == PG_FOREIGN_KEY_VIOLATION:
        return IntegrityKind.FOREIGN_KEY

    error_name = getattr(orig, "sqlite_errorname", None)
    if error_name in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"):
        return IntegrityKind.UNIQUE
    if error_name == "SQLITE_CONSTRAINT_FOREIGNKEY":
        return IntegrityKind.FOREIGN_KEY

    message = str(orig)
    if message.startswith("UNIQUE constraint failed"):
        return IntegrityKind.UNIQUE
    if message.startswith("FOREIGN KEY constraint failed"):
        return IntegrityKind.FOREIGN_KEY

    return IntegrityKind.OTHER
