"""
Database engine management.
Provides the engine factory and the ``Database`` dependency for FastAPI routes.
"""

from pathlib import Path
from typing import Any

from sqlalchemy import Engine, event
from sqlalchemy.engine import make_url
from sqlmodel import create_engine

from worklog.core.config import settings
from worklog.db.database import Database


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ignores REFERENCES clauses unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **kwargs: Any) -> Engine:
    """
    Create an engine with the settings every connection needs.

    Args:
        url: SQLAlchemy database URL
        **kwargs: Extra ``create_engine`` arguments (pool class, sizes, ...)

    Returns:
        Configured engine
    """
    database_url = make_url(url)

    if database_url.get_backend_name() == "sqlite":
        if database_url.database and database_url.database != ":memory:":
            Path(database_url.database).parent.mkdir(parents=True, exist_ok=True)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # pool_pre_ping ensures connections are alive before using them
    return create_engine(url, pool_pre_ping=True, **kwargs)


if settings.is_sqlite:
    engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DEBUG)
else:
    engine = create_db_engine(
        settings.SQLALCHEMY_DATABASE_URI,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )

database = Database(engine)


def get_database() -> Database:
    """
    Dependency that provides the application's database handle.

    Returns:
        Shared ``Database`` instance
    """
    return database
