"""
Shared store-error translation for the repositories.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from worklog.core.errors import DatabaseError, ErrorCode, IntegrityViolationError
from worklog.core.logging import get_logger
from worklog.db.errors import IntegrityKind, classify_integrity_error

logger = get_logger(__name__)


@contextmanager
def translate_store_errors(
    action: str,
    *,
    unique: Optional[ErrorCode] = None,
    foreign_key: Optional[ErrorCode] = None,
) -> Iterator[None]:
    """
    Turn SQLAlchemy errors raised inside the block into domain errors.

    Args:
        action: Short description used in logs and messages
        unique: Code to report for unique-constraint violations
        foreign_key: Code to report for foreign-key violations

    Raises:
        IntegrityViolationError: For a constraint mapped to a code
        DatabaseError: For every other store failure
    """
    try:
        yield
    except IntegrityError as e:
        kind = classify_integrity_error(e)
        code = {IntegrityKind.UNIQUE: unique, IntegrityKind.FOREIGN_KEY: foreign_key}.get(kind)
        if code is not None:
            logger.info(f"{action}: {kind.value} violation reported as {code.value}")
            raise IntegrityViolationError(code) from e
        logger.exception(f"{action} failed with an unmapped constraint violation")
        raise DatabaseError(f"{action} failed") from e
    except SQLAlchemyError as e:
        logger.exception(f"{action} failed")
        raise DatabaseError(f"{action} failed") from e
