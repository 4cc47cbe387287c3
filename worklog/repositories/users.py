"""
Users repository: persistence workflows for User entities.
"""

from typing import Any, Optional

from worklog.core.errors import ErrorCode, FormatError, NotFoundError, ValidationError
from worklog.core.logging import get_logger
from worklog.db.database import Database
from worklog.models.role import Role
from worklog.models.user import User, UserPatch
from worklog.repositories.base import translate_store_errors

logger = get_logger(__name__)

_USER_COLUMNS = "id, role_id, email, pwd_hash, max_hours, full_name"


def _row_to_user(row: dict[str, Any]) -> User:
    """
    Map a ``users`` row to an entity.

    An unknown role id falls back to USER; any other invalid field means the
    row cannot be trusted and is reported as ``bad_format``.
    """
    role = Role.from_value(row["role_id"]) or Role.USER
    try:
        return User(
            id=row["id"],
            role=role,
            email=row["email"],
            password_hash=row["pwd_hash"],
            working_hours=row["max_hours"] or 0,
            name=row["full_name"],
        )
    except ValidationError as e:
        logger.error(f"User row {row.get('id')} failed validation: {e.code.value}")
        raise FormatError(f"User row {row.get('id')} is malformed") from e


class UsersRepository:
    """Service class for user persistence."""

    def __init__(self, database: Database) -> None:
        self.db = database

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Returns:
            A copy of ``user`` carrying the generated id

        Raises:
            IntegrityViolationError: ``email_in_use`` if the email is taken
        """
        with translate_store_errors("Add user", unique=ErrorCode.EMAIL_IN_USE):
            with self.db.transaction() as tx:
                user_id = tx.insert(
                    "users",
                    {
                        "full_name": user.name,
                        "role_id": user.role_id,
                        "email": user.email,
                        "pwd_hash": user.password_hash,
                        "max_hours": user.working_hours or None,
                    },
                    return_id=True,
                )

        added = user.copy()
        added.id = user_id
        logger.info(f"User added: {added.email} (ID: {user_id})")
        return added

    def get(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by ID.

        Returns:
            User if found, None otherwise
        """
        with translate_store_errors("Get user"):
            row = self.db.query_row(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", [user_id])
        return _row_to_user(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Retrieve a user by email address, ignoring case.

        Returns:
            User if found, None otherwise
        """
        with translate_store_errors("Find user by email"):
            row = self.db.query_row(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", [email.lower()]
            )
        return _row_to_user(row) if row else None

    def get_all(self) -> list[User]:
        """All users ordered by id."""
        with translate_store_errors("List users"):
            rows = self.db.query(f"SELECT {_USER_COLUMNS} FROM users ORDER BY id")
        return [_row_to_user(row) for row in rows]

    def update(self, user_id: int, patch: UserPatch) -> User:
        """
        Apply ``patch`` to an existing user and return the stored result.

        The existence check and the write share one transaction.

        Raises:
            NotFoundError: ``user_not_found`` if there is no such user
            IntegrityViolationError: ``email_in_use`` if the new email is taken
        """
        columns = patch.columns()

        with translate_store_errors("Update user", unique=ErrorCode.EMAIL_IN_USE):
            with self.db.transaction() as tx:
                if tx.query_row("SELECT id FROM users WHERE id = ?", [user_id]) is None:
                    raise NotFoundError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
                tx.update("users", user_id, columns)

        if columns:
            logger.info(f"User {user_id} updated: {sorted(columns)}")

        updated = self.get(user_id)
        if updated is None:
            raise NotFoundError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
        return updated

    def delete(self, user_id: int) -> None:
        """
        Delete a user.

        Raises:
            NotFoundError: ``user_not_found`` if there is no such user
            IntegrityViolationError: ``user_has_records`` if work records still point at it
        """
        with translate_store_errors("Delete user", foreign_key=ErrorCode.USER_HAS_RECORDS):
            with self.db.transaction() as tx:
                if tx.query_row("SELECT id FROM users WHERE id = ?", [user_id]) is None:
                    raise NotFoundError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
                tx.delete("users", user_id)

        logger.info(f"User {user_id} deleted")
