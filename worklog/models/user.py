"""
User entity and its update patch.

Every setter validates before assigning, so a failed assignment leaves the
previous value in place.
"""

import copy
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from worklog.core.errors import ErrorCode, ValidationError
from worklog.core.security import get_password_hash, verify_password
from worklog.models import validators
from worklog.models.role import Role


class User:
    """
    A person using the service.

    Attributes:
        id: Server-assigned identifier (None until persisted)
        email: Login address, always read back lower-cased
        name: Full name
        password_hash: Salted hash of the password; the plaintext is never kept
        role: One of USER, MANAGER, ADMIN
        working_hours: Preferred seconds of work per day, 0 when unset
    """

    def __init__(
        self,
        *,
        id: Optional[int] = None,
        email: Optional[str] = None,
        name: Optional[str] = None,
        password_hash: Optional[str] = None,
        role: Role | int = Role.USER,
        working_hours: int = 0,
    ) -> None:
        self._id: Optional[int] = None
        self._email: Optional[str] = None
        self._full_name: Optional[str] = None
        self._pwd_hash: Optional[str] = None
        self._role: Role = Role.USER
        self._working_hours: int = 0

        if id is not None:
            self.id = id
        if email is not None:
            self.email = email
        if name is not None:
            self.name = name
        if password_hash is not None:
            self.password_hash = password_hash
        self.role = role
        self.working_hours = working_hours

    @property
    def id(self) -> Optional[int]:
        return self._id

    @id.setter
    def id(self, value: Any) -> None:
        self._id = validators.validate_id(value)

    @property
    def email(self) -> Optional[str]:
        return self._email.lower() if self._email else None

    @email.setter
    def email(self, value: Any) -> None:
        self._email = validators.validate_email(value)

    @property
    def name(self) -> Optional[str]:
        return self._full_name

    @name.setter
    def name(self, value: Any) -> None:
        self._full_name = validators.validate_name(value)

    @property
    def role(self) -> Role:
        return self._role

    @role.setter
    def role(self, value: Role | int) -> None:
        role = Role.from_value(value)
        if role is None:
            raise ValidationError(ErrorCode.BAD_ROLE, "The role is incorrect")
        self._role = role

    @property
    def role_id(self) -> int:
        return self._role.value

    @role_id.setter
    def role_id(self, value: Any) -> None:
        self.role = value

    @property
    def working_hours(self) -> int:
        return self._working_hours

    @working_hours.setter
    def working_hours(self, value: Any) -> None:
        self._working_hours = validators.validate_working_hours(value)

    @property
    def password_hash(self) -> Optional[str]:
        return self._pwd_hash

    @password_hash.setter
    def password_hash(self, value: Any) -> None:
        if not value:
            raise ValidationError(ErrorCode.NO_PASSWORD, "Password hash is empty")
        self._pwd_hash = value

    def set_password(self, password: Any) -> None:
        """Validate ``password`` and keep only its salted hash."""
        self._pwd_hash = get_password_hash(validators.validate_password(password))

    def check_password(self, password: Any) -> bool:
        """
        Compare ``password`` with the stored hash.

        Raises:
            ValidationError: If the candidate is empty or too short; the hash
                is not consulted in that case
        """
        validators.validate_password(password)
        if not self._pwd_hash:
            return False
        return verify_password(password, self._pwd_hash)

    def copy(self) -> "User":
        return copy.copy(self)

    def __repr__(self) -> str:
        return f"User(id={self._id!r}, email={self.email!r}, role={self._role.name})"


@dataclass
class UserPatch:
    """
    Sparse set of user changes. ``None`` means "leave unchanged".

    ``working_hours=0`` is a real change: it clears the preference.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    password_hash: Optional[str] = None
    role: Optional[Role] = None
    working_hours: Optional[int] = None

    @classmethod
    def from_changes(cls, changes: Mapping[str, Any]) -> "UserPatch":
        """
        Validate the fields a caller supplied and build a patch from them.

        Args:
            changes: Supplied fields only (``name``, ``email``, ``password``,
                ``role``, ``working_hours``); absent keys are not changed

        Raises:
            ValidationError: On the first invalid field
        """
        patch = cls()
        if "name" in changes:
            patch.name = validators.validate_name(changes["name"])
        if "email" in changes:
            patch.email = validators.validate_email(changes["email"])
        if "working_hours" in changes:
            patch.working_hours = validators.validate_working_hours(changes["working_hours"])
        if "role" in changes:
            role = Role.from_value(changes["role"])
            if role is None:
                raise ValidationError(ErrorCode.BAD_ROLE, "The role is incorrect")
            patch.role = role
        if "password" in changes:
            patch.password_hash = get_password_hash(validators.validate_password(changes["password"]))
        return patch

    def columns(self) -> dict[str, Any]:
        """Column values for the fields present in this patch."""
        fields: dict[str, Any] = {}
        if self.name is not None:
            fields["full_name"] = self.name
        if self.email is not None:
            fields["email"] = self.email.lower()
        if self.password_hash is not None:
            fields["pwd_hash"] = self.password_hash
        if self.role is not None:
            fields["role_id"] = self.role.value
        if self.working_hours is not None:
            fields["max_hours"] = self.working_hours or None
        return fields

    @property
    def is_empty(self) -> bool:
        return not self.columns()
