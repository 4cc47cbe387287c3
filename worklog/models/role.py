"""
User roles for RBAC.
"""

from enum import IntEnum
from typing import Any, Optional


class Role(IntEnum):
    """Closed set of roles, persisted by value in ``users.role_id``."""

    USER = 1
    MANAGER = 2
    ADMIN = 3

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_value(cls, value: Any) -> Optional["Role"]:
        """Look a role up by its numeric value. Returns None for anything unknown."""
        if isinstance(value, Role):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_LABELS = {
    Role.USER: "Regular User",
    Role.MANAGER: "User Manager",
    Role.ADMIN: "Administrator",
}
