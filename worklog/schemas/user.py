"""
User schemas for API request/response validation.

Request fields are typed loosely: the entities validate them and answer with
``no_email``, ``bad_role`` and so on rather than generic schema errors.
"""

from typing import Any

from pydantic import BaseModel

from worklog.models.user import User


class UserCreate(BaseModel):
    """Schema for adding a user (admin and manager only)."""

    name: Any = None
    email: Any = None
    password: Any = None
    working_hours: Any = None
    role: Any = None


class UserUpdate(BaseModel):
    """
    Schema for updating a user.
    Only the fields present in the request body are changed.
    """

    name: Any = None
    email: Any = None
    password: Any = None
    working_hours: Any = None
    role: Any = None


class UserResponse(BaseModel):
    """
    Schema for user data in API responses.
    Excludes sensitive information like the password hash.
    """

    id: int
    email: str
    name: str
    working_hours: int
    role: int

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,  # type: ignore[arg-type]
            email=user.email,  # type: ignore[arg-type]
            name=user.name,  # type: ignore[arg-type]
            working_hours=user.working_hours,
            role=user.role_id,
        )


class OperationResult(BaseModel):
    """Schema for operations that return no entity."""

    status: str = "OK"
