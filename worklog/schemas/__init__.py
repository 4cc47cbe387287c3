"""Pydantic schemas for request/response validation."""

from worklog.schemas.record import RecordCreate, RecordResponse, RecordUpdate
from worklog.schemas.token import (
    AuthResponse,
    PasswordChangeRequest,
    SigninRequest,
    SignupRequest,
    TokenSigninRequest,
)
from worklog.schemas.user import OperationResult, UserCreate, UserResponse, UserUpdate

__all__ = [
    "AuthResponse",
    "OperationResult",
    "PasswordChangeRequest",
    "RecordCreate",
    "RecordResponse",
    "RecordUpdate",
    "SigninRequest",
    "SignupRequest",
    "TokenSigninRequest",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
