"""
Domain error taxonomy.

Every repository and entity operation either returns a value or raises exactly
one DomainError subclass carrying a short machine-readable code. The HTTP layer
only ever sees these codes, never a raw driver error.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error tags surfaced to API callers."""

    NO_ID = "no_id"
    BAD_ID = "bad_id"
    NO_NAME = "no_name"
    NO_EMAIL = "no_email"
    BAD_EMAIL = "bad_email"
    NO_PASSWORD = "no_password"
    BAD_PASSWORD = "bad_password"
    BAD_ROLE = "bad_role"
    BAD_WORKING_HOURS = "bad_working_hours"
    NO_USERID = "no_userid"
    BAD_USERID = "bad_userid"
    NO_DURATION = "no_duration"
    BAD_DURATION = "bad_duration"
    NO_DATE = "no_date"
    BAD_DATE = "bad_date"
    NO_NOTE = "no_note"
    BAD_FORMAT = "bad_format"
    USER_NOT_FOUND = "user_not_found"
    REC_NOT_FOUND = "rec_not_found"
    EMAIL_IN_USE = "email_in_use"
    USER_HAS_RECORDS = "user_has_records"
    UNKNOWN_USER = "unknown_user"
    DUPLICATE_ENTRY = "duplicate_entry"

    # Transport-level codes
    AUTH_ERROR = "auth_error"
    NO_TOKEN = "no_token"
    BAD_TOKEN = "bad_token"
    FORBIDDEN = "forbidden"
    DATABASE_ERROR = "database_error"


class DomainError(Exception):
    """Base class for all tagged errors."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = ErrorCode(code)
        self.message = message or self.code.value
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class ValidationError(DomainError):
    """An entity field was given an invalid value."""


class NotFoundError(DomainError):
    """A well-formed reference points at nothing."""


class IntegrityViolationError(DomainError):
    """The store rejected a write because of a constraint."""


class FormatError(DomainError):
    """A persisted row could not be mapped back to an entity."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ErrorCode.BAD_FORMAT, message)


class PermissionDeniedError(DomainError):
    """The caller's role or ownership does not allow the operation."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ErrorCode.FORBIDDEN, message)


class AuthenticationError(DomainError):
    """Credentials are missing, invalid or point at a deleted user."""


class DatabaseError(DomainError):
    """A store failure that has no domain meaning."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ErrorCode.DATABASE_ERROR, message)
