"""
Field validators shared by the entities and their update patches.

Each validator returns the value to store or raises a ValidationError tagged
with the code the API reports back.
"""

from datetime import date, datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email as check_email

from worklog.core.errors import ErrorCode, ValidationError

SECONDS_PER_DAY = 24 * 60 * 60
MIN_PASSWORD_LENGTH = 6


def is_int(value: Any) -> bool:
    """True for integers and whole-number floats such as 7200.0; booleans do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, int)


def validate_id(
    value: Any,
    missing: ErrorCode = ErrorCode.NO_ID,
    bad: ErrorCode = ErrorCode.BAD_ID,
) -> int:
    if value is None or value == 0 or value == "":
        raise ValidationError(missing, "The id is missing")
    if not is_int(value) or value < 0:
        raise ValidationError(bad, "The id has incorrect format")
    return int(value)


def validate_name(value: Any) -> str:
    if not value:
        raise ValidationError(ErrorCode.NO_NAME, "The name is missing")
    if not isinstance(value, str):
        raise ValidationError(ErrorCode.NO_NAME, "The name must be a string")
    return value


def validate_email(value: Any) -> str:
    if not value:
        raise ValidationError(ErrorCode.NO_EMAIL, "The email is missing")
    if not isinstance(value, str):
        raise ValidationError(ErrorCode.BAD_EMAIL, "The email is incorrect")
    try:
        check_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(ErrorCode.BAD_EMAIL, "The email is incorrect") from e
    return value


def validate_password(value: Any) -> str:
    if not value:
        raise ValidationError(ErrorCode.NO_PASSWORD, "Password is empty")
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(ErrorCode.BAD_PASSWORD, "Password has wrong format")
    return value


def validate_working_hours(value: Any) -> int:
    """0 or any other falsy value means the preference is unset."""
    if not value:
        return 0
    if not is_int(value):
        raise ValidationError(ErrorCode.BAD_WORKING_HOURS, "The working hours have incorrect format")
    if value < 0 or value > SECONDS_PER_DAY:
        raise ValidationError(ErrorCode.BAD_DURATION, "The duration has incorrect format")
    return int(value)


def validate_duration(value: Any) -> int:
    if value is None or value == 0 or value == "":
        raise ValidationError(ErrorCode.NO_DURATION, "The duration is missing")
    if not is_int(value) or value <= 0 or value > SECONDS_PER_DAY:
        raise ValidationError(ErrorCode.BAD_DURATION, "The duration has incorrect format")
    return int(value)


def validate_note(value: Any) -> str:
    if not value:
        raise ValidationError(ErrorCode.NO_NOTE, "The note is missing")
    if not isinstance(value, str):
        raise ValidationError(ErrorCode.NO_NOTE, "The note must be a string")
    return value


def parse_day(value: Any) -> date:
    """
    Parse the calendar day a piece of work was done on.

    The date part is taken exactly as written: ``2016-08-24T23:30:00-05:00``
    is the 24th, not the 25th in UTC.
    """
    if not value:
        raise ValidationError(ErrorCode.NO_DATE, "The date is missing")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(ErrorCode.BAD_DATE, "The day has incorrect format")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise ValidationError(ErrorCode.BAD_DATE, "The day has incorrect format") from e
