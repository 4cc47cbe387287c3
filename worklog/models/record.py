"""
Work record entity and its update patch.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from worklog.core.errors import ErrorCode
from worklog.models import validators


class WorkRecord:
    """
    A unit of work done by a user on a given day.

    ``created``, ``is_under_hours`` and ``user_name`` come from the ``v_work``
    view and are only populated on records read back from the store; they are
    never written.
    """

    def __init__(
        self,
        *,
        id: Optional[int] = None,
        user_id: Optional[int] = None,
        day: Any = None,
        duration: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        self._id: Optional[int] = None
        self._user_id: Optional[int] = None
        self._dt_day: Optional[date] = None
        self._duration_sec: int = 0
        self._note: Optional[str] = None

        self._dt_created: Optional[datetime] = None
        self._is_under_hours: int = 0
        self._user_name: Optional[str] = None

        if id is not None:
            self.id = id
        if user_id is not None:
            self.user_id = user_id
        if day is not None:
            self.day = day
        if duration is not None:
            self.duration = duration
        if note is not None:
            self.note = note

    @property
    def id(self) -> Optional[int]:
        return self._id

    @id.setter
    def id(self, value: Any) -> None:
        self._id = validators.validate_id(value)

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    @user_id.setter
    def user_id(self, value: Any) -> None:
        self._user_id = validators.validate_id(value, ErrorCode.NO_USERID, ErrorCode.BAD_USERID)

    @property
    def day(self) -> Optional[date]:
        return self._dt_day

    @day.setter
    def day(self, value: Any) -> None:
        self._dt_day = validators.parse_day(value)

    @property
    def duration(self) -> int:
        return self._duration_sec

    @duration.setter
    def duration(self, value: Any) -> None:
        self._duration_sec = validators.validate_duration(value)

    @property
    def note(self) -> Optional[str]:
        return self._note

    @note.setter
    def note(self, value: Any) -> None:
        self._note = validators.validate_note(value)

    @property
    def created(self) -> Optional[datetime]:
        return self._dt_created

    @property
    def is_under_hours(self) -> int:
        return self._is_under_hours

    @property
    def user_name(self) -> Optional[str]:
        return self._user_name

    def load_view_fields(
        self,
        *,
        created: Optional[datetime],
        is_under_hours: Any,
        user_name: Optional[str],
    ) -> None:
        """Attach the read-only fields computed by ``v_work``."""
        self._dt_created = created
        self._is_under_hours = 1 if is_under_hours else 0
        self._user_name = user_name

    def __repr__(self) -> str:
        return (
            f"WorkRecord(id={self._id!r}, user_id={self._user_id!r}, "
            f"day={self._dt_day!r}, duration={self._duration_sec!r})"
        )


@dataclass
class RecordPatch:
    """Sparse set of work record changes. ``None`` means "leave unchanged"."""

    user_id: Optional[int] = None
    day: Optional[date] = None
    duration: Optional[int] = None
    note: Optional[str] = None

    @classmethod
    def from_changes(cls, changes: Mapping[str, Any]) -> "RecordPatch":
        """
        Validate supplied fields (``when``, ``user_id``, ``duration``, ``note``).

        Raises:
            ValidationError: On the first invalid field
        """
        patch = cls()
        if "when" in changes:
            patch.day = validators.parse_day(changes["when"])
        if "user_id" in changes:
            patch.user_id = validators.validate_id(
                changes["user_id"], ErrorCode.NO_USERID, ErrorCode.BAD_USERID
            )
        if "duration" in changes:
            patch.duration = validators.validate_duration(changes["duration"])
        if "note" in changes:
            patch.note = validators.validate_note(changes["note"])
        return patch

    def columns(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if self.user_id is not None:
            fields["user_id"] = self.user_id
        if self.day is not None:
            fields["dt_day"] = self.day.isoformat()
        if self.duration is not None:
            fields["duration_sec"] = self.duration
        if self.note is not None:
            fields["note"] = self.note
        return fields

    @property
    def is_empty(self) -> bool:
        return not self.columns()
