"""
Work record schemas for API request/response validation.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel

from worklog.models.record import WorkRecord


class RecordCreate(BaseModel):
    """Schema for adding a work record. ``user_id`` defaults to the caller."""

    user_id: Any = None
    when: Any = None
    duration: Any = None
    note: Any = None


class RecordUpdate(BaseModel):
    """Schema for updating a work record; only supplied fields change."""

    user_id: Any = None
    when: Any = None
    duration: Any = None
    note: Any = None


class RecordResponse(BaseModel):
    """Schema for work record data in API responses."""

    id: int
    created: Optional[datetime] = None
    user_id: int
    when: date
    duration: int
    note: str
    is_under_hours: int
    user_name: Optional[str] = None

    @classmethod
    def from_entity(cls, record: WorkRecord) -> "RecordResponse":
        return cls(
            id=record.id,  # type: ignore[arg-type]
            created=record.created,
            user_id=record.user_id,  # type: ignore[arg-type]
            when=record.day,  # type: ignore[arg-type]
            duration=record.duration,
            note=record.note,  # type: ignore[arg-type]
            is_under_hours=record.is_under_hours,
            user_name=record.user_name,
        )
