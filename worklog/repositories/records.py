"""
Records repository: persistence workflows for work records.

Reads go through the ``v_work`` view so every fetched record carries the
derived ``is_under_hours`` and ``user_name`` fields.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional

from worklog.core.errors import ErrorCode, FormatError, NotFoundError, ValidationError
from worklog.core.logging import get_logger
from worklog.db.database import Database
from worklog.models.record import RecordPatch, WorkRecord
from worklog.repositories.base import translate_store_errors

logger = get_logger(__name__)

_RECORD_COLUMNS = "id, dt_created, user_id, dt_day, duration_sec, note, is_under_hours, user_name"

_DB_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _as_date(value: Any) -> date:
    # SQLite hands dates back as text, PostgreSQL as date objects
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_utc_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _row_to_record(row: dict[str, Any]) -> WorkRecord:
    try:
        record = WorkRecord(
            id=row["id"],
            user_id=row["user_id"],
            day=_as_date(row["dt_day"]),
            duration=row["duration_sec"],
            note=row["note"],
        )
        created = _as_utc_datetime(row["dt_created"])
    except (ValidationError, ValueError) as e:
        logger.error(f"Work row {row.get('id')} failed validation: {e}")
        raise FormatError(f"Work row {row.get('id')} is malformed") from e

    record.load_view_fields(
        created=created,
        is_under_hours=row["is_under_hours"],
        user_name=row["user_name"],
    )
    return record


_RECORD_ERRORS = {
    "unique": ErrorCode.DUPLICATE_ENTRY,
    "foreign_key": ErrorCode.UNKNOWN_USER,
}


class RecordsRepository:
    """Service class for work record persistence."""

    def __init__(self, database: Database) -> None:
        self.db = database

    def add(self, record: WorkRecord) -> WorkRecord:
        """
        Insert a new work record stamped with the current UTC time.

        Returns:
            The stored record as read back through ``v_work``

        Raises:
            IntegrityViolationError: ``unknown_user`` if the owner does not exist
        """
        created = datetime.now(timezone.utc)

        with translate_store_errors("Add work record", **_RECORD_ERRORS):
            with self.db.transaction() as tx:
                record_id = tx.insert(
                    "work",
                    {
                        "dt_created": created.strftime(_DB_DATETIME_FORMAT),
                        "user_id": record.user_id,
                        "dt_day": record.day.isoformat() if record.day else None,
                        "duration_sec": record.duration,
                        "note": record.note,
                    },
                    return_id=True,
                )

        logger.info(f"Work record added: {record_id} (user {record.user_id})")

        added = self.get(record_id)
        if added is None:
            raise NotFoundError(ErrorCode.REC_NOT_FOUND, f"Work record {record_id} not found")
        return added

    def get(self, record_id: int) -> Optional[WorkRecord]:
        """
        Retrieve a work record by ID.

        Returns:
            WorkRecord if found, None otherwise
        """
        with translate_store_errors("Get work record"):
            row = self.db.query_row(
                f"SELECT {_RECORD_COLUMNS} FROM v_work WHERE id = ?", [record_id]
            )
        return _row_to_record(row) if row else None

    def get_all(
        self,
        user_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[WorkRecord]:
        """
        List work records ordered by day.

        Args:
            user_id: Only records of this user, if given
            date_from: Only records on or after this day, if given
            date_to: Only records on or before this day, if given
        """
        conditions: list[str] = []
        params: list[Any] = []

        if user_id is not None:
            conditions.append("user_id = ?")
            params.append(user_id)
        if date_from is not None:
            conditions.append("dt_day >= ?")
            params.append(date_from.isoformat())
        if date_to is not None:
            conditions.append("dt_day <= ?")
            params.append(date_to.isoformat())

        sql = f"SELECT {_RECORD_COLUMNS} FROM v_work"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY dt_day, id"

        with translate_store_errors("List work records"):
            rows = self.db.query(sql, params)
        return [_row_to_record(row) for row in rows]

    def update(self, record_id: int, patch: RecordPatch) -> WorkRecord:
        """
        Apply ``patch`` to an existing record and return the stored result.

        Raises:
            NotFoundError: ``rec_not_found`` if there is no such record
            IntegrityViolationError: ``unknown_user`` if the new owner does not exist
        """
        columns = patch.columns()

        with translate_store_errors("Update work record", **_RECORD_ERRORS):
            with self.db.transaction() as tx:
                if tx.query_row("SELECT id FROM work WHERE id = ?", [record_id]) is None:
                    raise NotFoundError(ErrorCode.REC_NOT_FOUND, f"Work record {record_id} not found")
                tx.update("work", record_id, columns)

        if columns:
            logger.info(f"Work record {record_id} updated: {sorted(columns)}")

        updated = self.get(record_id)
        if updated is None:
            raise NotFoundError(ErrorCode.REC_NOT_FOUND, f"Work record {record_id} not found")
        return updated

    def delete(self, record_id: int) -> None:
        """
        Delete a work record.

        Raises:
            NotFoundError: ``rec_not_found`` if there is no such record
        """
        with translate_store_errors("Delete work record", **_RECORD_ERRORS):
            with self.db.transaction() as tx:
                if tx.query_row("SELECT id FROM work WHERE id = ?", [record_id]) is None:
                    raise NotFoundError(ErrorCode.REC_NOT_FOUND, f"Work record {record_id} not found")
                tx.delete("work", record_id)

        logger.info(f"Work record {record_id} deleted")
