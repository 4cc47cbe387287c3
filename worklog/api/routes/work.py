"""
Work record routes.
Owners manage their own records; admins manage everybody's.
"""

from typing import Optional

from fastapi import APIRouter, Query

from worklog.api.deps import CurrentUser, Records
from worklog.core.errors import ErrorCode, NotFoundError
from worklog.core.logging import get_logger
from worklog.core.permissions import Action, authorize, record_list_filter
from worklog.models import validators
from worklog.models.record import RecordPatch, WorkRecord
from worklog.repositories.records import RecordsRepository
from worklog.schemas.record import RecordCreate, RecordResponse, RecordUpdate
from worklog.schemas.user import OperationResult

logger = get_logger(__name__)

router = APIRouter(prefix="/work", tags=["work"])


def _get_existing(records: RecordsRepository, record_id: int) -> WorkRecord:
    record = records.get(record_id)
    if record is None:
        raise NotFoundError(ErrorCode.REC_NOT_FOUND, f"Work record {record_id} not found")
    return record


@router.post("", response_model=RecordResponse)
def add_record(record_in: RecordCreate, current_user: CurrentUser, records: Records) -> RecordResponse:
    """
    Add a work record.
    ``user_id`` defaults to the caller; only admins may log work for others.
    """
    owner_id = record_in.user_id or current_user.id
    authorize(current_user, Action.RECORD_ADD, owner_id=owner_id)

    record = WorkRecord()
    record.day = record_in.when
    record.user_id = owner_id
    record.duration = record_in.duration
    record.note = record_in.note

    return RecordResponse.from_entity(records.add(record))


@router.get("", response_model=list[RecordResponse])
def get_all_records(
    current_user: CurrentUser,
    records: Records,
    user_id: Optional[int] = None,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
) -> list[RecordResponse]:
    """
    List work records ordered by day, optionally limited to a user and a day range.
    Non-admins always get their own records only.
    """
    user_filter = record_list_filter(current_user, user_id)
    start = validators.parse_day(date_from) if date_from else None
    finish = validators.parse_day(date_to) if date_to else None

    return [
        RecordResponse.from_entity(record)
        for record in records.get_all(user_filter, start, finish)
    ]


@router.get("/{record_id}", response_model=RecordResponse)
def get_record(record_id: int, current_user: CurrentUser, records: Records) -> RecordResponse:
    """Get a work record owned by the caller (any record for admins)."""
    record = _get_existing(records, record_id)
    authorize(current_user, Action.RECORD_VIEW, owner_id=record.user_id)
    return RecordResponse.from_entity(record)


@router.put("/{record_id}", response_model=RecordResponse)
def update_record(
    record_id: int,
    record_in: RecordUpdate,
    current_user: CurrentUser,
    records: Records,
) -> RecordResponse:
    """Change the fields present in the body of a record the caller may manage."""
    patch = RecordPatch.from_changes(record_in.model_dump(exclude_unset=True))

    record = _get_existing(records, record_id)
    authorize(current_user, Action.RECORD_UPDATE, owner_id=record.user_id)
    if patch.user_id is not None:
        # Handing a record over needs the same rights over the new owner
        authorize(current_user, Action.RECORD_UPDATE, owner_id=patch.user_id)

    return RecordResponse.from_entity(records.update(record_id, patch))


@router.delete("/{record_id}", response_model=OperationResult)
def delete_record(record_id: int, current_user: CurrentUser, records: Records) -> OperationResult:
    """Delete a work record the caller may manage."""
    record = _get_existing(records, record_id)
    authorize(current_user, Action.RECORD_DELETE, owner_id=record.user_id)

    records.delete(record_id)
    logger.info(f"Work record {record_id} deleted by {current_user.id}")
    return OperationResult()
