"""
Tests for UsersRepository against an in-memory database.
"""

from datetime import date

import pytest

from conftest import make_user
from worklog.core.errors import FormatError, IntegrityViolationError, NotFoundError
from worklog.db.database import Database
from worklog.models.record import WorkRecord
from worklog.models.role import Role
from worklog.models.user import User, UserPatch
from worklog.repositories.records import RecordsRepository
from worklog.repositories.users import UsersRepository


def test_add_assigns_id_and_keeps_original(users: UsersRepository) -> None:
    user = User(email="Jane@Example.com", name="Jane", role=Role.MANAGER, working_hours=7200)
    user.set_password("secret1")

    added = users.add(user)

    assert added.id is not None
    assert user.id is None
    stored = users.get(added.id)
    assert stored is not None
    assert stored.email == "jane@example.com"
    assert stored.role is Role.MANAGER
    assert stored.working_hours == 7200
    assert stored.check_password("secret1")


def test_add_duplicate_email_ignores_case(users: UsersRepository) -> None:
    make_user(users, "dup@example.com", "secret1")

    with pytest.raises(IntegrityViolationError) as excinfo:
        make_user(users, "DUP@example.com", "secret1")
    assert excinfo.value.code.value == "email_in_use"


def test_get_missing_returns_none(users: UsersRepository) -> None:
    assert users.get(12345) is None


def test_find_by_email_ignores_case(users: UsersRepository) -> None:
    added = make_user(users, "case@example.com", "secret1")

    found = users.find_by_email("CASE@example.com")
    assert found is not None
    assert found.id == added.id
    assert users.find_by_email("nobody@example.com") is None


def test_get_all_is_ordered_by_id(users: UsersRepository) -> None:
    ids = [make_user(users, f"u{i}@example.com", "secret1").id for i in range(3)]
    assert [user.id for user in users.get_all()] == ids


def test_unknown_role_reads_back_as_user(users: UsersRepository, database: Database) -> None:
    added = make_user(users, "odd@example.com", "secret1")
    database.execute("UPDATE users SET role_id = ? WHERE id = ?", [42, added.id])

    assert users.get(added.id).role is Role.USER


def test_malformed_row_is_a_format_error(users: UsersRepository, database: Database) -> None:
    added = make_user(users, "broken@example.com", "secret1")
    database.execute("UPDATE users SET email = ? WHERE id = ?", ["not-an-email", added.id])

    with pytest.raises(FormatError):
        users.get(added.id)


def test_update_applies_only_patch_fields(users: UsersRepository) -> None:
    added = make_user(users, "patch@example.com", "secret1", name="Before", working_hours=3600)

    updated = users.update(added.id, UserPatch.from_changes({"name": "After"}))

    assert updated.name == "After"
    assert updated.email == "patch@example.com"
    assert updated.working_hours == 3600
    assert updated.check_password("secret1")


def test_update_zero_working_hours_clears_preference(users: UsersRepository, database: Database) -> None:
    added = make_user(users, "hours@example.com", "secret1", working_hours=3600)

    updated = users.update(added.id, UserPatch.from_changes({"working_hours": 0}))

    assert updated.working_hours == 0
    assert database.query_value("SELECT max_hours FROM users WHERE id = ?", [added.id]) is None


def test_update_empty_patch_returns_current_user(users: UsersRepository) -> None:
    added = make_user(users, "same@example.com", "secret1")
    assert users.update(added.id, UserPatch()).email == "same@example.com"


def test_update_missing_user(users: UsersRepository) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        users.update(999, UserPatch(name="Ghost"))
    assert excinfo.value.code.value == "user_not_found"


def test_update_email_to_taken_address(users: UsersRepository) -> None:
    make_user(users, "taken@example.com", "secret1")
    other = make_user(users, "free@example.com", "secret1")

    with pytest.raises(IntegrityViolationError) as excinfo:
        users.update(other.id, UserPatch.from_changes({"email": "Taken@example.com"}))
    assert excinfo.value.code.value == "email_in_use"
    assert users.get(other.id).email == "free@example.com"


def test_delete_user(users: UsersRepository) -> None:
    added = make_user(users, "gone@example.com", "secret1")
    users.delete(added.id)
    assert users.get(added.id) is None


def test_delete_missing_user(users: UsersRepository) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        users.delete(999)
    assert excinfo.value.code.value == "user_not_found"


def test_delete_user_with_records_is_refused(users: UsersRepository, records: RecordsRepository) -> None:
    added = make_user(users, "busy@example.com", "secret1")
    records.add(WorkRecord(user_id=added.id, day=date(2016, 8, 24), duration=60, note="Work"))

    with pytest.raises(IntegrityViolationError) as excinfo:
        users.delete(added.id)
    assert excinfo.value.code.value == "user_has_records"
    assert users.get(added.id) is not None
