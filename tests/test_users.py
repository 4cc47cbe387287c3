"""
Tests for user endpoints.
"""

from datetime import date

from fastapi.testclient import TestClient

from conftest import API, auth_headers
from worklog.models.record import WorkRecord
from worklog.models.user import User
from worklog.repositories.records import RecordsRepository


def test_get_own_profile(client: TestClient, user_token: str, test_user: User) -> None:
    """Test getting current user profile."""
    response = client.get(f"{API}/users/{test_user.id}", headers=auth_headers(user_token))
    assert response.status_code == 200
    assert response.json() == {
        "id": test_user.id,
        "email": "test@example.com",
        "name": "Test User",
        "working_hours": 8 * 3600,
        "role": 1,
    }


def test_get_profile_unauthorized(client: TestClient, test_user: User) -> None:
    """Test that accessing a profile without token fails."""
    response = client.get(f"{API}/users/{test_user.id}")
    assert response.status_code == 401


def test_regular_user_cannot_see_others(client: TestClient, user_token: str, other_user: User) -> None:
    response = client.get(f"{API}/users/{other_user.id}", headers=auth_headers(user_token))
    assert response.status_code == 403
    assert response.json() == {"detail": "forbidden"}

    assert client.get(f"{API}/users", headers=auth_headers(user_token)).status_code == 403


def test_manager_lists_users(
    client: TestClient, manager_token: str, test_user: User, test_manager: User
) -> None:
    response = client.get(f"{API}/users", headers=auth_headers(manager_token))
    assert response.status_code == 200
    ids = [user["id"] for user in response.json()]
    assert ids == sorted(ids)
    assert {test_user.id, test_manager.id} <= set(ids)


def test_get_missing_user(client: TestClient, admin_token: str) -> None:
    response = client.get(f"{API}/users/9999", headers=auth_headers(admin_token))
    assert response.status_code == 422
    assert response.json() == {"detail": "user_not_found"}


def test_manager_adds_user_with_role(client: TestClient, manager_token: str) -> None:
    response = client.post(
        f"{API}/users",
        json={
            "name": "Staff",
            "email": "staff@example.com",
            "password": "password123",
            "working_hours": 6 * 3600,
            "role": 2,
        },
        headers=auth_headers(manager_token),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == 2
    assert data["working_hours"] == 6 * 3600


def test_add_user_defaults_to_regular_role(client: TestClient, admin_token: str) -> None:
    response = client.post(
        f"{API}/users",
        json={"name": "Plain", "email": "plain@example.com", "password": "password123"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    assert response.json()["role"] == 1


def test_add_user_validation(client: TestClient, admin_token: str) -> None:
    response = client.post(
        f"{API}/users",
        json={"name": "Bad", "email": "bad@example.com", "password": "password123", "role": 7},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 422
    assert response.json() == {"detail": "bad_role"}


def test_regular_user_cannot_add_users(client: TestClient, user_token: str) -> None:
    response = client.post(
        f"{API}/users",
        json={"name": "X", "email": "x@example.com", "password": "password123"},
        headers=auth_headers(user_token),
    )
    assert response.status_code == 403


def test_update_own_profile(client: TestClient, user_token: str, test_user: User) -> None:
    response = client.put(
        f"{API}/users/{test_user.id}",
        json={"name": "Renamed", "working_hours": 0},
        headers=auth_headers(user_token),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["working_hours"] == 0
    assert data["email"] == "test@example.com"


def test_nobody_changes_own_role(
    client: TestClient, user_token: str, admin_token: str, test_user: User, test_admin: User
) -> None:
    response = client.put(
        f"{API}/users/{test_user.id}", json={"role": 3}, headers=auth_headers(user_token)
    )
    assert response.status_code == 403

    response = client.put(
        f"{API}/users/{test_admin.id}", json={"role": 1}, headers=auth_headers(admin_token)
    )
    assert response.status_code == 403


def test_manager_changes_other_role(client: TestClient, manager_token: str, test_user: User) -> None:
    response = client.put(
        f"{API}/users/{test_user.id}", json={"role": 2}, headers=auth_headers(manager_token)
    )
    assert response.status_code == 200
    assert response.json()["role"] == 2


def test_update_email_in_use(
    client: TestClient, admin_token: str, test_user: User, other_user: User
) -> None:
    response = client.put(
        f"{API}/users/{other_user.id}",
        json={"email": "test@example.com"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 422
    assert response.json() == {"detail": "email_in_use"}


def test_update_missing_user(client: TestClient, admin_token: str) -> None:
    response = client.put(f"{API}/users/9999", json={"name": "X"}, headers=auth_headers(admin_token))
    assert response.status_code == 422
    assert response.json() == {"detail": "user_not_found"}


def test_delete_user(client: TestClient, manager_token: str, other_user: User) -> None:
    response = client.delete(f"{API}/users/{other_user.id}", headers=auth_headers(manager_token))
    assert response.status_code == 200
    assert response.json() == {"status": "OK"}

    response = client.delete(f"{API}/users/{other_user.id}", headers=auth_headers(manager_token))
    assert response.status_code == 422
    assert response.json() == {"detail": "user_not_found"}


def test_cannot_delete_self(client: TestClient, admin_token: str, test_admin: User) -> None:
    response = client.delete(f"{API}/users/{test_admin.id}", headers=auth_headers(admin_token))
    assert response.status_code == 403


def test_delete_user_with_records(
    client: TestClient, admin_token: str, records: RecordsRepository, test_user: User
) -> None:
    records.add(WorkRecord(user_id=test_user.id, day=date(2016, 8, 24), duration=60, note="Work"))

    response = client.delete(f"{API}/users/{test_user.id}", headers=auth_headers(admin_token))
    assert response.status_code == 422
    assert response.json() == {"detail": "user_has_records"}
