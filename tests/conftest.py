"""
Pytest configuration and fixtures.
Provides test database, client, and common test utilities.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only")
os.environ.setdefault("DISABLE_BOOTSTRAP_USERS", "true")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlmodel.pool import StaticPool

from worklog.core.config import settings
from worklog.db.database import Database
from worklog.db.schema import create_schema
from worklog.db.session import create_db_engine, get_database
from worklog.main import app
from worklog.models.role import Role
from worklog.models.user import User
from worklog.repositories.records import RecordsRepository
from worklog.repositories.users import UsersRepository

API = settings.API_V1_PREFIX

USER_PASSWORD = "userpassword123"
MANAGER_PASSWORD = "managerpassword123"
ADMIN_PASSWORD = "adminpassword123"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_user(
    users: UsersRepository,
    email: str,
    password: str,
    name: str = "Test User",
    role: Role = Role.USER,
    working_hours: int = 0,
) -> User:
    user = User(email=email, name=name, role=role, working_hours=working_hours)
    user.set_password(password)
    return users.add(user)


@pytest.fixture(name="engine")
def engine_fixture() -> Generator[Engine, None, None]:
    """
    Create a test database engine.
    Uses an in-memory SQLite database for fast tests.
    """
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture(name="database")
def database_fixture(engine: Engine) -> Database:
    database = Database(engine)
    create_schema(database)
    return database


@pytest.fixture(name="users")
def users_fixture(database: Database) -> UsersRepository:
    return UsersRepository(database)


@pytest.fixture(name="records")
def records_fixture(database: Database) -> RecordsRepository:
    return RecordsRepository(database)


@pytest.fixture(name="client")
def client_fixture(database: Database) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """
    app.dependency_overrides[get_database] = lambda: database

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(users: UsersRepository) -> User:
    """
    Create a regular test user with an 8 hour working day.
    """
    return make_user(users, "test@example.com", USER_PASSWORD, "Test User", working_hours=8 * 3600)


@pytest.fixture(name="other_user")
def other_user_fixture(users: UsersRepository) -> User:
    return make_user(users, "other@example.com", USER_PASSWORD, "Other User")


@pytest.fixture(name="test_manager")
def test_manager_fixture(users: UsersRepository) -> User:
    return make_user(users, "manager@example.com", MANAGER_PASSWORD, "Manager User", Role.MANAGER)


@pytest.fixture(name="test_admin")
def test_admin_fixture(users: UsersRepository) -> User:
    """
    Create a test admin user.
    """
    return make_user(users, "admin@example.com", ADMIN_PASSWORD, "Admin User", Role.ADMIN)


def _signin(client: TestClient, email: str, password: str) -> str:
    response = client.post(f"{API}/auth/signin", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture(name="user_token")
def user_token_fixture(client: TestClient, test_user: User) -> str:
    """
    Get an access token for a regular user.
    """
    return _signin(client, "test@example.com", USER_PASSWORD)


@pytest.fixture(name="other_token")
def other_token_fixture(client: TestClient, other_user: User) -> str:
    return _signin(client, "other@example.com", USER_PASSWORD)


@pytest.fixture(name="manager_token")
def manager_token_fixture(client: TestClient, test_manager: User) -> str:
    return _signin(client, "manager@example.com", MANAGER_PASSWORD)


@pytest.fixture(name="admin_token")
def admin_token_fixture(client: TestClient, test_admin: User) -> str:
    """
    Get an access token for an admin user.
    """
    return _signin(client, "admin@example.com", ADMIN_PASSWORD)
