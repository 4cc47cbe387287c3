"""
API dependencies for FastAPI dependency injection.
Provides repositories and the authenticated caller.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from worklog.core.config import settings
from worklog.core.errors import FormatError
from worklog.core.logging import get_logger
from worklog.core.security import decode_access_token
from worklog.db.database import Database
from worklog.db.session import get_database
from worklog.models.user import User
from worklog.repositories.records import RecordsRepository
from worklog.repositories.users import UsersRepository

logger = get_logger(__name__)

# Bearer token authentication; tokens are issued by /auth/signin
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/signin")


def get_users_repository(
    database: Annotated[Database, Depends(get_database)],
) -> UsersRepository:
    return UsersRepository(database)


def get_records_repository(
    database: Annotated[Database, Depends(get_database)],
) -> RecordsRepository:
    return RecordsRepository(database)


def get_current_user(
    users: Annotated[UsersRepository, Depends(get_users_repository)],
    token: Annotated[str, Depends(oauth2_scheme)],
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        users: Users repository
        token: JWT access token

    Returns:
        Current user, freshly loaded so role changes apply immediately

    Raises:
        HTTPException: If token is invalid or the user no longer exists
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = decode_access_token(token)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise credentials_exception

    try:
        user = users.get(user_id)
    except FormatError:
        logger.warning(f"User {user_id} has a malformed record")
        raise credentials_exception
    if user is None:
        logger.warning(f"User {user_id} not found")
        raise credentials_exception

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
Users = Annotated[UsersRepository, Depends(get_users_repository)]
Records = Annotated[RecordsRepository, Depends(get_records_repository)]
