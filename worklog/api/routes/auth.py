"""
Authentication routes: sign-up, sign-in and password change.
Provides JWT token-based authentication.
"""

from fastapi import APIRouter, HTTPException, status
from jose import JWTError

from worklog.api.deps import Users
from worklog.core.errors import ErrorCode
from worklog.core.logging import get_logger
from worklog.core.security import create_access_token, decode_access_token
from worklog.models import validators
from worklog.models.role import Role
from worklog.models.user import User, UserPatch
from worklog.schemas.token import (
    AuthResponse,
    PasswordChangeRequest,
    SigninRequest,
    SignupRequest,
    TokenSigninRequest,
)
from worklog.schemas.user import UserResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(subject=user.id),
        user=UserResponse.from_entity(user),
    )


@router.post("/signup", response_model=AuthResponse)
def signup(user_in: SignupRequest, users: Users) -> AuthResponse:
    """
    Register a new regular user and sign them in.

    Raises:
        DomainError: ``no_name``, ``bad_email``, ``bad_password``, ``email_in_use``, ...
    """
    user = User()
    user.name = user_in.name
    user.email = user_in.email
    user.set_password(user_in.password)
    user.role = Role.USER

    added = users.add(user)
    logger.info(f"New user registered: {added.email} (ID: {added.id})")
    return _auth_response(added)


@router.post("/signin", response_model=AuthResponse)
def signin(credentials: SigninRequest, users: Users) -> AuthResponse:
    """
    Sign in with email and password.

    Raises:
        DomainError: If the email or password is malformed
        HTTPException: ``auth_error`` if the credentials do not match
    """
    email = validators.validate_email(credentials.email)
    validators.validate_password(credentials.password)

    user = users.find_by_email(email)
    if user is None or not user.check_password(credentials.password):
        logger.warning(f"Failed login attempt for email: {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorCode.AUTH_ERROR.value,
        )

    logger.info(f"User logged in: {user.email} (ID: {user.id})")
    return _auth_response(user)


@router.post("/signin-by-token", response_model=AuthResponse)
def signin_by_token(request: TokenSigninRequest, users: Users) -> AuthResponse:
    """
    Exchange a still-valid token for a fresh one.

    Raises:
        HTTPException: 401 if the token is missing or invalid, or its user is gone
    """
    if not request.token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=ErrorCode.NO_TOKEN.value)

    try:
        user_id = decode_access_token(request.token)
    except JWTError as e:
        logger.warning(f"Token sign-in rejected: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=ErrorCode.BAD_TOKEN.value)

    user = users.get(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorCode.USER_NOT_FOUND.value,
        )

    return _auth_response(user)


@router.put("/password", response_model=AuthResponse)
def change_password(request: PasswordChangeRequest, users: Users) -> AuthResponse:
    """
    Set a new password for the user the body's token was issued to.

    Raises:
        HTTPException: 422 ``no_token`` / ``bad_token``
        DomainError: ``no_password``, ``bad_password``, ``user_not_found``
    """
    if not request.token:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ErrorCode.NO_TOKEN.value,
        )

    patch = UserPatch.from_changes({"password": request.password})

    try:
        user_id = decode_access_token(request.token)
    except JWTError as e:
        logger.warning(f"Password change rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ErrorCode.BAD_TOKEN.value,
        )

    user = users.update(user_id, patch)
    logger.info(f"Password changed for user {user.id}")
    return _auth_response(user)
