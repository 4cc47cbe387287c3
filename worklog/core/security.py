"""
Security utilities for password hashing and JWT token management.

Default hashing uses ``pbkdf2_sha256`` for stable cross-platform behavior in
tests and local development. ``bcrypt`` verification is still supported for
hashes imported from older deployments.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from worklog.core.config import settings
from worklog.core.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        subject: The subject (the user ID) to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Decode a JWT access token and return the user id it was issued for.

    Raises:
        JWTError: If the token is malformed, expired or carries no usable subject
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token missing subject claim")
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise JWTError("Invalid user ID in token") from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    passlib compares digests in constant time.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        # Unknown or malformed hash format
        logger.warning(f"Stored password hash could not be verified: {e}")
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using the configured default scheme.

    Args:
        password: Plain text password

    Returns:
        Salted hash string
    """
    return pwd_context.hash(password)
