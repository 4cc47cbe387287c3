"""
Map domain errors to HTTP responses.

Every error body has the shape ``{"detail": "<code>"}`` so clients can switch
on the code without parsing messages.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from worklog.core.errors import (
    AuthenticationError,
    DatabaseError,
    DomainError,
    FormatError,
    IntegrityViolationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from worklog.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (IntegrityViolationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (FormatError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(error: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code.value}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"detail": exc.code.value}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain error handler on ``app``."""
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
