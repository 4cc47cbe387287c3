"""
Health check and version routes for monitoring and service discovery.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from worklog.core.config import settings
from worklog.db.database import Database
from worklog.db.session import get_database

router = APIRouter(tags=["health"])


@router.get("/version")
def version() -> dict:
    """Return the API version."""
    return {"version": settings.VERSION}


@router.get("/health")
def health_check() -> dict:
    """
    Basic health check endpoint.
    Returns service status and version information.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
    }


@router.get("/health/db")
def database_health_check(database: Annotated[Database, Depends(get_database)]) -> dict:
    """
    Database health check endpoint.
    Verifies database connectivity by executing a simple query.
    """
    try:
        result = database.query_value("SELECT 1")
    except SQLAlchemyError as e:
        return {
            "status": "unhealthy",
            "database": "error",
            "error": str(e),
        }

    return {
        "status": "healthy",
        "database": "ok",
        "result": int(result) if result is not None else 1,
    }
