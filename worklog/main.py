"""
Main FastAPI application entry point.
Configures the application, middleware, and routes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worklog.api.exception_handlers import register_exception_handlers
from worklog.api.routes import auth, health, users, work
from worklog.core.config import settings
from worklog.core.errors import DomainError
from worklog.core.logging import get_logger, setup_logging
from worklog.db.database import Database
from worklog.db.schema import create_schema
from worklog.db.session import get_database
from worklog.models.role import Role
from worklog.models.user import User
from worklog.repositories.users import UsersRepository

# Setup logging
setup_logging()
logger = get_logger(__name__)


def bootstrap_superuser(database: Database) -> None:
    """
    Create the configured administrator account unless it already exists.

    A failure is logged and startup continues without the account.
    """
    users = UsersRepository(database)
    if users.find_by_email(settings.FIRST_SUPERUSER_EMAIL) is not None:
        return

    logger.info("Creating first superuser...")
    try:
        superuser = User(
            email=settings.FIRST_SUPERUSER_EMAIL,
            name=settings.FIRST_SUPERUSER_NAME,
            role=Role.ADMIN,
        )
        superuser.set_password(settings.FIRST_SUPERUSER_PASSWORD)
        users.add(superuser)
        logger.info(f"Superuser created: {settings.FIRST_SUPERUSER_EMAIL}")
    except DomainError as e:
        logger.error(f"Failed to create superuser: {e.code.value}")
        logger.warning("Continuing without superuser. Admin endpoints may not be reachable.")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Runs startup and shutdown logic.
    """
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")

    # Honour test overrides of the database dependency
    database = app.dependency_overrides.get(get_database, get_database)()
    create_schema(database)

    if not settings.DISABLE_BOOTSTRAP_USERS:
        bootstrap_superuser(database)
    else:
        logger.info("User bootstrapping disabled (DISABLE_BOOTSTRAP_USERS=true)")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "content-type", "accept"],
    )

register_exception_handlers(app)

app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
app.include_router(users.router, prefix=settings.API_V1_PREFIX)
app.include_router(work.router, prefix=settings.API_V1_PREFIX)
