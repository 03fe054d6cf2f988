"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, routes and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from psycopg_pool import ConnectionPool

from src.adapters.hashing import BcryptPasswordHasher
from src.adapters.memory import InMemoryTokenIssuer, InMemoryUserRepository
from src.adapters.rate_limit import InMemoryRateLimiter, PostgresRateLimiter
from src.adapters.repository.postgres import PostgresUserRepository, run_migrations
from src.adapters.tokens import PostgresTokenIssuer
from src.api.errors import Unauthenticated, request_validation_handler, unauthenticated_handler
from src.api.routes import router
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Register, log in and fetch the current user with bearer tokens",
    },
]


def _uses_postgres(settings: Settings) -> bool:
    return "postgres" in (settings.storage_backend, settings.rate_limit_backend)


def configure_backends(app: FastAPI, settings: Settings, pool: ConnectionPool | None) -> None:
    """
    Build the four collaborators selected by settings and store them in app.state.
    """
    app.state.password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_cost)

    if settings.storage_backend == "postgres":
        app.state.user_repository = PostgresUserRepository(pool)
        app.state.token_issuer = PostgresTokenIssuer(pool, name=settings.token_name)
    else:
        app.state.user_repository = InMemoryUserRepository()
        app.state.token_issuer = InMemoryTokenIssuer(name=settings.token_name)

    if settings.rate_limit_backend == "postgres":
        app.state.rate_limiter = PostgresRateLimiter(pool)
    else:
        app.state.rate_limiter = InMemoryRateLimiter()

    logger.info(
        "Backends configured: storage=%s rate_limit=%s",
        settings.storage_backend,
        settings.rate_limit_backend,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup (PostgreSQL backends only)
    - Runs migrations on startup
    - Builds adapters and stores them in app state
    - Closes connection pool on shutdown
    """
    settings: Settings = app.state.settings
    pool: ConnectionPool | None = None

    logger.info("Starting application...")

    if _uses_postgres(settings):
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

    app.state.pool = pool
    configure_backends(app, settings, pool)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to the cached environment settings
    """
    if settings is None:
        settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="gatekeeper",
        description="Username/password authentication API with bearer tokens and rate limiting",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(Unauthenticated, unauthenticated_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(router)
    # Same routes under /api for clients that expect the prefixed layout
    app.include_router(router, prefix="/api", include_in_schema=False)

    @app.get("/health")
    def health_check(request: Request) -> dict[str, str]:
        """
        Health check endpoint with database validation.

        Returns 200 OK if application and database are healthy.
        Raises exception if database connection fails.
        """
        pool = request.app.state.pool
        if pool is not None:
            with pool.connection() as conn:
                conn.execute("SELECT 1")

        return {"status": "healthy"}

    return app


app = create_app()
