"""
Application factory and console entry point.

    bookstore            # console script -> run()
    uvicorn bookstore.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from bookstore.api.v1 import books_router, register_exception_handlers
from bookstore.config.settings import Settings, get_settings
from bookstore.core.logging import RequestIDMiddleware, setup_logging
from bookstore.database.session import Database
from bookstore.utils.logging import get_project_version

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: defaults to `get_settings()`
        database: defaults to a `Database` on `settings.DATABASE_URL`; tests pass their own

    The returned app owns exactly one `Database`, stored on `app.state.database`.
    It is connected when the lifespan starts and closed when it ends.
    """
    settings = settings or get_settings()
    database = database or Database(settings.DATABASE_URL, echo=settings.SQLALCHEMY_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting bookstore API", extra={"env": settings.ENV, "database_url": database.safe_url})
        try:
            await database.connect()
            if settings.CREATE_SCHEMA:
                await database.create_schema()
        except Exception:
            logger.exception("Failed to connect to database", extra={"database_url": database.safe_url})
            await database.close()
            raise

        yield

        logger.info("Shutting down bookstore API")
        await database.close()

    app = FastAPI(
        title="Bookstore API",
        description="CRUD service over a single table of books.",
        version=get_project_version(),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(books_router)

    return app


def run() -> None:
    """
    Console entry point: configure logging, then serve until SIGINT/SIGTERM.

    On shutdown uvicorn stops accepting connections and waits up to
    SHUTDOWN_GRACE_SECONDS for in-flight requests before the lifespan closes
    the database.
    """
    settings = get_settings()
    setup_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        # logging is already configured by setup_logging
        log_config=None,
        access_log=True,
    )


if __name__ == "__main__":
    run()
