"""
The single long-lived persistence resource of the service.

A `Database` owns the AsyncEngine (and its connection pool) plus the session
factory built on it. The app factory creates exactly one, the lifespan opens it
at startup and closes it at shutdown, and request handlers receive sessions
from it through `bookstore.core.dependencies`.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from .base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Engine + session factory for one database URL.

    Creating the object does not open a connection; `connect()` does, and fails
    fast when the database is unreachable.
    """

    def __init__(self, url: str | URL, *, echo: bool = False):
        self.url = make_url(url)
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=echo,
            pool_pre_ping=True,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def safe_url(self) -> str:
        """The URL with the password masked, for log lines."""
        return self.url.render_as_string(hide_password=True)

    async def connect(self) -> None:
        """
        Open a connection and run `SELECT 1`.

        Raises:
            sqlalchemy.exc.DBAPIError (or the driver's OSError) when the database
            cannot be reached or the credentials are rejected.
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established", extra={"database_url": self.safe_url})

    async def create_schema(self) -> None:
        """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        # registers Book on Base.metadata
        from bookstore import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database.schema_ready", extra={"tables": sorted(Base.metadata.tables)})

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a fresh AsyncSession and close it afterwards.

        The session does not start a transaction by itself; repositories open
        one per operation.
        """
        async with self.session_factory() as session:
            yield session

    async def close(self) -> None:
        """Dispose of the engine, closing every pooled connection."""
        await self.engine.dispose()
        logger.info("Database connection closed", extra={"database_url": self.safe_url})
