"""
Core pytest configuration for the entire test suite.

This module provides only the essentials needed across ALL types of tests:
settings, logging and an isolated database.

Domain-specific fixtures are located in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/api_fixtures.py
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the bookstore imports so model/metadata registration
# does not spam the pytest output.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.config.settings import Settings
from bookstore.core.logging.builder import setup_logging
from bookstore.database.session import Database


# -------------------------------
# Settings
# -------------------------------

def make_test_settings(**overrides) -> Settings:
    """
    Settings for tests: fixed credentials, no .env file, plain-text logs on stderr.
    """
    values = {
        "ENV": "testing",
        "POSTGRES_USER": "bookstore",
        "POSTGRES_PASSWORD": "bookstore-secret",
        "POSTGRES_DB": "books",
        "LOG_FORMAT": "text",
        "LOG_LEVEL": "INFO",
        "LOG_TO_STDOUT": True,
        "CREATE_SCHEMA": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_test_settings()


# -------------------------------
# Logging: install application logging once
# -------------------------------
@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application dictConfig for the whole session.

    pytest re-adds its capture handler to the root logger for every test phase,
    so `caplog` keeps working after dictConfig replaced the root handlers.
    """
    setup_logging(make_test_settings())
    yield


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------

def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """
    A fresh SQLite database file per test, schema created, closed afterwards.

    Function scope keeps the engine on the same event loop as the test.
    """
    db = Database(sqlite_url(tmp_path / "books.db"))
    await db.connect()
    await db.create_schema()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


# Repository and API fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402
    book_repository,
    sample_book_data,
    create_book,
    created_book,
)
from .test_fixtures.api_fixtures import (  # noqa: E402
    app,
    client,
)
