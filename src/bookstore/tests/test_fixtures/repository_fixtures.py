"""Fixtures for repository tests."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.models.book import Book
from bookstore.repositories.book_repository import BookRepository

# NOTE: All fixtures in this file depend on the `db_session` fixture defined in conftest.py,
# which is bound to a fresh SQLite file per test.


@pytest.fixture
async def book_repository(db_session: AsyncSession) -> BookRepository:
    return BookRepository(db_session)


@pytest.fixture
def sample_book_data() -> dict:
    """
    Deterministic payload used by many tests.
    Kept synchronous because it does not touch the DB.
    """
    return {
        "name": "The Left Hand of Darkness",
        "price": 12.5,
        "genre": 1,
        "amount": 3,
    }


@pytest.fixture
async def create_book(book_repository: BookRepository):
    """
    A small factory that tests call to insert books with optional overrides.

    Usage:
        book = await create_book(name="Dune", genre=2)
    """
    async def _create(**overrides) -> Book:
        data = {
            "name": f"book_{uuid.uuid4().hex[:8]}",
            "price": 10.0,
            "genre": 1,
            "amount": 1,
        }
        data.update(overrides)
        return await book_repository.create(data)

    return _create


@pytest.fixture
async def created_book(create_book, sample_book_data) -> Book:
    return await create_book(**sample_book_data)
