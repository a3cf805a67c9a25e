"""
Book repository: the Store behind the `/books` endpoints.

Adds the filtered listing on top of the generic single-row operations from
`BaseRepository`.
"""

import logging
from typing import Any, Callable, Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from bookstore.models.book import Book
from bookstore.exceptions.base import InvalidFilterError
from bookstore.exceptions.mapper import db_transaction
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

# Recognized list filters: query key -> (column, parser for the raw string value).
# Each present key adds one `column = :value` predicate; absent keys add nothing.
FILTER_COLUMNS: dict[str, tuple[InstrumentedAttribute, Callable[[str], Any]]] = {
    "name": (Book.name, str),
    "genre": (Book.genre, int),
}

# Columns a create/update writes. `id` is never taken from the caller.
WRITABLE_FIELDS = ("name", "price", "genre", "amount")


def _writable(values: Mapping[str, Any]) -> dict[str, Any]:
    return {field: values[field] for field in WRITABLE_FIELDS}


class BookRepository(BaseRepository[Book]):
    """
    Repository for Book entity operations.

    The generic `create` / `get_by_id` / `update` / `delete` come from
    `BaseRepository`; `create_book` and `update_book` restrict the written
    columns to the book fields.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    # =================================================================================================================
    # List
    # =================================================================================================================

    def _filter_predicates(self, filters: Mapping[str, Sequence[str]]) -> list:
        """
        Translate request filters into column predicates.

        Only the first value of a repeated key is used.

        Raises:
            InvalidFilterError: unknown key, missing value or a value the column parser rejects
        """
        predicates = []
        for key, raw_values in filters.items():
            if key not in FILTER_COLUMNS:
                raise InvalidFilterError(f"Unsupported filter key: {key!r}", fields=[key])
            if not raw_values:
                raise InvalidFilterError(f"Filter {key!r} has no value", fields=[key])

            column, parse = FILTER_COLUMNS[key]
            try:
                value = parse(raw_values[0])
            except (TypeError, ValueError) as exc:
                raise InvalidFilterError(f"Cannot parse filter {key}={raw_values[0]!r}", fields=[key]) from exc
            predicates.append(column == value)
        return predicates

    async def list_books(self, filters: Mapping[str, Sequence[str]] | None = None) -> list[Book]:
        """
        List books in stock (`amount > 0`), newest id first.

        Args:
            filters: parameter name -> raw string values; zero, one or both of `name` and `genre`

        Returns:
            Matching books; an empty list is not an error.

        Raises:
            InvalidFilterError: see `_filter_predicates`
            RepositoryError: the query failed
        """
        predicates = self._filter_predicates(filters or {})

        async with db_transaction(self.db, self.model_name):
            result = await self.db.execute(
                select(Book)
                .where(Book.amount > 0, *predicates)
                .order_by(Book.id.desc())
                .execution_options(populate_existing=True)
            )
            books = list(result.scalars().all())

        logger.debug(
            "repo.list.success",
            extra={"model": self.model_name, "filters": sorted(filters or {}), "count": len(books)},
        )
        return books

    # =================================================================================================================
    # Writes
    # =================================================================================================================

    async def create_book(self, values: Mapping[str, Any]) -> int:
        """Insert a book and return its new id."""
        book = await self.create(_writable(values))
        return book.id

    async def update_book(self, book_id: int, values: Mapping[str, Any]) -> Book:
        """Overwrite name, price, genre and amount of an existing book."""
        return await self.update(book_id, _writable(values))
