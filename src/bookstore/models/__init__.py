r"""
Centralized access to the database models.

    from bookstore.models import Book

Importing this package registers every model on `Base.metadata`, which is what
`Database.create_schema()` and the test fixtures rely on.
"""

from .book import Book, VALID_GENRES

__all__ = [
    "Book",
    "VALID_GENRES",
]
