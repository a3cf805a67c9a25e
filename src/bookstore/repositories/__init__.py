"""
Repository layer initialization module.

Usage:
    from bookstore.repositories import BookRepository
"""

from .base_repository import BaseRepository
from .book_repository import BookRepository

__all__ = [
    "BaseRepository",
    "BookRepository",
]
