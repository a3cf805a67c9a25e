"""
Declarative base for the bookstore ORM models.

The naming convention gives every constraint a stable, predictable name
(e.g. `uq_books_name`, `ck_books_price_non_negative`). Those names show up in
driver error diagnostics and are what the integrity classifier logs.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}
