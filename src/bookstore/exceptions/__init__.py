# bookstore/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # App-level errors (RepositoryError, NotFoundError, DuplicateError, ...)
# │   ├── integrity_classifier.py    # SQL-level / DB-specific constraint classification
# │   └── mapper.py                  # Map DB errors to app-level errors + per-operation transaction scope

from .base import (
    RepositoryError,
    NotFoundError,
    DuplicateError,
    InvalidFilterError,
    error_payload,
    error_status,
)

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFilterError",
    "error_payload",
    "error_status",
]
