"""
Classification of SQLAlchemy IntegrityError into constraint kinds.

The constraint-level exceptions below are internal labels: they tell the mapper
*what* failed in the database. They are never raised to API callers; the mapper
turns them into the app-level errors from `base.py`:

| Constraint-level (internal) | → | App-level (external)             |
| --------------------------- | - | -------------------------------- |
| `UniqueConstraintError`     | → | `DuplicateError`                 |
| `NotNullConstraintError`    | → | `RepositoryError`                |
| `CheckConstraintError`      | → | `RepositoryError`                |
| `UnknownIntegrityError`     | → | `RepositoryError`                |
"""
import logging
from enum import Enum
from typing import Type
from sqlalchemy.exc import IntegrityError
from .base import RepositoryError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint-specific exceptions
# =================================================================================================================


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (missing required field)."""


class CheckConstraintError(ConstraintViolationError):
    """CHECK constraint violated (e.g. negative price)."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


# =================================================================================================================
# Postgres SQLSTATE mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    CHECK_VIOLATION = "23514"


SQLSTATE_EXCEPTION_MAP: dict[str, Type[ConstraintViolationError]] = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintError,
}

# Lower-cased message fragments for drivers that expose no SQLSTATE (SQLite, and a last resort for others).
# "duplicate key value" is the Postgres wording of a unique violation.
_MESSAGE_MARKERS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate key value", "duplicate entry")),
    (NotNullConstraintError, ("not null constraint", "null value in column")),
    (CheckConstraintError, ("check constraint", "check failed")),
]


# =================================================================================================================
# Integrity Error Classifiers
# =================================================================================================================

def _sqlstate(orig) -> str | None:
    # psycopg 3 exposes `sqlstate`; psycopg2 and the asyncpg adapter expose `pgcode`.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _classify_from_sqlstate(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    sqlstate = _sqlstate(orig)
    if not sqlstate:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None

    exception_class = SQLSTATE_EXCEPTION_MAP.get(sqlstate)
    if exception_class:
        logger.debug(
            "Postgres integrity diagnostic",
            extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_message(msg: str) -> Type[ConstraintViolationError]:
    normalized = (msg or "").lower()
    for exception_class, markers in _MESSAGE_MARKERS:
        if any(marker in normalized for marker in markers):
            return exception_class

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": normalized[:200]})
    return UnknownIntegrityError


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolationError subclass.

    SQLSTATE wins when the driver provides one; otherwise the driver message is
    matched against known wordings.

    Returns:
        (ExceptionClass, constraint_name or None)
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_sqlstate(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_message(str(orig) if orig is not None else str(exc)), None
