import re
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
    CheckConstraintError,
)
from .base import DuplicateError, RepositoryError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

def _split_qualified_columns(raw: str) -> list[str]:
    # "books.name, books.genre" -> ["name", "genre"]
    return [c.split(".")[-1].strip() for c in re.split(r",\s*", raw.strip())]


def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Try to extract involved column names from common Postgres messages:
      - 'null value in column "name" of relation "books" violates not-null constraint'
      - 'DETAIL:  Key (name)=(Dune) already exists.'
    """
    if not msg:
        return None

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # SQLite: 'UNIQUE constraint failed: books.name' / 'NOT NULL constraint failed: books.price'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>[^\n\[]+)', msg, flags=re.IGNORECASE)
    if m:
        return _split_qualified_columns(m.group("cols"))
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the DB message (Postgres, SQLite).
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)

    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to an app-level exception and raise it.
    Populates `.fields` and `.constraint` where possible.

    Only a unique violation becomes a `DuplicateError`; every other integrity
    failure is an internal error as far as the client is concerned.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)

    model_part = model_name or "Record"

    if exc_cls is UniqueConstraintError:
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if columns:
            raise DuplicateError(
                f"{model_part} already exists for field(s): {', '.join(columns)}",
                fields=columns, constraint=constraint_name,
            ) from exc
        raise DuplicateError(
            f"{model_part} already exists (constraint: {constraint_name or 'unique'})",
            constraint=constraint_name,
        ) from exc

    if exc_cls is NotNullConstraintError:
        logger.warning(
            "mapper.not_null_violation",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        raise RepositoryError(
            f"Missing required field(s) for {model_part}: {', '.join(columns or ['?'])}",
            fields=columns, constraint=constraint_name,
        ) from exc

    raw = str(exc.orig) if exc.orig is not None else str(exc)

    if exc_cls is CheckConstraintError:
        # raw DB text stays at DEBUG
        logger.warning(
            "mapper.check_constraint_failure",
            extra={"model": model_part, "constraint": constraint_name},
        )
        logger.debug("mapper.check_constraint_raw", extra={"model": model_part, "raw": raw})
        raise RepositoryError(
            f"{model_part} business rule violated (check constraint).", constraint=constraint_name
        ) from exc

    logger.warning(
        "mapper.unknown_integrity_error",
        extra={"model": model_part, "constraint": constraint_name},
    )
    logger.debug("mapper.unknown_integrity_raw", extra={"model": model_part, "raw": raw})
    raise RepositoryError(f"{model_part} database integrity error.") from exc


# -----------------------
# Per-operation transaction scope
# -----------------------
@asynccontextmanager
async def db_transaction(db: AsyncSession, model_name: str | None = None) -> AsyncIterator[AsyncSession]:
    """
    Run one repository operation in its own transaction.

    Usage:
        async with db_transaction(self.db, "Book"):
            ... DB ops ...

    The transaction commits when the block exits normally and rolls back when it
    raises. App-level errors raised inside the block (e.g. NotFoundError) pass
    through unchanged; IntegrityError is mapped through
    `raise_mapped_integrity_error`; anything else becomes a RepositoryError.
    """
    try:
        async with db.begin():
            yield db
    except RepositoryError:
        raise
    except IntegrityError as exc:
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        # Unexpected errors keep their stack trace in the logs only.
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
