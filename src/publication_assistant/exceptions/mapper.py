import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
    ForeignKeyConstraintError,
    CheckConstraintError,
)
from .base import DuplicateError, RepositoryError, NotFoundError, InvalidFieldError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

# Postgres:
#   'null value in column "title" violates not-null constraint'
#   'DETAIL:  Key (email)=(a@b.com) already exists.'
_PG_NOT_NULL = re.compile(r'null value in column "(?P<col>[^"]+)"', re.IGNORECASE)
_PG_KEY = re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE)

# SQLite:
#   'UNIQUE constraint failed: employees.email'
#   'NOT NULL constraint failed: publications.title'
_SQLITE_CONSTRAINT = re.compile(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', re.IGNORECASE)

# MySQL:
#   "Duplicate entry 'a@b.com' for key 'uq_employees_email'"
_MYSQL_KEY = re.compile(r"Duplicate entry .* for key '?(?P<key>[^']+)'?", re.IGNORECASE)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the driver message (Postgres, SQLite, MySQL).
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    if not msg:
        return None

    m = _PG_NOT_NULL.search(msg)
    if m:
        return [m.group("col")]

    m = _PG_KEY.search(msg)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = _SQLITE_CONSTRAINT.search(msg)
    if m:
        return [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols"))]

    m = _MYSQL_KEY.search(msg)
    if m:
        return [m.group("key")]

    return None


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to an app-level exception and raise it.
    Populates `.fields` and `.constraint` where possible.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"
    context = {"model": model_part, "fields": columns, "constraint": constraint_name}

    if exc_cls is UniqueConstraintError:
        # expected client-level scenario (409), not an application fault
        logger.info("mapper.duplicate_detected", extra=context)
        if columns:
            raise DuplicateError(
                f"{model_part} already exists for field(s): {', '.join(columns)}",
                fields=columns, constraint=constraint_name,
            ) from exc
        raise DuplicateError(f"{model_part} already exists", constraint=constraint_name) from exc

    if exc_cls is NotNullConstraintError:
        logger.info("mapper.not_null_violation", extra=context)
        if columns:
            raise RepositoryError(
                f"Missing required field(s): {', '.join(columns)} for {model_part}",
                fields=columns, constraint=constraint_name,
            ) from exc
        raise RepositoryError(f"Missing required field for {model_part}", constraint=constraint_name) from exc

    if exc_cls is ForeignKeyConstraintError:
        logger.info("mapper.foreign_key_violation", extra=context)
        raise RepositoryError(
            f"{model_part} references a record that does not exist",
            fields=columns, constraint=constraint_name,
        ) from exc

    raw = str(exc.orig) if exc.orig is not None else str(exc)

    if exc_cls is CheckConstraintError:
        # raw DB text stays at DEBUG, never in the client message
        logger.debug("mapper.check_constraint_failure", extra={**context, "raw": raw})
        raise RepositoryError(
            f"{model_part} business rule violated (check constraint).", constraint=constraint_name
        ) from exc

    logger.warning("mapper.unknown_integrity_error", extra={"model": model_part, "constraint": constraint_name})
    logger.debug("mapper.unknown_integrity_raw", extra={"model": model_part, "raw": raw})
    raise RepositoryError(f"{model_part} database integrity error.") from exc


# -----------------------
# Async context manager shared by repository write paths
# -----------------------

# Already app-level: re-raised untouched by db_error_handler
_PASSTHROUGH = (NotFoundError, DuplicateError, InvalidFieldError)


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()

    Rolls the session back on failure and raises a mapped app-level exception.
    """
    try:
        yield
    except _PASSTHROUGH:
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("Failed to rollback session", extra={"model": model_name})
