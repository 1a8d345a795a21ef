import logging
from enum import Enum
from typing import Type
from sqlalchemy.exc import IntegrityError
from .base import RepositoryError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint-specific exceptions (internal classification only, never raised to callers)
# =================================================================================================================


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value (e.g. two employees with the same email)."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (e.g. publication without a title)."""


class ForeignKeyConstraintError(ConstraintViolationError):
    """Foreign key violation (e.g. linking a publication to a missing employee)."""


class CheckConstraintError(ConstraintViolationError):
    """CHECK constraint violated."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


# =================================================================================================================
# Postgres SQLSTATE mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ForeignKeyConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintError,
}


# keyword fallbacks for drivers without SQLSTATE (SQLite, MySQL)
_MESSAGE_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (NotNullConstraintError, ("not null constraint", "not null", "null value in column")),
    (ForeignKeyConstraintError, ("foreign key constraint", "foreign key", "is not present in table")),
    (CheckConstraintError, ("check constraint", "check failed")),
]


# =================================================================================================================
# Classifiers
# =================================================================================================================

def _constraint_name(orig) -> str | None:
    # psycopg exposes diagnostics on `.diag`; asyncpg keeps them on the wrapped driver error
    diag = getattr(orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None):
        return diag.constraint_name
    cause = getattr(orig, "__cause__", None)
    return getattr(cause, "constraint_name", None) or getattr(orig, "constraint_name", None)


def _classify_from_postgres_code(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    """
    Classify using the SQLSTATE code when the driver provides one
    (`pgcode` for psycopg and SQLAlchemy's asyncpg adapter, `sqlstate` for raw asyncpg).
    """
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if not pgcode:
        return None, None

    constraint_name = _constraint_name(orig)
    exception_class = PGCODE_EXCEPTION_MAP.get(pgcode)

    if exception_class:
        logger.debug("Postgres integrity diagnostic",
                     extra={"pgcode": pgcode, "constraint_name": constraint_name})
        return exception_class, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"pgcode": pgcode, "constraint_name": constraint_name}
    )
    logger.debug("Postgres orig diagnostic (raw)", extra={"orig_repr": repr(orig)})
    return UnknownIntegrityError, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolationError], None]:
    normalized = (msg or "").lower()

    for exception_class, keywords in _MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return exception_class, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": (msg or "")[:200]})
    logger.debug("Unknown integrity raw message", extra={"raw": msg})
    return UnknownIntegrityError, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolationError subclass.

    Returns:
        A tuple of (ExceptionClass, constraint_name if available)
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_postgres_code(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))
