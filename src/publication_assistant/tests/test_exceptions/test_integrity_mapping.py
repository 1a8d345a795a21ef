import pytest
from sqlalchemy.exc import IntegrityError

from publication_assistant.exceptions import DuplicateError, NotFoundError, RepositoryError
from publication_assistant.exceptions.integrity_classifier import (
    CheckConstraintError,
    ForeignKeyConstraintError,
    NotNullConstraintError,
    UniqueConstraintError,
    UnknownIntegrityError,
    classify_integrity_error,
)
from publication_assistant.exceptions.mapper import (
    db_error_handler,
    extract_columns_from_integrity,
    raise_mapped_integrity_error,
)


class FakePgError(Exception):
    """Stands in for a driver error carrying a SQLSTATE and diagnostics."""

    def __init__(self, message, pgcode, constraint_name=None):
        super().__init__(message)
        self.pgcode = pgcode
        self.constraint_name = constraint_name


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO employees ...", {}, orig)


@pytest.mark.parametrize(
    "message, expected",
    [
        ("UNIQUE constraint failed: employees.email", UniqueConstraintError),
        ("NOT NULL constraint failed: publications.title", NotNullConstraintError),
        ("FOREIGN KEY constraint failed", ForeignKeyConstraintError),
        ("CHECK constraint failed: year_positive", CheckConstraintError),
        ("something else entirely", UnknownIntegrityError),
    ],
)
def test_classify_sqlite_messages(message, expected):
    exc_cls, constraint = classify_integrity_error(integrity_error(Exception(message)))

    assert exc_cls is expected
    assert constraint is None


def test_classify_postgres_code_and_constraint_name():
    orig = FakePgError("duplicate key value", "23505", constraint_name="uq_employees_email")

    exc_cls, constraint = classify_integrity_error(integrity_error(orig))

    assert exc_cls is UniqueConstraintError
    assert constraint == "uq_employees_email"


@pytest.mark.parametrize(
    "message, expected",
    [
        ('null value in column "title" violates not-null constraint', ["title"]),
        ("DETAIL:  Key (email)=(a@b.com) already exists.", ["email"]),
        ("UNIQUE constraint failed: employee_publications.employee_id, employee_publications.publication_id",
         ["employee_id", "publication_id"]),
        ("Duplicate entry 'a@b.com' for key 'uq_employees_email'", ["uq_employees_email"]),
        ("no columns here", None),
    ],
)
def test_extract_columns(message, expected):
    assert extract_columns_from_integrity(integrity_error(Exception(message))) == expected


def test_unique_violation_maps_to_duplicate():
    exc = integrity_error(FakePgError('Key (email)=(a@b.com) already exists.', "23505", "uq_employees_email"))

    with pytest.raises(DuplicateError) as exc_info:
        raise_mapped_integrity_error(exc, "Employee")

    err = exc_info.value
    assert err.fields == ["email"]
    assert err.constraint == "uq_employees_email"
    assert err.http_status() == 409
    # constraint names stay out of client payloads
    assert "uq_employees_email" not in str(err.to_payload())


def test_not_null_violation_maps_to_repository_error():
    exc = integrity_error(Exception("NOT NULL constraint failed: publications.title"))

    with pytest.raises(RepositoryError) as exc_info:
        raise_mapped_integrity_error(exc, "PublicationBase")

    assert not isinstance(exc_info.value, DuplicateError)
    assert exc_info.value.fields == ["title"]
    assert exc_info.value.http_status() == 400


class RecordingSession:
    def __init__(self):
        self.rolled_back = False

    async def rollback(self):
        self.rolled_back = True


@pytest.mark.asyncio
async def test_db_error_handler_passes_app_errors_through():
    session = RecordingSession()

    with pytest.raises(NotFoundError):
        async with db_error_handler(session, "Employee"):
            raise NotFoundError("gone")

    assert session.rolled_back is False


@pytest.mark.asyncio
async def test_db_error_handler_rolls_back_and_maps_integrity_errors():
    session = RecordingSession()

    with pytest.raises(DuplicateError):
        async with db_error_handler(session, "Employee"):
            raise integrity_error(Exception("UNIQUE constraint failed: employees.email"))

    assert session.rolled_back is True


@pytest.mark.asyncio
async def test_db_error_handler_wraps_unexpected_errors():
    session = RecordingSession()

    with pytest.raises(RepositoryError) as exc_info:
        async with db_error_handler(session, "Employee"):
            raise RuntimeError("connection reset")

    assert session.rolled_back is True
    assert str(exc_info.value) == "Failed to operate on Employee"
    assert isinstance(exc_info.value.__cause__, RuntimeError)
