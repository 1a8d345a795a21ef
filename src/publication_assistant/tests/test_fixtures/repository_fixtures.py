"""Fixtures for repository and API tests."""

from types import SimpleNamespace

import pytest
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from publication_assistant.models import Article, Book, ConferencePaper, Employee, PublicationBase
from publication_assistant.repositories import EmployeeRepository, PublicationRepository

# NOTE: every fixture here works inside the per-test `db_session` from conftest.py

fake = Faker()
Faker.seed(1234)


@pytest.fixture
def publication_repository(db_session: AsyncSession) -> PublicationRepository:
    return PublicationRepository(db_session)


@pytest.fixture
def employee_repository(db_session: AsyncSession) -> EmployeeRepository:
    return EmployeeRepository(db_session)


@pytest.fixture
def employee_factory(employee_repository: EmployeeRepository):
    """
    Create employees with random names and a unique email.

    Usage:
        emp = await employee_factory(last_name="Nowak")
    """
    async def _create(**overrides) -> Employee:
        data = {
            "first_name": fake.first_name(),
            "last_name": fake.last_name(),
            "academic_title": "dr",
            "email": fake.unique.email(),
        }
        data.update(overrides)
        return await employee_repository.create(**data)

    return _create


@pytest.fixture
def publication_factory(publication_repository: PublicationRepository):
    """
    Insert a publication of the given class, linked to `authors`.

    Usage:
        book = await publication_factory(Book, authors=[emp], publisher="PWN")
    """
    async def _create(
        publication_cls: type[PublicationBase] = Article,
        authors: list[Employee] | None = None,
        **fields,
    ) -> PublicationBase:
        fields.setdefault("title", fake.sentence(nb_words=6).rstrip("."))
        fields.setdefault("year", int(fake.year()))
        entity = publication_cls(**fields)
        entity.authors = list(authors or [])
        return await publication_repository.insert(entity)

    return _create


@pytest.fixture
async def employee(employee_factory) -> Employee:
    return await employee_factory(first_name="Anna", last_name="Kowalska", email="anna.kowalska@example.com")


@pytest.fixture
async def library(employee_factory, publication_factory) -> SimpleNamespace:
    """
    Two authors and one publication of every kind.

        article  - alice, bob   (2021)
        book     - alice        (2019)
        paper    - bob          (2023)
        report   - nobody       (plain publication, no year)
    """
    alice = await employee_factory(first_name="Alice", last_name="Adamska", email="alice@example.com")
    bob = await employee_factory(first_name="Bob", last_name="Bielski", email="bob@example.com")

    article = await publication_factory(
        Article, authors=[alice, bob], title="Graph neural networks in practice", year=2021,
        journal="Journal of AI", volume="12", pages="1-20", doi="10.1000/jai.2021.1",
    )
    book = await publication_factory(
        Book, authors=[alice], title="Databases from scratch", year=2019,
        publisher="PWN", isbn="978-83-01-00000-0",
    )
    paper = await publication_factory(
        ConferencePaper, authors=[bob], title="Fast XML export", year=2023,
        conference_name="PyCon PL", pages="33-40",
    )
    report = await publication_factory(PublicationBase, title="Annual report", year=None)

    return SimpleNamespace(
        alice=alice, bob=bob, article=article, book=book, paper=paper, report=report,
    )
