"""
Publication repository: publication-specific queries on top of GenericRepository.
"""

from typing import Any, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from publication_assistant.models.employee import Employee
from publication_assistant.models.publication import (
    PublicationBase,
    Article,
    Book,
    ConferencePaper,
)
from .generic_repository import GenericRepository, OrderByType

logger = logging.getLogger(__name__)


class PublicationRepository(GenericRepository[PublicationBase]):
    """
    Repository for the publication hierarchy.

    Queries through `PublicationBase` return every subtype; the `get_articles()`,
    `get_books()` and `get_conference_papers()` helpers narrow the result to one kind.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(PublicationBase, db)

    async def get_all(self, order_by: OrderByType = "id") -> list[PublicationBase]:
        """All publications, ordered by key unless told otherwise."""
        return await self.get(order_by=order_by)

    async def get_by_author(self, employee_id: int) -> list[PublicationBase]:
        """
        Publications co-authored by the given employee.

        Returns an empty list both for an employee without publications and for
        an unknown employee; callers that must tell the two apart check the
        employee first (see `EmployeeRepository.get_with_publications`).
        """
        return await self.get(
            filter=PublicationBase.authors.any(Employee.id == employee_id),
            order_by="id",
        )

    async def get_articles(self, order_by: OrderByType = "id", include: Iterable[Any] = ()) -> list[Article]:
        return await self.get_of_type(Article, order_by=order_by, include=include)

    async def get_books(self, order_by: OrderByType = "id", include: Iterable[Any] = ()) -> list[Book]:
        return await self.get_of_type(Book, order_by=order_by, include=include)

    async def get_conference_papers(
        self, order_by: OrderByType = "id", include: Iterable[Any] = ()
    ) -> list[ConferencePaper]:
        return await self.get_of_type(ConferencePaper, order_by=order_by, include=include)
