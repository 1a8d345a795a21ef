"""
Employee repository for employee-specific database operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
import logging

from publication_assistant.models.employee import Employee
from .generic_repository import GenericRepository

logger = logging.getLogger(__name__)


class EmployeeRepository(GenericRepository[Employee]):
    """
    Repository for Employee entity operations.

    Inherits the generic CRUD operations and adds lookups that need the
    employee's publications loaded up front (lazy loading is unavailable on
    an AsyncSession).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Employee, db)

    async def get_with_publications(self, employee_id: int) -> Employee | None:
        """
        Return the employee with `publications` eagerly loaded, or None if the id is unknown.
        """
        employees = await self.get(
            filter=Employee.id == employee_id,
            include=[Employee.publications],
        )
        employee = employees[0] if employees else None

        if employee is None:
            logger.debug(f"No employee found with ID: {employee_id}")
        else:
            logger.debug(
                f"Loaded employee {employee_id} with {len(employee.publications)} publication(s)")
        return employee

    async def get_all(self) -> list[Employee]:
        """All employees sorted by surname, then first name."""
        return await self.get(order_by=[Employee.last_name, Employee.first_name])
