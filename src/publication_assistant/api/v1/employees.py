"""
Employees API router.

Routes (mounted under /api/Employees):
- GET    /            - all employees
- GET    /{id}        - one employee
- POST   /            - create an employee
- PUT    /{id}        - update an employee
- DELETE /{id}        - delete an employee

Each write commits once, after the repository call succeeded.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from publication_assistant.core.dependencies import get_db_session, get_employee_repository
from publication_assistant.exceptions.base import NotFoundError
from publication_assistant.models import Employee
from publication_assistant.repositories import EmployeeRepository
from publication_assistant.schemas import EmployeeCreate, EmployeeDTO, EmployeeUpdate, map_many, map_to

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/Employees", tags=["employees"])


@router.get("", response_model=list[EmployeeDTO])
async def list_employees(
    repository: EmployeeRepository = Depends(get_employee_repository),
) -> list[EmployeeDTO]:
    return map_many(EmployeeDTO, await repository.get_all())


@router.get("/{employee_id}", response_model=EmployeeDTO)
async def get_employee(
    employee_id: int,
    repository: EmployeeRepository = Depends(get_employee_repository),
) -> EmployeeDTO:
    employee = await repository.get_by_id(employee_id)
    if employee is None:
        raise NotFoundError(f"Not found employee with id:{employee_id}")
    return map_to(EmployeeDTO, employee)


@router.post("", response_model=EmployeeDTO, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    repository: EmployeeRepository = Depends(get_employee_repository),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeDTO:
    """
    Create an employee.

    Raises:
        DuplicateError: -> 409 when the email is already taken.
    """
    employee = await repository.create(**payload.model_dump())
    await db.commit()
    logger.info(f"Created employee {employee.id}")
    return map_to(EmployeeDTO, employee)


@router.put("/{employee_id}", response_model=EmployeeDTO)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    repository: EmployeeRepository = Depends(get_employee_repository),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeDTO:
    """
    Update the fields present in the payload; absent or null fields are kept.
    """
    employee: Employee | None = await repository.update_by_id(
        employee_id, **payload.model_dump(exclude_unset=True)
    )
    if employee is None:
        raise NotFoundError(f"Not found employee with id:{employee_id}")

    await db.commit()
    return map_to(EmployeeDTO, employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    repository: EmployeeRepository = Depends(get_employee_repository),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await repository.delete(employee_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
