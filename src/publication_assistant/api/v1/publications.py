"""
Publications API router.

Routes:
- GET    /api/Publications/All                    - all publications
- GET    /api/Publications/All/{publication_id}    - one publication
- GET    /api/Employees/{employee_id}/Publications - publications of one employee
- GET    /GetAllAsXml                              - all publications as an XML attachment
- DELETE /api/Publications/{publication_id}        - delete one publication

Paths are absolute because the routes span three prefixes; the router is
included without a prefix.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from publication_assistant.config import Settings
from publication_assistant.core.dependencies import (
    get_app_settings,
    get_db_session,
    get_employee_repository,
    get_publication_repository,
)
from publication_assistant.exceptions.base import NotFoundError
from publication_assistant.repositories import EmployeeRepository, PublicationRepository
from publication_assistant.schemas import PublicationBaseDTO, map_many, map_to
from publication_assistant.utils.xml_export import dtos_to_xml, export_file_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["publications"])


@router.get("/api/Publications/All", response_model=list[PublicationBaseDTO])
async def get_all(
    repository: PublicationRepository = Depends(get_publication_repository),
) -> list[PublicationBaseDTO]:
    """
    Return all publications.
    """
    publications = await repository.get_all()
    logger.info(f"Retrieved {len(publications)} publications")
    return map_many(PublicationBaseDTO, publications)


@router.get("/api/Publications/All/{publication_id:int}", response_model=PublicationBaseDTO)
async def get_publication_by_id(
    publication_id: int,
    repository: PublicationRepository = Depends(get_publication_repository),
) -> PublicationBaseDTO:
    """
    Return the publication with the given id.

    Raises:
        NotFoundError: -> 404 when no publication has that id.
    """
    publications = await repository.get(filter=repository.model.id == publication_id)
    if not publications:
        raise NotFoundError(f"Not found publication with id:{publication_id}")

    return map_to(PublicationBaseDTO, publications[0])


@router.get("/api/Employees/{employee_id:int}/Publications", response_model=list[PublicationBaseDTO])
async def get_publications_of_employee(
    employee_id: int,
    repository: EmployeeRepository = Depends(get_employee_repository),
) -> list[PublicationBaseDTO]:
    """
    Return the publications associated with the given employee.

    Raises:
        NotFoundError: -> 404 when the employee does not exist.
    """
    employee = await repository.get_with_publications(employee_id)
    if employee is None:
        raise NotFoundError(f"Not found employee with id:{employee_id}")

    return map_many(PublicationBaseDTO, employee.publications)


@router.get(
    "/GetAllAsXml",
    response_class=Response,
    responses={200: {"content": {"text/xml": {}}}},
)
async def get_all_publications_as_xml(
    repository: PublicationRepository = Depends(get_publication_repository),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Dump every publication into an XML file download.
    """
    publications = await repository.get_all()
    body = dtos_to_xml(map_many(PublicationBaseDTO, publications), item_name="PublicationBaseDTO")
    file_name = export_file_name(settings.XML_EXPORT_FILE_PREFIX)

    logger.info(
        "publications.xml_export",
        extra={"count": len(publications), "file_name": file_name, "size_bytes": len(body)},
    )
    return Response(
        content=body,
        media_type="text/xml",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.delete("/api/Publications/{publication_id:int}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_publication(
    publication_id: int,
    repository: PublicationRepository = Depends(get_publication_repository),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Delete the publication with the given id and commit.

    Raises:
        NotFoundError: -> 404 when no publication has that id.
    """
    await repository.delete(publication_id)
    await db.commit()
    logger.info(f"Deleted publication {publication_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
