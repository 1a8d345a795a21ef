from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from publication_assistant.config import Settings, get_settings
from publication_assistant.database.session import get_async_session
from publication_assistant.repositories import PublicationRepository, EmployeeRepository


async def get_db_session(session: AsyncSession = Depends(get_async_session)) -> AsyncSession:
    # One session per request; tests override this dependency with their own session
    return session


def get_publication_repository(db: AsyncSession = Depends(get_db_session)) -> PublicationRepository:
    return PublicationRepository(db)


def get_employee_repository(db: AsyncSession = Depends(get_db_session)) -> EmployeeRepository:
    return EmployeeRepository(db)


def get_app_settings() -> Settings:
    return get_settings()
