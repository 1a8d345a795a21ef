from fastapi import APIRouter

from .employees import router as employees_router
from .publications import router as publications_router

api_router = APIRouter()
# publications first: it owns /api/Employees/{id}/Publications
api_router.include_router(publications_router)
api_router.include_router(employees_router)

__all__ = ["api_router"]
