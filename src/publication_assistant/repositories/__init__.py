"""
Repository layer.

    from publication_assistant.repositories import PublicationRepository, EmployeeRepository
"""

from .generic_repository import GenericRepository
from .publication_repository import PublicationRepository
from .employee_repository import EmployeeRepository

__all__ = [
    "GenericRepository",
    "PublicationRepository",
    "EmployeeRepository",
]
