"""
Centralized access to all database models of the publication assistant.

Importing this package registers every mapped class on `Base.metadata`, so
`create_all()` and relationship string lookups ("PublicationBase", "Employee")
work regardless of which model module a caller imported first.

    from publication_assistant.models import Employee, PublicationBase, Article
"""

from .employee import Employee, employee_publications
from .publication import (
    PublicationBase,
    PublicationType,
    Article,
    Book,
    ConferencePaper,
)

__all__ = [
    "Employee",
    "employee_publications",
    "PublicationBase",
    "PublicationType",
    "Article",
    "Book",
    "ConferencePaper",
]
