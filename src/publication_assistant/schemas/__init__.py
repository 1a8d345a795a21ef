from .dto import (
    PublicationBaseDTO,
    EmployeeDTO,
    EmployeeCreate,
    EmployeeUpdate,
)
from .mapping import map_to, map_many

__all__ = [
    "PublicationBaseDTO",
    "EmployeeDTO",
    "EmployeeCreate",
    "EmployeeUpdate",
    "map_to",
    "map_many",
]
