"""
Entity -> DTO mapping.

DTO classes declare `from_attributes=True`, so pydantic reads the matching
attributes straight off the ORM instance. Only attributes the DTO declares are
touched, which keeps unloaded relationships from triggering lazy loads.
"""

from typing import Iterable, TypeVar

from pydantic import BaseModel

DTOType = TypeVar("DTOType", bound=BaseModel)


def map_to(dto_cls: type[DTOType], entity) -> DTOType:
    return dto_cls.model_validate(entity, from_attributes=True)


def map_many(dto_cls: type[DTOType], entities: Iterable) -> list[DTOType]:
    return [map_to(dto_cls, entity) for entity in entities]
