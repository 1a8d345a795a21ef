"""
Generic repository providing the data-access operations shared by every entity.

`GenericRepository[ModelType]` wraps SQLAlchemy's async session for one mapped
class at a time and offers:

  - `get()` / `get_of_type()`: filtered, ordered queries with eager loading of
    related entities,
  - `get_by_id()`: primary-key lookup that consults the identity map first,
  - `insert()` / `create()`: add new rows,
  - `update()` / `update_by_id()`: persist changes to existing rows,
  - `delete()`: remove by key or by instance.

Repositories only `flush()`; they never `commit()`. The HTTP layer commits
once per request, after all repository calls for that request succeeded.
"""
from publication_assistant.exceptions.base import (
    RepositoryError,
    DuplicateError,
    NotFoundError,
    InvalidFieldError
)

from publication_assistant.exceptions.mapper import db_error_handler
from publication_assistant.validators.exception_validators import (
    find_unknown_model_kwargs,
    get_required_columns,
    find_unique_conflicts,
)

import time
from typing import TypeVar, Generic, Type, Any, Callable, Iterable, Sequence, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, Select, inspect as sa_inspect
from sqlalchemy.orm import selectinload, QueryableAttribute
from sqlalchemy.sql import ColumnElement
import logging

from publication_assistant.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)
SubType = TypeVar("SubType", bound=Base)

# A WHERE criterion (`Employee.id == 5`) or several of them (AND-ed together)
FilterType = Union[ColumnElement[bool], Sequence[ColumnElement[bool]], None]

# ORDER BY: a column expression, a field name, a sequence of those, or a
# callable that receives the statement and returns it ordered.
OrderByType = Union[
    ColumnElement[Any],
    QueryableAttribute[Any],
    str,
    Sequence[Union[ColumnElement[Any], QueryableAttribute[Any], str]],
    Callable[[Select], Select],
    None,
]

logger = logging.getLogger(__name__)


class GenericRepository(Generic[ModelType]):
    """
    Generic repository parameterized by the SQLAlchemy model it manages.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: the mapped class itself (e.g. `Employee`, not `Employee()`); used to
                build statements such as `select(self.model)`.
            db: the async session of the current request (injected by FastAPI).
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Query building helpers
    # =================================================================================================================

    @staticmethod
    def _apply_filter(query: Select, filter: FilterType) -> Select:
        if filter is None:
            return query
        if isinstance(filter, (list, tuple)):
            return query.where(*filter)
        return query.where(filter)

    def _apply_order_by(self, query: Select, target: type, order_by: OrderByType) -> Select:
        if order_by is None:
            return query

        # Callable form: mirrors "give me the query, I'll hand it back sorted"
        if callable(order_by) and not isinstance(order_by, (ColumnElement, QueryableAttribute)):
            return order_by(query)

        items = order_by if isinstance(order_by, (list, tuple)) else [order_by]
        clauses = []
        for item in items:
            if isinstance(item, str):
                # "-title" sorts descending
                descending = item.startswith("-")
                name = item.lstrip("-")
                if not hasattr(target, name):
                    logger.warning(
                        f"Ignored invalid 'order_by' field: '{name}' does not exist on {target.__name__}")
                    continue
                column = getattr(target, name)
                clauses.append(column.desc() if descending else column)
            else:
                clauses.append(item)

        if clauses:
            logger.debug(f"Ordering {target.__name__} by {len(clauses)} clause(s)")
            query = query.order_by(*clauses)
        return query

    @staticmethod
    def _apply_include(query: Select, include: Iterable[Any]) -> Select:
        # selectinload avoids lazy loads, which are not allowed on an AsyncSession
        for relationship_attr in include:
            query = query.options(selectinload(relationship_attr))
        return query

    # =================================================================================================================
    # Read Operations (Multiple Entities)
    # =================================================================================================================

    async def get(
        self,
        filter: FilterType = None,
        order_by: OrderByType = None,
        include: Iterable[Any] = (),
    ) -> list[ModelType]:
        """
        Return entities matching an optional filter, with optional ordering and eager loading.

        Args:
            filter: WHERE criterion, e.g. `Employee.last_name == "Nowak"`, or a list of them.
            order_by: column expression(s) (`PublicationBase.year.desc()`), field name(s)
                (`"title"`, `"-year"`) or a callable `lambda q: q.order_by(...)`.
            include: relationship attributes to load together with the entities,
                e.g. `[Employee.publications]`.

        Returns:
            A list of entities (empty if none match).

        Raises:
            RepositoryError: If the query fails.
        """
        return await self._select(self.model, filter, order_by, include)

    async def get_of_type(
        self,
        subtype: Type[SubType],
        filter: FilterType = None,
        order_by: OrderByType = None,
        include: Iterable[Any] = (),
    ) -> list[SubType]:
        """
        Same as `get()` but restricted to a polymorphic subtype of the repository's model.

        Example:
            articles = await publication_repo.get_of_type(Article, filter=Article.year >= 2020)

        Raises:
            InvalidFieldError: If `subtype` is not `self.model` or one of its subclasses.
            RepositoryError: If the query fails.
        """
        if not (isinstance(subtype, type) and issubclass(subtype, self.model)):
            logger.info(
                "repo.get_of_type.invalid_subtype",
                extra={
                    "model": self.model.__name__,
                    "operation": "get_of_type",
                    "subtype": getattr(subtype, "__name__", repr(subtype)),
                },
            )
            raise InvalidFieldError(
                f"{getattr(subtype, '__name__', subtype)} is not a subtype of {self.model.__name__}")

        return await self._select(subtype, filter, order_by, include)

    async def _select(self, target: type, filter: FilterType, order_by: OrderByType, include: Iterable[Any]) -> list:
        try:
            query = select(target)
            query = self._apply_filter(query, filter)
            query = self._apply_include(query, include)
            query = self._apply_order_by(query, target, order_by)

            result = await self.db.execute(query)
            entities = list(result.scalars().all())

            logger.debug(f"Retrieved {len(entities)} {target.__name__} entities")
            return entities

        except Exception as e:
            logger.error(f"Error retrieving {target.__name__} entities: {e}")
            raise RepositoryError(
                f"Failed to retrieve {target.__name__} entities") from e

    # =================================================================================================================
    # Read Operations (Single Entity)
    # =================================================================================================================

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """
        Find an entity by primary key.

        `AsyncSession.get()` returns the instance already tracked by the session
        without a round-trip when possible, and queries the database otherwise.

        Returns:
            The entity if found, otherwise None.

        Raises:
            RepositoryError: If an error occurs during retrieval.
        """
        try:
            entity = await self.db.get(self.model, entity_id)
            logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id} (found={entity is not None})")
            return entity

        except Exception as e:
            logger.error(
                f"Error retrieving {self.model.__name__} by ID {entity_id}: {e}")
            raise RepositoryError(
                f"Failed to retrieve {self.model.__name__}") from e

    async def get_by_id_or_raise(self, entity_id: Any) -> ModelType:
        """
        Find an entity by primary key or raise NotFoundError.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(
                f"{self.model.__name__} with ID {entity_id} not found")
        return entity

    # =================================================================================================================
    # Create Operations
    # =================================================================================================================

    async def insert(self, entity: ModelType) -> ModelType:
        """
        Add a new entity to the session and flush so database defaults and the key are populated.

        Raises:
            InvalidFieldError: If `entity` is not an instance of the repository's model.
            DuplicateError / RepositoryError: Mapped from integrity errors.
        """
        if not isinstance(entity, self.model):
            raise InvalidFieldError(
                f"Cannot insert {type(entity).__name__} into {self.model.__name__} repository")

        start = time.perf_counter()

        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

            logger.info(
                "repo.insert.success",
                extra={
                    "model": self.model.__name__,
                    "operation": "insert",
                    "id": getattr(entity, "id", None),
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                },
            )
            return entity

    async def create(self, **kwargs) -> ModelType:
        """
        Validate field values and insert a new entity built from them.

        Logging:
        - DEBUG: start event with model name and provided keys (not values).
        - INFO: expected client errors (invalid fields, missing required, duplicate).
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model.__name__,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info(
                "repo.create.invalid_fields",
                extra={"model": self.model.__name__, "operation": "create", "invalid_fields": sorted(unknown)},
            )
            raise InvalidFieldError(f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}", fields=unknown)

        # NOT NULL columns count as missing when absent or explicitly None
        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": self.model.__name__, "operation": "create", "missing_fields": sorted(missing)},
            )
            raise RepositoryError(f"Missing required field(s): {', '.join(missing)} for {self.model.__name__}", fields=missing)

        # best-effort; the unique index still guards against races at flush time
        conflicts = await find_unique_conflicts(self.db, self.model, kwargs)
        if conflicts:
            logger.info(
                "repo.create.duplicate_precheck",
                extra={"model": self.model.__name__, "operation": "create", "conflict_fields": sorted(conflicts)},
            )
            raise DuplicateError(
                f"{self.model.__name__} already exists for field(s): {', '.join(sorted(conflicts))}",
                fields=sorted(conflicts),
            )

        return await self.insert(self.model(**kwargs))

    # =================================================================================================================
    # Update Operations
    # =================================================================================================================

    async def update(self, entity: ModelType) -> ModelType:
        """
        Persist the state of an entity, attaching it to the session first if it is detached.

        A detached instance (built by hand or loaded by another session) is merged:
        SQLAlchemy loads the row with the same key and copies the instance's state
        onto it, which marks every changed attribute for UPDATE.

        Returns:
            The persistent instance tracked by this session.

        Raises:
            NotFoundError: If the entity has no key or no row exists for it.
            DuplicateError / RepositoryError: Mapped from integrity errors.
        """
        state = sa_inspect(entity)
        entity_id = getattr(entity, "id", None)

        async with db_error_handler(self.db, self.model.__name__):
            if state.detached or state.transient:
                if entity_id is None or await self.db.get(self.model, entity_id) is None:
                    raise NotFoundError(
                        f"{self.model.__name__} with ID {entity_id} not found")
                entity = await self.db.merge(entity)

            await self.db.flush()
            await self.db.refresh(entity)

            logger.debug(f"Updated {self.model.__name__} with ID: {entity_id}")
            return entity

    async def update_by_id(self, entity_id: Any, **kwargs) -> ModelType | None:
        """
        Update selected fields of the entity with the given key.

        `None` and empty-string values are ignored so that partial payloads never
        blank out stored data.

        Returns:
            The updated entity, or None if no entity has that key.

        Raises:
            InvalidFieldError: If a field is not mapped on the model.
            DuplicateError / RepositoryError: Mapped from integrity errors.
        """
        update_data = {k: v for k, v in kwargs.items() if v is not None and v != ""}

        unknown = find_unknown_model_kwargs(self.model, update_data)
        if unknown:
            raise InvalidFieldError(f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}", fields=unknown)

        entity = await self.get_by_id(entity_id)
        if entity is None:
            logger.warning(
                f"{self.model.__name__} with ID {entity_id} not found for update")
            return None

        if not update_data:
            logger.warning(
                f"No valid data provided for updating {self.model.__name__}")
            return entity

        for field, value in update_data.items():
            setattr(entity, field, value)

        return await self.update(entity)

    # =================================================================================================================
    # Delete Operations
    # =================================================================================================================

    async def delete(self, entity_or_id: ModelType | Any) -> None:
        """
        Delete an entity given either the instance or its primary key.

        When a key is given the entity is looked up first; a detached instance is
        attached before removal. The DELETE is flushed, not committed.

        Raises:
            NotFoundError: If no entity exists for the given key, or the instance
                has no key or no row behind it.
            RepositoryError: For database errors.
        """
        if isinstance(entity_or_id, self.model):
            entity = entity_or_id
        else:
            entity = await self.get_by_id(entity_or_id)
            if entity is None:
                logger.warning(
                    f"{self.model.__name__} with ID {entity_or_id} not found for deletion")
                raise NotFoundError(
                    f"{self.model.__name__} with ID {entity_or_id} not found")

        entity_id = getattr(entity, "id", None)
        state = sa_inspect(entity)

        async with db_error_handler(self.db, self.model.__name__):
            if state.detached or state.transient:
                if entity_id is None or await self.db.get(self.model, entity_id) is None:
                    logger.warning(
                        f"{self.model.__name__} with ID {entity_id} not found for deletion")
                    raise NotFoundError(
                        f"{self.model.__name__} with ID {entity_id} not found")
                entity = await self.db.merge(entity)
            await self.db.delete(entity)
            await self.db.flush()

        logger.info(
            "repo.delete.success",
            extra={"model": self.model.__name__, "operation": "delete", "id": entity_id},
        )

    # =================================================================================================================
    # Existence / Count
    # =================================================================================================================

    async def exists(self, entity_id: Any) -> bool:
        """
        Check whether an entity exists, selecting only its key column.
        """
        try:
            result = await self.db.execute(
                select(self.model.id).where(self.model.id == entity_id))
            return result.scalar() is not None

        except Exception as e:
            logger.error(
                f"Error checking existence of {self.model.__name__} {entity_id}: {e}")
            raise RepositoryError(
                f"Failed to check {self.model.__name__} existence") from e

    async def count(self, **filters: Any) -> int:
        """
        Count entities, optionally filtered by equality on model fields
        (e.g. `count(year=2021)`). Unknown fields and None values are skipped.
        """
        try:
            query = select(func.count(self.model.id))
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)

            result = await self.db.execute(query)
            return result.scalar() or 0

        except Exception as e:
            logger.error(f"Error counting {self.model.__name__}: {e}")
            raise RepositoryError(
                f"Failed to count {self.model.__name__} entities") from e


# GenericRepository Method Summary
# | Method                                   | Returns                  | Notes                                              |
# | ---------------------------------------- | ------------------------ | -------------------------------------------------- |
# | `get(filter, order_by, include)`         | list of entities         | include -> selectinload per relationship           |
# | `get_of_type(subtype, ...)`              | list of subtype entities | subtype must inherit from the repository's model   |
# | `get_by_id(id)`                          | entity or None           | identity map first                                 |
# | `get_by_id_or_raise(id)`                 | entity                   | NotFoundError when missing                         |
# | `insert(entity)` / `create(**fields)`    | persisted entity         | flush + refresh, no commit                         |
# | `update(entity)` / `update_by_id(...)`   | persisted entity         | detached instances are merged                      |
# | `delete(entity_or_id)`                   | None                     | NotFoundError for unknown keys                     |
# | `exists(id)` / `count(**filters)`        | bool / int               |                                                    |
