"""
Pre-write validation helpers used by `GenericRepository.create()` / `update_by_id()`.

They inspect the mapped class so the repository can reject bad input with a
precise app-level error before the database raises a less specific one.
"""

from typing import Iterable

from sqlalchemy import inspect as sa_inspect, select, and_, UniqueConstraint


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Return the keys of `kwargs` that are not mapped attributes of `model`
    (columns and relationships, including those inherited from a polymorphic base).
    """
    allowed = {attr.key for attr in sa_inspect(model).attrs}
    return [k for k in kwargs if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL, have no client/server default and are not auto-increment PKs.
    """
    cols = []
    for col in sa_inspect(model).columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.primary_key and col.autoincrement in (True, "auto")
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.key)
    return cols


def get_unique_column_sets(model) -> list[Iterable[str]]:
    """
    Return every set of columns that must be unique:
      - Column(unique=True)
      - UniqueConstraint on the table
      - Index(..., unique=True)
    """
    table = model.__table__
    unique_sets: list[list[str]] = [[col.name] for col in table.columns if col.unique]

    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            unique_sets.append([c.name for c in constraint.columns])

    for idx in table.indexes:
        if idx.unique:
            unique_sets.append([c.name for c in idx.columns])

    return unique_sets


async def find_unique_conflicts(db, model, kwargs: dict) -> set[str]:
    """
    Query for existing rows that would violate a unique constraint if `kwargs` were inserted.
    Sets whose values are not all provided (or are None) are skipped.
    """
    conflicts: set[str] = set()

    for cols in get_unique_column_sets(model):
        if not all(kwargs.get(c) is not None for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        res = await db.execute(select(model).where(and_(*conditions)).limit(1))
        if res.scalars().first() is not None:
            conflicts.update(cols)

    return conflicts
