"""
Repository-level pre-checks.

Run before a write so the common client mistakes (unknown field, missing
required column, duplicate unique value) are reported with precise field names
and the same vendor codes the database would have produced.
"""

from typing import Any, Iterable

from sqlalchemy import UniqueConstraint, and_
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Return the keys of `kwargs` that are not mapped attributes of `model` (a model class).
    """
    mapper = sa_inspect(model)
    allowed = {attr.key for attr in mapper.attrs}
    return [k for k in kwargs.keys() if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL, have no client/server default and are not auto PKs.
    """
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.autoincrement is True and col.primary_key
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.name)
    return cols


def get_unique_column_sets(model) -> list[list[str]]:
    """
    Unique column sets of `model`, one list per constraint, without duplicates.
    Covers Column(unique=True), UniqueConstraint and Index(..., unique=True).
    """
    unique_sets: list[list[str]] = []

    def _add(cols: Iterable[str]) -> None:
        cols = list(cols)
        if cols and cols not in unique_sets:
            unique_sets.append(cols)

    table = model.__table__
    for col in table.columns:
        if col.unique:
            _add([col.name])
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            _add(c.name for c in constraint.columns)
    for idx in table.indexes:
        if idx.unique:
            _add(c.name for c in idx.columns)

    return unique_sets


async def find_unique_conflicts(db: AsyncSession, model, kwargs: dict[str, Any], exclude_id: Any = None) -> list[str]:
    """
    Query for existing rows that would violate a unique constraint.

    Returns the conflicting column names in declaration order (best-effort: a
    concurrent insert can still win the race and is then caught by the database).
    `exclude_id` skips the row being updated.
    """
    conflicts: list[str] = []

    for cols in get_unique_column_sets(model):
        if not all(c in kwargs for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        if exclude_id is not None:
            conditions.append(model.id != exclude_id)
        q = select(model.id).where(and_(*conditions)).limit(1)

        res = await db.execute(q)
        if res.scalar_one_or_none() is not None:
            conflicts.extend(c for c in cols if c not in conflicts)

    return conflicts
