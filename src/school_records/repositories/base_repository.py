"""
Base repository class providing common database operations.

This class serves as a reusable foundation for repositories that interact with
the database using SQLAlchemy's async sessions. It implements the storage
capability the services consume (see `interfaces.py`):

    create / save / merge / update      writes (flush only, the service commits)
    get_by_id / find_many / count       reads; "nothing found" is None / [] / 0, never an error
    delete                              affected row count (0 when the id does not exist)
    average / find_at_least             aggregate and threshold queries

Failures leave this layer only as `PersistenceError` carrying a SQLSTATE vendor
code: either from a pre-check (unknown field 42703, missing required column
23502, duplicate unique value 23505) or mapped from the driver by
`db_error_handler`.
"""

import logging
import time
from typing import Any, Generic, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.base import Base
from ..exceptions.base import PersistenceError
from ..exceptions.mapper import db_error_handler
from ..exceptions.taxonomy import SqlState
from ..validators.exception_validators import (
    find_unique_conflicts,
    find_unknown_model_kwargs,
    get_required_columns,
)

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: the model class itself (Student, not Student()); used to build queries.
            db: the request's AsyncSession (FastAPI dependency).
        """
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    # =================================================================================================================
    # Pre-checks
    # =================================================================================================================

    def _check_known_fields(self, fields: dict[str, Any] | Sequence[str]) -> None:
        keys = dict.fromkeys(fields) if not isinstance(fields, dict) else fields
        unknown = find_unknown_model_kwargs(self.model, keys)
        if unknown:
            logger.debug("repo.invalid_fields", extra={"model": self.model_name, "invalid_fields": sorted(unknown)})
            raise PersistenceError(
                f"Unknown field(s) for {self.model_name}: {', '.join(unknown)}",
                vendor_code=SqlState.UNDEFINED_COLUMN.value,
                meta={"target": unknown},
            )

    async def _check_unique(self, fields: dict[str, Any], exclude_id: Any = None) -> None:
        conflicts = await find_unique_conflicts(self.db, self.model, fields, exclude_id=exclude_id)
        if conflicts:
            # expected client error: no stack trace
            logger.debug("repo.duplicate_precheck", extra={"model": self.model_name, "conflict_fields": conflicts})
            raise PersistenceError(
                f"{self.model_name} already exists for field(s): {', '.join(conflicts)}",
                vendor_code=SqlState.UNIQUE_VIOLATION.value,
                meta={"target": conflicts},
            )

    # =================================================================================================================
    # Create / save
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Validate, insert and return the new entity (with generated id and created_at).

        Logs keys only, never values.
        """
        logger.debug(
            "repo.create.start",
            extra={"model": self.model_name, "provided_keys": sorted(kwargs.keys())},
        )

        # 1) unknown fields
        self._check_known_fields(kwargs)

        # 2) required columns (NOT NULL without default), all missing ones at once
        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.debug("repo.create.missing_required", extra={"model": self.model_name, "missing_fields": missing})
            raise PersistenceError(
                f"Missing required field(s): {', '.join(missing)} for {self.model_name}",
                vendor_code=SqlState.NOT_NULL_VIOLATION.value,
                meta={"target": missing},
            )

        # 3) unique conflicts (best-effort; the database is the final judge)
        await self._check_unique(kwargs)

        # 4) DB write, driver errors mapped to PersistenceError
        start = time.perf_counter()
        async with db_error_handler(self.db, self.model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model_name,
                "id": str(getattr(entity, "id", "")),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    async def save(self, entity: ModelType) -> ModelType:
        """Persist a new or modified entity and return it refreshed."""
        async with db_error_handler(self.db, self.model_name):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)
        return entity

    def merge(self, entity: ModelType, data: dict[str, Any]) -> ModelType:
        """
        Copy `data` onto `entity` in memory (no SQL). Unknown keys are rejected.
        """
        self._check_known_fields(data)
        for key, value in data.items():
            setattr(entity, key, value)
        return entity

    # =================================================================================================================
    # Read operations
    # =================================================================================================================

    async def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """The entity with this primary key, or None."""
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(self.model).where(self.model.id == entity_id))
            entity = result.scalar_one_or_none()
        logger.debug("repo.get_by_id", extra={"model": self.model_name, "id": str(entity_id), "found": entity is not None})
        return entity

    async def get_by_id_or_raise(self, entity_id: UUID) -> ModelType:
        """
        Like `get_by_id` but a missing row is a failure: PersistenceError with
        no_data_found (P0002), which clients see as 404 "Record not found".
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise PersistenceError(
                f"{self.model_name} with ID {entity_id} not found",
                vendor_code=SqlState.NO_DATA_FOUND.value,
                meta={"model": self.model_name},
            )
        return entity

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        self._check_known_fields([field])
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(self.model).where(getattr(self.model, field) == value).limit(1))
            return result.scalars().first()

    async def find_many(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[ModelType]:
        """
        Entities matching all equality `filters`, ordered by `order_by`
        (default: created_at ascending when the model has it).
        """
        filters = filters or {}
        self._check_known_fields(list(filters) + ([order_by] if order_by else []))

        query = select(self.model)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)

        if order_by:
            column = getattr(self.model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        elif hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc() if descending else self.model.created_at.asc())

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            entities = list(result.scalars().all())
        logger.debug("repo.find_many", extra={"model": self.model_name, "count": len(entities)})
        return entities

    async def exists(self, entity_id: UUID) -> bool:
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(self.model.id).where(self.model.id == entity_id))
            return result.scalar_one_or_none() is not None

    async def count(self, **filters: Any) -> int:
        """Number of rows matching the equality filters (all rows without filters)."""
        self._check_known_fields(filters)
        query = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return int(result.scalar() or 0)

    # =================================================================================================================
    # Aggregates
    # =================================================================================================================

    async def average(self, field: str) -> float:
        """Average of a numeric column; 0.0 for an empty table."""
        self._check_known_fields([field])
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(func.avg(getattr(self.model, field))))
            value = result.scalar()
        return float(value) if value is not None else 0.0

    async def find_at_least(self, field: str, threshold: Any) -> list[ModelType]:
        """Rows whose `field` is >= `threshold`, highest first."""
        self._check_known_fields([field])
        column = getattr(self.model, field)
        query = select(self.model).where(column >= threshold).order_by(column.desc())
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.asc())
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    # =================================================================================================================
    # Update / delete
    # =================================================================================================================

    async def update(self, entity_id: UUID, **kwargs) -> ModelType | None:
        """
        Apply `kwargs` to the entity with this id. Returns the updated entity, or
        None when it does not exist. Unique columns are pre-checked against other rows.
        """
        self._check_known_fields(kwargs)
        entity = await self.get_by_id(entity_id)
        if entity is None:
            logger.debug("repo.update.not_found", extra={"model": self.model_name, "id": str(entity_id)})
            return None
        if not kwargs:
            return entity

        await self._check_unique(kwargs, exclude_id=entity_id)
        self.merge(entity, kwargs)
        return await self.save(entity)

    async def delete(self, entity_id: UUID) -> int:
        """
        Delete by id and return the affected row count (0 when nothing matched).
        Turning 0 into a not-found failure is the service's decision.
        """
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(delete(self.model).where(self.model.id == entity_id))
        affected = result.rowcount or 0
        logger.debug("repo.delete", extra={"model": self.model_name, "id": str(entity_id), "affected": affected})
        return affected


# BaseRepository Method Summary
# | Method                              | Returns                   | Nothing found               |
# | ----------------------------------- | ------------------------- | --------------------------- |
# | `create(**kwargs)`                  | created entity            | -                           |
# | `save(entity)` / `merge(e, data)`   | the entity                | -                           |
# | `get_by_id(id)`                     | entity or None            | None                        |
# | `get_by_id_or_raise(id)`            | entity                    | PersistenceError(P0002)     |
# | `find_many(filters, order_by, ...)` | list                      | []                          |
# | `update(id, **kwargs)`              | updated entity or None    | None                        |
# | `delete(id)`                        | affected rows             | 0                           |
# | `count(**filters)`                  | int                       | 0                           |
# | `average(field)`                    | float                     | 0.0                         |
# | `find_at_least(field, threshold)`   | list                      | []                          |
