"""
Storage capability the services depend on.

Every repository adapter keeps this contract (BaseRepository and its
subclasses do), so a different adapter or a fake can be passed to a service
instead of the SQLAlchemy one:

  - reads that find nothing return None / [] / 0, they never raise;
  - `delete` returns the affected row count;
  - storage failures are raised as PersistenceError with a vendor code.
"""

from typing import Any, Protocol, Sequence, TypeVar, runtime_checkable
from uuid import UUID

ModelT = TypeVar("ModelT")


@runtime_checkable
class Repository(Protocol[ModelT]):
    async def create(self, **fields: Any) -> ModelT: ...

    async def save(self, entity: ModelT) -> ModelT: ...

    def merge(self, entity: ModelT, data: dict[str, Any]) -> ModelT: ...

    async def get_by_id(self, entity_id: UUID) -> ModelT | None: ...

    async def get_by_id_or_raise(self, entity_id: UUID) -> ModelT: ...

    async def find_many(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> Sequence[ModelT]: ...

    async def update(self, entity_id: UUID, **fields: Any) -> ModelT | None: ...

    async def delete(self, entity_id: UUID) -> int: ...

    async def count(self, **filters: Any) -> int: ...

    async def exists(self, entity_id: UUID) -> bool: ...
