"""
Shared plumbing for the domain services.

Services own the unit of work: repositories only flush, the service commits
once the whole operation succeeded. Failures are raised, never returned:
domain problems as DomainHttpError subclasses, storage problems as the
PersistenceError the repository produced.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging.adapter import get_trace_logger
from ..exceptions.base import NotFoundError
from ..exceptions.mapper import db_error_handler
from ..repositories.interfaces import Repository


class BaseService:
    resource_name: str = "Record"
    repository: Repository

    def __init__(self, db: AsyncSession):
        self.db = db
        self.log = get_trace_logger(f"{__package__}.{self.__class__.__name__}")

    async def commit(self) -> None:
        async with db_error_handler(self.db, self.resource_name):
            await self.db.commit()

    def not_found(self, entity_id: Any, resource: str | None = None) -> NotFoundError:
        resource = resource or self.resource_name
        return NotFoundError.for_resource(resource, entity_id)
