from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.course import Course
from ..models.teacher import Teacher
from ..repositories.teacher_repository import TeacherRepository
from ..schemas.teachers import TeacherCreate, TeacherUpdate
from .base import BaseService


class TeachersService(BaseService):
    resource_name = "Teacher"

    def __init__(self, db: AsyncSession, repository: TeacherRepository | None = None):
        super().__init__(db)
        self.repository = repository or TeacherRepository(db)

    async def create(self, data: TeacherCreate) -> Teacher:
        # a duplicate email surfaces as PersistenceError(23505, target=["email"]) -> 409
        teacher = await self.repository.create(**data.model_dump())
        await self.commit()
        self.log.info(f"Teacher created: {teacher.id}")
        return teacher

    async def find_all(self) -> list[Teacher]:
        return await self.repository.find_many(order_by="created_at")

    async def find_by_id(self, teacher_id: UUID) -> Teacher:
        teacher = await self.repository.get_by_id(teacher_id)
        if teacher is None:
            raise self.not_found(teacher_id)
        return teacher

    async def update(self, teacher_id: UUID, data: TeacherUpdate) -> Teacher:
        teacher = await self.repository.update(teacher_id, **data.changes())
        if teacher is None:
            raise self.not_found(teacher_id)
        await self.commit()
        return teacher

    async def remove(self, teacher_id: UUID) -> None:
        # courses go with the teacher (ON DELETE CASCADE)
        affected = await self.repository.delete(teacher_id)
        if affected == 0:
            raise self.not_found(teacher_id)
        await self.commit()
        self.log.info(f"Teacher removed: {teacher_id}")

    async def courses(self, teacher_id: UUID) -> list[Course]:
        if not await self.repository.exists(teacher_id):
            raise self.not_found(teacher_id)
        return await self.repository.find_courses(teacher_id)
