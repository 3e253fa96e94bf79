from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.course import Course
from ..models.student import Student
from ..repositories.student_repository import StudentRepository
from ..schemas.students import AverageGradeRead, StudentCreate, StudentUpdate
from .base import BaseService

DEFAULT_PASSING_GRADE = 50


class StudentsService(BaseService):
    resource_name = "Student"

    def __init__(self, db: AsyncSession, repository: StudentRepository | None = None):
        super().__init__(db)
        self.repository = repository or StudentRepository(db)

    async def create(self, data: StudentCreate) -> Student:
        student = await self.repository.create(**data.model_dump())
        await self.commit()
        self.log.info(f"Student created: {student.id}")
        return student

    async def find_all(self) -> list[Student]:
        return await self.repository.find_many(order_by="created_at")

    async def find_by_id(self, student_id: UUID) -> Student:
        student = await self.repository.get_by_id(student_id)
        if student is None:
            raise self.not_found(student_id)
        return student

    async def update(self, student_id: UUID, data: StudentUpdate) -> Student:
        student = await self.repository.update(student_id, **data.changes())
        if student is None:
            raise self.not_found(student_id)
        await self.commit()
        return student

    async def remove(self, student_id: UUID) -> None:
        affected = await self.repository.delete(student_id)
        if affected == 0:
            raise self.not_found(student_id)
        await self.commit()
        self.log.info(f"Student removed: {student_id}")

    async def passed(self, min_grade: int = DEFAULT_PASSING_GRADE) -> list[Student]:
        return await self.repository.find_with_grade_at_least(min_grade)

    async def average_grade(self) -> AverageGradeRead:
        average = await self.repository.get_average_grade()
        count = await self.repository.count()
        return AverageGradeRead(average=round(average, 2), count=count)

    async def courses(self, student_id: UUID) -> list[Course]:
        if not await self.repository.exists(student_id):
            raise self.not_found(student_id)
        return await self.repository.find_courses(student_id)
