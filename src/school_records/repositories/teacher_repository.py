"""
Teacher repository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.mapper import db_error_handler
from ..models.course import Course
from ..models.teacher import Teacher
from .base_repository import BaseRepository


class TeacherRepository(BaseRepository[Teacher]):
    def __init__(self, db: AsyncSession):
        super().__init__(Teacher, db)

    async def find_by_email(self, email: str) -> Teacher | None:
        # emails are stored lowercased (see schemas/teachers.py)
        return await self.find_by_field("email", email.strip().lower())

    async def find_courses(self, teacher_id) -> list[Course]:
        """Courses taught by the teacher, ordered by code."""
        query = select(Course).where(Course.teacher_id == teacher_id).order_by(Course.code)
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())
