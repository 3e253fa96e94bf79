"""
Course repository: enrollment management on the course_students link table.
"""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.mapper import db_error_handler
from ..models.associations import course_students
from ..models.course import Course
from ..models.student import Student
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CourseRepository(BaseRepository[Course]):
    """
    Repository for Course entity operations.

    Enrollment rows are written with Core statements against the link table, so
    no relationship collection has to be loaded (lazy loads are not available
    on an AsyncSession).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Course, db)

    async def find_by_code(self, code: str) -> Course | None:
        return await self.find_by_field("code", code)

    async def is_enrolled(self, course_id, student_id) -> bool:
        query = select(course_students.c.course_id).where(
            course_students.c.course_id == course_id,
            course_students.c.student_id == student_id,
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return result.first() is not None

    async def add_student(self, course_id, student_id) -> bool:
        """
        Enroll a student. Returns False when the student was already enrolled
        (enrolling twice is not an error).
        """
        if await self.is_enrolled(course_id, student_id):
            return False
        async with db_error_handler(self.db, self.model_name):
            await self.db.execute(insert(course_students).values(course_id=course_id, student_id=student_id))
            await self.db.flush()
        logger.debug("repo.enroll", extra={"course_id": str(course_id), "student_id": str(student_id)})
        return True

    async def remove_student(self, course_id, student_id) -> int:
        """Remove an enrollment; returns the affected row count."""
        stmt = delete(course_students).where(
            course_students.c.course_id == course_id,
            course_students.c.student_id == student_id,
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def find_students(self, course_id) -> list[Student]:
        """Students enrolled in the course, ordered by name."""
        query = (
            select(Student)
            .join(course_students, course_students.c.student_id == Student.id)
            .where(course_students.c.course_id == course_id)
            .order_by(Student.name)
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())
