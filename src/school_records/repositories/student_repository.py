"""
Student repository: grade queries and course lookups on top of BaseRepository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.mapper import db_error_handler
from ..models.associations import course_students
from ..models.course import Course
from ..models.student import Student
from .base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """
    Repository for Student entity operations.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)

    async def find_with_grade_at_least(self, min_grade: int) -> list[Student]:
        """Students with grade >= min_grade, best first."""
        return await self.find_at_least("grade", min_grade)

    async def get_average_grade(self) -> float:
        """Average grade of all students; 0.0 when there are none."""
        return await self.average("grade")

    async def find_courses(self, student_id) -> list[Course]:
        """Courses the student is enrolled in, ordered by code."""
        query = (
            select(Course)
            .join(course_students, course_students.c.course_id == Course.id)
            .where(course_students.c.student_id == student_id)
            .order_by(Course.code)
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())
