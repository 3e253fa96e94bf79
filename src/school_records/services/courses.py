from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.base import NotFoundError
from ..models.course import Course
from ..models.student import Student
from ..repositories.course_repository import CourseRepository
from ..repositories.student_repository import StudentRepository
from ..repositories.teacher_repository import TeacherRepository
from ..schemas.courses import CourseCreate, CourseUpdate
from .base import BaseService


class CoursesService(BaseService):
    """
    Courses and enrollments.

    The teacher of a course is checked up front: a dangling teacher id would
    otherwise reach the database as a foreign key violation, which is not a
    client-facing failure (500).
    """

    resource_name = "Course"

    def __init__(
        self,
        db: AsyncSession,
        repository: CourseRepository | None = None,
        teachers: TeacherRepository | None = None,
        students: StudentRepository | None = None,
    ):
        super().__init__(db)
        self.repository = repository or CourseRepository(db)
        self.teachers = teachers or TeacherRepository(db)
        self.students = students or StudentRepository(db)

    async def _ensure_teacher(self, teacher_id: UUID) -> None:
        if not await self.teachers.exists(teacher_id):
            raise self.not_found(teacher_id, resource="Teacher")

    async def create(self, data: CourseCreate) -> Course:
        await self._ensure_teacher(data.teacher_id)
        course = await self.repository.create(**data.model_dump())
        await self.commit()
        self.log.info(f"Course created: {course.id} ({course.code})")
        return course

    async def find_all(self) -> list[Course]:
        return await self.repository.find_many(order_by="created_at")

    async def find_by_id(self, course_id: UUID) -> Course:
        course = await self.repository.get_by_id(course_id)
        if course is None:
            raise self.not_found(course_id)
        return course

    async def update(self, course_id: UUID, data: CourseUpdate) -> Course:
        changes = data.changes()
        if "teacher_id" in changes:
            await self._ensure_teacher(changes["teacher_id"])
        course = await self.repository.update(course_id, **changes)
        if course is None:
            raise self.not_found(course_id)
        await self.commit()
        return course

    async def remove(self, course_id: UUID) -> None:
        affected = await self.repository.delete(course_id)
        if affected == 0:
            raise self.not_found(course_id)
        await self.commit()
        self.log.info(f"Course removed: {course_id}")

    async def enroll(self, course_id: UUID, student_id: UUID) -> list[Student]:
        """
        Enroll a student and return the course's students. An unknown student id is
        reported by the repository as no_data_found (404 "Record not found").
        """
        await self.find_by_id(course_id)
        await self.students.get_by_id_or_raise(student_id)
        if await self.repository.add_student(course_id, student_id):
            await self.commit()
            self.log.info(f"Student {student_id} enrolled in course {course_id}")
        return await self.repository.find_students(course_id)

    async def unenroll(self, course_id: UUID, student_id: UUID) -> None:
        await self.find_by_id(course_id)
        affected = await self.repository.remove_student(course_id, student_id)
        if affected == 0:
            raise NotFoundError(f"Student {student_id} is not enrolled in course {course_id}")
        await self.commit()

    async def students_of(self, course_id: UUID) -> list[Student]:
        await self.find_by_id(course_id)
        return await self.repository.find_students(course_id)
