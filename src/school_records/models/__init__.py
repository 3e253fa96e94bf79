r"""
Centralized access to all database models.

Importing this package registers every table with `Base.metadata`, so
`Base.metadata.create_all` (database/session.py, test fixtures) sees the full schema:

    from school_records.models import Student, Teacher, Course
"""

from .associations import course_students
from .course import Course
from .student import Student
from .teacher import Teacher

__all__ = [
    "Student",
    "Teacher",
    "Course",
    "course_students",
]
