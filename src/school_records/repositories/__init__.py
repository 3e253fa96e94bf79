"""
Repository layer.

Usage:
    from school_records.repositories import StudentRepository, TeacherRepository, CourseRepository
"""

from .base_repository import BaseRepository
from .course_repository import CourseRepository
from .interfaces import Repository
from .student_repository import StudentRepository
from .teacher_repository import TeacherRepository

__all__ = [
    "BaseRepository",
    "Repository",
    "StudentRepository",
    "TeacherRepository",
    "CourseRepository",
]
