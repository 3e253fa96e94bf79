import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database.base import Base
from .associations import course_students

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .course import Course


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(Base):
    """
    SQLAlchemy model for Student.

    A student has a grade (0-100) used by the "passed" and "average grade" queries,
    and is enrolled in any number of courses.
    """
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    age: Mapped[int] = mapped_column(Integer, nullable=False)

    # Indexed: filtered by threshold and averaged
    grade: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Set in Python so SQLite and Postgres return the same timezone-aware value
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # --- Relationships ---

    # Many-to-Many: a student attends many courses
    courses: Mapped[list["Course"]] = relationship(
        "Course",
        secondary=course_students,
        back_populates="students",
        lazy="select",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id!r}, name={self.name!r}, grade={self.grade!r})>"
