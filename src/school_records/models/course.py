import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database.base import Base
from .associations import course_students
from .student import utcnow

if TYPE_CHECKING:
    from .student import Student
    from .teacher import Teacher


class Course(Base):
    """
    SQLAlchemy model for a Course.

    Taught by exactly one teacher; `code` is unique (e.g. "MATH-101").
    """
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    code: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False
    )

    teacher_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # --- Relationships ---

    # Many-to-One: each course belongs to a single teacher
    teacher: Mapped["Teacher"] = relationship(
        "Teacher",
        back_populates="courses",
        lazy="select",
    )

    # Many-to-Many: enrolled students
    students: Mapped[list["Student"]] = relationship(
        "Student",
        secondary=course_students,
        back_populates="courses",
        lazy="select",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, code={self.code!r}, teacher_id={self.teacher_id!r})>"
