import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database.base import Base
from .student import utcnow

if TYPE_CHECKING:
    from .course import Course


class Teacher(Base):
    """
    SQLAlchemy model for Teacher.

    `email` is unique: a duplicate insert is reported as unique_violation (23505)
    on `email`, which clients see as 409 Conflict.
    """
    __tablename__ = "teachers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # --- Relationships ---

    # One-to-Many: deleting a teacher deletes their courses
    courses: Mapped[list["Course"]] = relationship(
        "Course",
        back_populates="teacher",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id!r}, full_name={self.full_name!r}, email={self.email!r})>"
