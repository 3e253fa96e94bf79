from sqlalchemy import Column, ForeignKey, Table, Uuid

from ..database.base import Base

# Many-to-Many link between courses and students; removing either side removes the link.
course_students = Table(
    "course_students",
    Base.metadata,
    Column("course_id", Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), primary_key=True, index=True),
)
