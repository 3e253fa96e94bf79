from datetime import datetime
from uuid import UUID

from pydantic import Field

from .common import CamelModel, UpdateModel


class CourseCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=50)
    teacher_id: UUID


class CourseUpdate(UpdateModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    teacher_id: UUID | None = None


class CourseRead(CamelModel):
    id: UUID
    title: str
    code: str
    teacher_id: UUID
    created_at: datetime
