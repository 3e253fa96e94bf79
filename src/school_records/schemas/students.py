from datetime import datetime
from uuid import UUID

from pydantic import Field

from .common import CamelModel, UpdateModel


class StudentCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    age: int = Field(ge=6, le=120)
    grade: int = Field(ge=0, le=100)
    is_active: bool = True


class StudentUpdate(UpdateModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    age: int | None = Field(default=None, ge=6, le=120)
    grade: int | None = Field(default=None, ge=0, le=100)
    is_active: bool | None = None


class StudentRead(CamelModel):
    id: UUID
    name: str
    age: int
    grade: int
    is_active: bool
    created_at: datetime


class AverageGradeRead(CamelModel):
    average: float
    count: int
