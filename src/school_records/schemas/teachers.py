import re
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from .common import CamelModel, UpdateModel

# deliberately loose: one "@", a dot in the domain, no whitespace
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("email must be an email")
    return value


class TeacherCreate(CamelModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class TeacherUpdate(UpdateModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return normalize_email(v)


class TeacherRead(CamelModel):
    id: UUID
    full_name: str
    email: str
    created_at: datetime
