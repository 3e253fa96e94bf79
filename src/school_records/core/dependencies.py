"""
FastAPI dependencies: one AsyncSession per request and the services built on it.

The session factory lives on `app.state` (set by create_app), so every app
instance, including the ones tests build, uses its own engine.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.courses import CoursesService
from ..services.students import StudentsService
from ..services.teachers import TeachersService


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request. Services commit their own writes; anything still
    pending when the request fails is rolled back, and the session is always closed.
    """
    async with request.app.state.sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def get_students_service(db: AsyncSession = Depends(get_db_session)) -> StudentsService:
    return StudentsService(db)


def get_teachers_service(db: AsyncSession = Depends(get_db_session)) -> TeachersService:
    return TeachersService(db)


def get_courses_service(db: AsyncSession = Depends(get_db_session)) -> CoursesService:
    return CoursesService(db)
