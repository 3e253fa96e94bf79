"""
Core pytest configuration for the entire test suite.

This module provides only the essential database setup and core utilities
that are needed across ALL types of tests (repositories, services, APIs, logging).

Domain-specific fixtures are located in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/app_fixtures.py

and are imported at the bottom of this file so every test module can use them
without importing them itself.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Set the level for noisy third-party loggers at import time (before importing modules that
# might initialize them). This prevents log spam during pytest collection.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from school_records.config import Settings
from school_records.database.session import build_engine, build_sessionmaker, create_all

from .test_fixtures.settings_fixtures import make_settings

# ------------------------------------------------------------------------------------------------
# Test settings
# ------------------------------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(settings)

    # create all tables
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    One AsyncSession on a fresh in-memory database.

    Services under test may call `commit()`; isolation comes from the database
    being thrown away with the engine at the end of the test, not from a rollback.
    """
    maker = build_sessionmaker(async_engine)
    async with maker() as session:
        yield session
        await session.rollback()


# Repository / service test fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    student_repository,
    teacher_repository,
    course_repository,
    sample_student_data,
    create_student,
    create_teacher,
    create_course,
    created_student,
    multiple_students,
)

# App / HTTP test fixtures
from .test_fixtures.app_fixtures import (  # noqa: E402,F401
    app_factory,
    app,
    client,
    hardened_client,
    api_create_student,
    api_create_teacher,
    api_create_course,
)
