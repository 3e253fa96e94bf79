from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config.settings import Settings
from .base import Base


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_in_memory(url: str) -> bool:
    return _is_sqlite(url) and (":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"))


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the AsyncEngine for `settings.SQLALCHEMY_DATABASE_URL`.

    - Postgres: pooled connections with pre-ping health checks.
    - SQLite: foreign keys enabled on every connection; an in-memory database is
      kept on one shared connection (StaticPool), otherwise each connection would
      see its own empty database.
    """
    url = settings.SQLALCHEMY_DATABASE_URL
    kwargs: dict = {"echo": settings.SQLALCHEMY_ECHO}

    if _is_in_memory(url):
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
    elif not _is_sqlite(url):
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **kwargs)

    if _is_sqlite(url):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned entities stay readable after the request commits
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """
    Create missing tables. Schema migrations are not managed by this service;
    this is enough for SQLite development databases and tests.
    """
    # register every model with Base.metadata
    from .. import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

