"""
NoteBoard — Database Session Management
========================================

What:  Async SQLAlchemy engine factory, declarative base and session scope for
       the local record store.
How:   build_engine() creates an async engine from a URL (pool settings only
       where the dialect pools connections); session_scope() commits on
       success and rolls back on error.
Who:   SQLRecordStore owns one engine and one session factory; Alembic reads
       Base.metadata.
When:  Only when RECORD_STORE_BACKEND=sql. The GraphQL backend never imports
       a driver.

Connection Pooling Strategy (server databases):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
SQLite URLs get the dialect's default pool.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from noteboard.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models and Alembic.
    """
    pass


def build_engine(database_url: Optional[str] = None) -> AsyncEngine:
    url = database_url or settings.database_url
    options = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: rows stay readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional session.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables; used for SQLite development databases and tests."""
    # model registration with Base.metadata
    from noteboard.models import note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
