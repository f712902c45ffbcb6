"""
Jotter: Database Engine & Session Management
==============================================

What:  Async SQLAlchemy engine factory, session factory, declarative Base and
       a transactional session scope.
How:   The AppContext calls build_engine() once; SqlNoteStore opens one
       session per store operation via session_scope(), which commits on
       success and rolls back on error.
When:  Engine is created with the application; sessions per store call.

Connection Pooling:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from Settings,
    connections recycled every hour.
    SQLite (aiosqlite, tests): SQLAlchemy's default pool, no pool kwargs.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jotter.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations and
    create_schema() uses for CREATE TABLE IF NOT EXISTS.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by `settings.database_url`."""
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps ORM attributes readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session for one unit of work.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller, which runs its statement
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns the connection to the pool)
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
    """Create any missing tables registered on Base.metadata."""
    # Import registers the model on Base.metadata
    from jotter.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections (application shutdown)."""
    await engine.dispose()
