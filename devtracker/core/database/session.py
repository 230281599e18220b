"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from devtracker.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

engine = create_engine(
    settings.database.url,
    pool_size=settings.database.pool_size,
    max_overflow=settings.database.max_overflow,
    pool_timeout=settings.database.pool_timeout,
    echo=settings.database.echo,
)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> bool:
    """
    Initialize the database.

    Creates missing tables when ``database.auto_create`` is enabled.
    In production, Alembic migrations handle all DDL and this is a no-op.

    Returns:
        True if tables were created.
    """
    if not settings.database.auto_create:
        return False
    await create_all(engine)
    return True


async def check_database(session: AsyncSession) -> bool:
    """Run a trivial query to verify connectivity."""
    await session.execute(text("SELECT 1"))
    return True


async def dispose_engine() -> None:
    await engine.dispose()
