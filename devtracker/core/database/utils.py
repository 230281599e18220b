"""
Database utility functions for engine and session management.

Functions:
- normalize_database_url: Rewrites PostgreSQL URLs to the asyncpg driver
- create_engine: Creates async SQLAlchemy engine with URL normalization
- create_sessionmaker: Creates async session factory with safe defaults
- create_all: Creates all tables from ORM metadata (for tests/dev)
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

_POSTGRES_URL = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_database_url(db_url: str) -> str:
    """Rewrite ``postgres://``, ``postgresql://`` and ``postgresql+<driver>://`` to ``postgresql+asyncpg://``."""
    return _POSTGRES_URL.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(
    db_url: str,
    *,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: float | None = None,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    The helper normalizes Postgres URLs to ensure the async driver is used.
    Pool sizing only applies to server databases; SQLite URLs keep the
    dialect's default pool.

    Args:
        db_url: Database connection URL
        pool_size: Persistent connections kept in the pool
        max_overflow: Connections allowed above ``pool_size``
        pool_timeout: Seconds to wait for a free connection
        echo: Echo SQL to the log

    Returns:
        Configured AsyncEngine instance
    """
    url = normalize_database_url(db_url)
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": echo}
    if url.startswith("postgresql+asyncpg://"):
        if pool_size is not None:
            kwargs["pool_size"] = pool_size
        if max_overflow is not None:
            kwargs["max_overflow"] = max_overflow
        if pool_timeout is not None:
            kwargs["pool_timeout"] = pool_timeout
    return create_async_engine(url, **kwargs)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Configured async session factory
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables for the current ORM metadata.

    This is mainly intended for tests and local development.
    Production should use Alembic migrations instead.

    Args:
        engine: Async SQLAlchemy engine
    """
    # Registers every table on Base.metadata
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
