"""Fixtures for end-to-end tests against a disposable PostgreSQL container.

Tests here are skipped unless ``TEST__ENABLE_POSTGRES_TESTS=true`` is set
(environment or test/.env) and Docker is available.
"""

from __future__ import annotations

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from settings import test_settings
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from testcontainers.postgres import PostgresContainer

from devtracker.core.database import Base, create_all, create_engine, create_sessionmaker, normalize_database_url


def pytest_collection_modifyitems(config, items):
    if test_settings.test.enable_postgres_tests:
        return
    skip = pytest.mark.skip(reason="PostgreSQL tests disabled; set TEST__ENABLE_POSTGRES_TESTS=true")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def postgres_url() -> Generator[str, None, None]:
    """Start PostgreSQL once per session and return an asyncpg URL."""
    with PostgresContainer(test_settings.test.postgres_image, driver=None) as pg:
        yield normalize_database_url(pg.get_connection_url())


@pytest_asyncio.fixture
async def pg_engine(postgres_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(postgres_url)
    await create_all(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def pg_session(pg_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(pg_engine)() as session:
        yield session
