from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from devtracker.core.database import get_session
from devtracker.github import GitHubApiClient
from devtracker.server.core.config import settings
from devtracker.server.main import app
from devtracker.server.services.deps import get_github_client, get_jwt_provider, get_redis_client


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def github_api_client() -> AsyncGenerator[GitHubApiClient, None]:
    client = GitHubApiClient.from_config(settings.oauth2.github)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(session_maker, redis_client, github_api_client, jwt_provider) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client wired to the in-memory database, Redis double and mocked GitHub."""

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_redis_client] = lambda: redis_client
    app.dependency_overrides[get_github_client] = lambda: github_api_client
    app.dependency_overrides[get_jwt_provider] = lambda: jwt_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as c:
        yield c

    app.dependency_overrides.clear()
