from __future__ import annotations

import asyncio
import fnmatch
import os
from pathlib import Path
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Iterable, Optional

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)

# Application settings are read once at import time; pin them before any
# devtracker module is imported.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key-for-devtracker-unit-tests-0123456789"
os.environ.update(
    {
        "DATABASE__URL": TEST_DATABASE_URL,
        "DATABASE__AUTO_CREATE": "false",
        "LOGGING__ENABLE_FILE_LOGGING": "false",
        "LOGGING__LEVEL": "DEBUG",
        "JWT__SECRET": TEST_JWT_SECRET,
        "JWT__EXPIRATION_MS": "3600000",
        "JWT__REFRESH_EXPIRATION_MS": "86400000",
        "REDIS__URL": "redis://localhost:6379/15",
        "OAUTH2__GITHUB__CLIENT_ID": "test-client-id",
        "OAUTH2__GITHUB__CLIENT_SECRET": "test-client-secret",
        "OAUTH2__GITHUB__AUTHORIZATION_URI": "http://mock-github/login/oauth/authorize",
        "OAUTH2__GITHUB__TOKEN_URI": "http://mock-github/login/oauth/access_token",
        "OAUTH2__GITHUB__API_BASE_URL": "http://mock-github-api",
        "OAUTH2__GITHUB__REDIRECT_BASE_URL": "http://localhost",
        "OAUTH2__AUTHORIZED_REDIRECT_URIS": '["http://localhost:3000/oauth2/redirect", "http://localhost:3000/alt"]',
        "CORS__ORIGINS": '["http://localhost:3000"]',
        "MONITORING__LOGFIRE_ENABLED": "false",
    }
)

from settings import test_settings  # noqa: E402

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from devtracker.core.cache import RedisClient  # noqa: E402
from devtracker.core.database import create_all  # noqa: E402
from devtracker.core.database.repositories.users import UserRepository  # noqa: E402
from devtracker.server.security.jwt_provider import JwtTokenProvider  # noqa: E402
from devtracker.server.security.passwords import PasswordEncoder  # noqa: E402


class InMemoryRedis:
    """Async stand-in for ``redis.asyncio.Redis`` covering the commands the cache layer uses.

    Every command yields to the event loop once, like a network round trip,
    so concurrent callers interleave. TTLs are recorded; ``expire`` drops a
    key as if its TTL had run out.
    """

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.closed = False

    def expire(self, key: str) -> None:
        self.data.pop(key, None)
        self.ttls.pop(key, None)

    async def ping(self) -> bool:
        await asyncio.sleep(0)
        return True

    async def aclose(self) -> None:
        self.closed = True

    async def get(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        await asyncio.sleep(0)
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def getdel(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        self.ttls.pop(key, None)
        return self.data.pop(key, None)

    async def delete(self, *keys: str) -> int:
        await asyncio.sleep(0)
        deleted = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    async def exists(self, key: str) -> int:
        await asyncio.sleep(0)
        return int(key in self.data)

    async def scan_iter(self, match: str = "*") -> AsyncIterator[str]:
        for key in list(self.data):
            await asyncio.sleep(0)
            if fnmatch.fnmatchcase(key, match):
                yield key


@pytest.fixture(scope="session")
def test_config():
    """Fixture providing test configuration from Pydantic settings model.

    Returns:
        TestSettings: Test configuration with all environment variables loaded
    """
    return test_settings


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest_asyncio.fixture
async def redis_client(fake_redis: InMemoryRedis) -> AsyncGenerator[RedisClient, None]:
    client = RedisClient("redis://mock-redis:6379/0", key_prefix="devtracker-test", client=fake_redis)
    await client.start()
    yield client
    await client.stop()


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory SQLite database with all tables per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def user_repository(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


@pytest.fixture(scope="session")
def jwt_provider() -> JwtTokenProvider:
    return JwtTokenProvider(TEST_JWT_SECRET, expiration_ms=3_600_000, refresh_expiration_ms=86_400_000)


@pytest.fixture(scope="session")
def password_encoder() -> PasswordEncoder:
    return PasswordEncoder()


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args: Any, **kwargs: Any):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args: Any, **kwargs: Any):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
