"""
Unit tests for the refresh token registry.
"""

import pytest

from devtracker.core.cache import RefreshTokenStore


@pytest.fixture
def store(redis_client) -> RefreshTokenStore:
    return RefreshTokenStore(redis_client, ttl_seconds=86_400)


class TestRefreshTokenStore:
    async def test_saved_token_is_active_with_ttl(self, store, fake_redis):
        await store.save(1, "jti-1")

        assert await store.is_active(1, "jti-1") is True
        assert fake_redis.ttls["devtracker-test:refresh_token:1:jti-1"] == 86_400

    async def test_unknown_token_is_inactive(self, store):
        assert await store.is_active(1, "never-issued") is False

    async def test_token_bound_to_user(self, store):
        await store.save(1, "jti-1")

        assert await store.is_active(2, "jti-1") is False

    async def test_revoke(self, store):
        await store.save(1, "jti-1")

        assert await store.revoke(1, "jti-1") is True
        assert await store.revoke(1, "jti-1") is False
        assert await store.is_active(1, "jti-1") is False

    async def test_revoke_all_only_touches_one_user(self, store):
        await store.save(1, "a")
        await store.save(1, "b")
        await store.save(2, "c")

        assert await store.revoke_all(1) == 2

        assert await store.is_active(1, "a") is False
        assert await store.is_active(1, "b") is False
        assert await store.is_active(2, "c") is True

    async def test_revoke_all_without_tokens(self, store):
        assert await store.revoke_all(42) == 0

    async def test_expired_token_is_inactive(self, store, fake_redis):
        await store.save(1, "jti-1")

        fake_redis.expire("devtracker-test:refresh_token:1:jti-1")

        assert await store.is_active(1, "jti-1") is False
        assert await store.revoke(1, "jti-1") is False
