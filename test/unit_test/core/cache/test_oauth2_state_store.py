"""
Unit tests for the OAuth2 authorization state store.
"""

import pytest

from devtracker.core.cache import OAuth2AuthorizationRequest, OAuth2AuthorizationStateStore


@pytest.fixture
def state_store(redis_client) -> OAuth2AuthorizationStateStore:
    return OAuth2AuthorizationStateStore(redis_client, ttl_seconds=180)


class TestOAuth2AuthorizationStateStore:
    async def test_save_then_consume_once(self, state_store, fake_redis):
        request = OAuth2AuthorizationRequest(
            registration_id="github", redirect_uri="http://localhost:3000/oauth2/redirect"
        )

        state = await state_store.save(request)

        assert len(state) >= 32
        assert fake_redis.ttls[f"devtracker-test:oauth2_state:{state}"] == 180
        assert await state_store.consume(state) == request
        assert await state_store.consume(state) is None

    async def test_states_are_unique(self, state_store):
        request = OAuth2AuthorizationRequest(registration_id="github", redirect_uri="/")

        assert await state_store.save(request) != await state_store.save(request)

    @pytest.mark.parametrize("state", ["", "unknown-state"])
    async def test_consume_unknown(self, state_store, state):
        assert await state_store.consume(state) is None

    async def test_expired_state_is_not_consumed(self, state_store, fake_redis):
        state = await state_store.save(OAuth2AuthorizationRequest(registration_id="github", redirect_uri="/"))

        fake_redis.expire(f"devtracker-test:oauth2_state:{state}")

        assert await state_store.consume(state) is None
