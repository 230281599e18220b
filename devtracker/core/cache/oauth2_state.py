"""
Pending OAuth2 authorization requests.

The ``state`` parameter sent to the identity provider is stored with the
registration id and the front-end redirect target. The callback consumes it
exactly once; an unknown or replayed state is rejected.
"""

from __future__ import annotations

import secrets
from typing import Optional

from pydantic import BaseModel

from .client import RedisClient


class OAuth2AuthorizationRequest(BaseModel):
    registration_id: str
    redirect_uri: str


class OAuth2AuthorizationStateStore:
    def __init__(self, redis: RedisClient, ttl_seconds: int = 180) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, state: str) -> str:
        return self.redis.key("oauth2_state", state)

    async def save(self, request: OAuth2AuthorizationRequest) -> str:
        """Persist ``request`` under a fresh random state value and return that value."""
        state = secrets.token_urlsafe(32)
        await self.redis.set_json(self._key(state), request.model_dump(), ttl_seconds=self.ttl_seconds)
        return state

    async def consume(self, state: str) -> Optional[OAuth2AuthorizationRequest]:
        """Remove and return the request stored for ``state``, or None if absent or expired."""
        if not state:
            return None
        payload = await self.redis.pop_json(self._key(state))
        if payload is None:
            return None
        return OAuth2AuthorizationRequest.model_validate(payload)
