"""
Refresh token registry.

Every refresh token issued is recorded under its ``jti`` so it can be
revoked: rotation on refresh revokes the presented token, logout revokes all
tokens of a user. A token whose entry is gone is treated as invalid even if
its signature and expiry still check out.
"""

from __future__ import annotations

from devtracker.core.logging_config import get_logger

from .client import RedisClient

logger = get_logger(__name__)


class RefreshTokenStore:
    def __init__(self, redis: RedisClient, ttl_seconds: int) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, user_id: int, jti: str) -> str:
        return self.redis.key("refresh_token", user_id, jti)

    async def save(self, user_id: int, jti: str) -> None:
        await self.redis.set_json(self._key(user_id, jti), {"user_id": user_id}, ttl_seconds=self.ttl_seconds)

    async def is_active(self, user_id: int, jti: str) -> bool:
        return await self.redis.exists(self._key(user_id, jti))

    async def revoke(self, user_id: int, jti: str) -> bool:
        return await self.redis.delete(self._key(user_id, jti)) > 0

    async def revoke_all(self, user_id: int) -> int:
        keys = await self.redis.scan_keys(self.redis.key("refresh_token", user_id, "*"))
        revoked = await self.redis.delete(*keys)
        logger.info(f"Revoked {revoked} refresh token(s) for user {user_id}")
        return revoked
