"""
Redis client wrapper for DevTracker.

Provides the small set of Redis operations the application needs: JSON
values with a TTL, deletes, existence checks and prefix scans. All keys are
namespaced with the configured prefix.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from devtracker.core.logging_config import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Redis client with start/stop lifecycle management."""

    def __init__(
        self,
        redis_url: str,
        *,
        key_prefix: str = "devtracker",
        socket_timeout: float = 5.0,
        client: Optional[aioredis.Redis] = None,
    ) -> None:
        self.redis_url = redis_url
        self.key_prefix = key_prefix.rstrip(":")
        self.client = client or aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def key(self, *parts: Any) -> str:
        """Build a namespaced key: ``<prefix>:<part>:<part>...``."""
        return ":".join([self.key_prefix, *(str(p) for p in parts)])

    async def start(self) -> None:
        """Initialize the Redis connection with a health check."""
        if self._started:
            return
        try:
            await self.client.ping()
        except RedisError as e:
            logger.error(f"Redis client failed to connect to {self.redis_url}: {e}")
            raise
        self._started = True
        logger.info(f"Redis client connected to {self.redis_url}")

    async def stop(self) -> None:
        """Close the connection pool."""
        if not self._started:
            return
        try:
            await self.client.aclose()
            logger.info("Redis client disconnected")
        except RedisError as e:
            logger.error(f"Error stopping Redis client: {e}", exc_info=True)
        finally:
            self._started = False

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def get_json(self, key: str) -> Any:
        """Return the decoded JSON stored at ``key`` or None on a miss."""
        raw = await self.client.get(key)
        logger.debug(f"Redis GET key='{key}' result={'HIT' if raw is not None else 'MISS'}")
        if raw is None:
            return None
        return json.loads(raw)

    async def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Store ``value`` as JSON with an optional TTL in seconds."""
        result = await self.client.set(key, json.dumps(value, default=str), ex=ttl_seconds)
        logger.debug(f"Redis SET key='{key}' ttl={ttl_seconds}s")
        return bool(result)

    async def pop_json(self, key: str) -> Any:
        """Atomically read and delete the JSON value stored at ``key``."""
        raw = await self.client.getdel(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        deleted = await self.client.delete(*keys)
        logger.debug(f"Redis DELETE keys={len(keys)} deleted={deleted}")
        return int(deleted)

    async def exists(self, key: str) -> bool:
        return bool(await self.client.exists(key))

    async def scan_keys(self, pattern: str) -> list[str]:
        """Collect every key matching a glob ``pattern`` using SCAN."""
        return [key async for key in self.client.scan_iter(match=pattern)]
