"""Redis cache for poll vote counts and public trip pages."""

import json
import logging
import time
import uuid
from typing import Any, Awaitable, Callable

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_POLL_COUNTS = 5 * 60
TTL_PUBLIC_TRIP = 10 * 60

# After a failed connect, wait this long before trying Redis again
RECONNECT_BACKOFF = 30


class CacheService:
    """JSON values in Redis. Misses, errors and a disabled cache all read as None."""

    def __init__(self):
        self._redis: redis.Redis | None = None
        self._retry_at = 0.0

    async def _client(self) -> redis.Redis | None:
        if not settings.cache_enabled:
            return None
        if self._redis is not None:
            return self._redis
        if time.monotonic() < self._retry_at:
            return None

        client = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        try:
            await client.ping()
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Redis unavailable, caching paused for {RECONNECT_BACKOFF}s: {e}")
            self._retry_at = time.monotonic() + RECONNECT_BACKOFF
            await client.aclose()
            return None
        self._redis = client
        return client

    async def _run(self, op: Callable[[redis.Redis], Awaitable[Any]]) -> Any | None:
        client = await self._client()
        if client is None:
            return None
        try:
            return await op(client)
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Cache operation failed: {e}")
            return None

    async def get(self, key: str) -> Any | None:
        raw = await self._run(lambda r: r.get(key))
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        payload = json.dumps(value, default=str)
        return bool(await self._run(lambda r: r.set(key, payload, ex=ttl)))

    async def delete(self, *keys: str) -> None:
        await self._run(lambda r: r.delete(*keys))

    # Poll counts: {option_id: votes}

    @staticmethod
    def poll_key(poll_id: uuid.UUID) -> str:
        return f"poll:{poll_id}:counts"

    async def get_poll_counts(self, poll_id: uuid.UUID) -> dict | None:
        return await self.get(self.poll_key(poll_id))

    async def set_poll_counts(self, poll_id: uuid.UUID, data: dict):
        await self.set(self.poll_key(poll_id), data, TTL_POLL_COUNTS)

    async def invalidate_poll(self, poll_id: uuid.UUID):
        await self.delete(self.poll_key(poll_id))

    # Public trip pages, keyed by slug

    @staticmethod
    def public_trip_key(slug: str) -> str:
        return f"trip:public:{slug}"

    async def get_public_trip(self, slug: str) -> dict | None:
        return await self.get(self.public_trip_key(slug))

    async def set_public_trip(self, slug: str, data: dict):
        await self.set(self.public_trip_key(slug), data, TTL_PUBLIC_TRIP)

    async def invalidate_public_trip(self, slug: str | None):
        if slug:
            await self.delete(self.public_trip_key(slug))

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
