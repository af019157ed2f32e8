"""Redis cache service for hotel search responses."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-backed cache; every failure reads as a miss."""

    def __init__(self, url: str | None = None):
        self._url = url or settings.redis_url
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    self._url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl or settings.accommodation_cache_ttl)
            return True
        except Exception:
            return False

    # Typed helpers

    def hotels_key(self, destination: str, check_in: str, check_out: str) -> str:
        return f"hotels:{destination.lower()}:{check_in}:{check_out}"

    async def get_hotels(self, destination: str, check_in: str, check_out: str) -> list[dict] | None:
        return await self.get(self.hotels_key(destination, check_in, check_out))

    async def set_hotels(self, destination: str, check_in: str, check_out: str, data: list[dict]):
        await self.set(self.hotels_key(destination, check_in, check_out), data, settings.accommodation_cache_ttl)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
