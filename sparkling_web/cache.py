"""
Redis caching utilities
Used to keep booking confirmation payloads available across page reloads
"""
import json
import logging
from typing import Any, Optional

import redis

from .config import CONFIRMATION_CACHE_TTL
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with JSON serialization; every failure is treated as a miss"""

    def __init__(self):
        self.redis_client = None

    def _get_client(self):
        """Lazy load Redis client"""
        if self.redis_client is None:
            try:
                self.redis_client = get_redis_client()
            except redis.RedisError as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except (redis.RedisError, TypeError) as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            logger.debug(f"✅ Cache DELETE: {key}")
            return True
        except redis.RedisError as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False


# Global cache instance
cache = Cache()


def confirmation_key(booking_id: str) -> str:
    return f"booking_confirmation:{booking_id}"


def get_confirmation_cached(booking_id: str) -> Optional[dict]:
    return cache.get(confirmation_key(booking_id))


def set_confirmation_cached(booking_id: str, payload: dict, ttl: int = CONFIRMATION_CACHE_TTL) -> bool:
    return cache.set(confirmation_key(booking_id), payload, ttl)


def invalidate_confirmation_cache(booking_id: str) -> bool:
    return cache.delete(confirmation_key(booking_id))
