"""
Redis connection used for shared request counters
"""
import logging
from typing import Optional
import redis.asyncio as redis

from config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    """Redis cache manager for async operations"""

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self.enabled = False

    async def connect(self, redis_url: Optional[str] = None):
        """Connect to Redis"""
        redis_url = redis_url or settings.REDIS_URL
        if redis_url:
            try:
                self.redis_client = redis.from_url(
                    redis_url,
                    encoding="utf-8",
                    decode_responses=True
                )
                # Test connection
                await self.redis_client.ping()
                self.enabled = True
            except Exception as e:
                logger.warning(f"Redis connection failed: {e}. Continuing with in-memory counters.")
                self.redis_client = None
                self.enabled = False
        else:
            logger.info("Redis URL not configured. Using in-memory counters.")
            self.enabled = False

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
        self.redis_client = None
        self.enabled = False

    async def increment(self, key: str, ttl: int) -> Optional[int]:
        """
        Increment a counter, starting its TTL on first increment.
        Returns the new value, or None when Redis is unavailable.
        """
        if not self.enabled or not self.redis_client:
            return None

        try:
            async with self.redis_client.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, ttl, nx=True)
                count, _ = await pipe.execute()
            return int(count)
        except Exception as e:
            logger.warning(f"Cache increment error: {e}")
            return None

    async def ttl(self, key: str) -> Optional[int]:
        """Remaining TTL of a key in seconds"""
        if not self.enabled or not self.redis_client:
            return None

        try:
            remaining = await self.redis_client.ttl(key)
            return remaining if remaining and remaining > 0 else None
        except Exception as e:
            logger.warning(f"Cache ttl error: {e}")
            return None


# Global cache manager instance
cache_manager = CacheManager()
