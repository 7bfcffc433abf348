"""
Fixed-window request throttling per client
"""
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from config import settings
from app.core.cache import CacheManager, cache_manager


MAX_TRACKED_CLIENTS = 10000


@dataclass
class RateLimitWindow:
    """Request count inside one window for one client"""
    started_at: float
    count: int = 0


class RateLimiter:
    """
    Allows `limit` requests per `ttl` seconds per key.

    Counters live in Redis when the cache manager is connected, so several
    workers share one budget; otherwise they are kept in process memory.
    """

    def __init__(
        self,
        limit: int,
        ttl: int,
        cache: Optional[CacheManager] = None,
        clock: Callable[[], float] = time.monotonic,
        max_clients: int = MAX_TRACKED_CLIENTS,
    ):
        self.limit = limit
        self.ttl = ttl
        self.cache = cache
        self.clock = clock
        self.max_clients = max_clients
        self._windows: Dict[str, RateLimitWindow] = {}

    async def hit(self, key: str) -> Optional[int]:
        """
        Record one request for key.

        Returns:
            None when the request is allowed, otherwise seconds until the window resets
        """
        if self.cache is not None and self.cache.enabled:
            cache_key = f"rate_limit:{key}"
            count = await self.cache.increment(cache_key, self.ttl)
            if count is not None:
                if count <= self.limit:
                    return None
                return await self.cache.ttl(cache_key) or self.ttl

        return self._hit_memory(key)

    def _hit_memory(self, key: str) -> Optional[int]:
        now = self.clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.ttl:
            # Re-insert so dict order stays oldest window first
            self._windows.pop(key, None)
            if len(self._windows) >= self.max_clients:
                self._prune(now)
            window = RateLimitWindow(started_at=now)
            self._windows[key] = window

        window.count += 1
        if window.count <= self.limit:
            return None
        return max(1, math.ceil(self.ttl - (now - window.started_at)))

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now - window.started_at >= self.ttl]
        for key in expired:
            del self._windows[key]
        # Still full: drop the oldest windows to make room for the new one
        while len(self._windows) >= self.max_clients:
            del self._windows[next(iter(self._windows))]

    def reset(self) -> None:
        """Forget all in-memory windows"""
        self._windows.clear()


rate_limiter = RateLimiter(
    limit=settings.THROTTLE_LIMIT,
    ttl=settings.THROTTLE_TTL,
    cache=cache_manager,
)
