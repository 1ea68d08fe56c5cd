# app/core/middleware/rate_limiter.py

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


class FixedWindowRateLimiter:
    def __init__(self, redis, limit: int, window: int = 3600):
        self.redis = redis
        self.limit = limit
        self.window = window

    async def hit(self, key: str) -> tuple[bool, int]:
        """
        Count one action for the given key.
        Returns whether it is allowed and how many actions remain in the window.
        """
        current_count = await self.redis.incr(key)
        if current_count == 1:
            await self.redis.expire(key, self.window)

        remaining = max(0, self.limit - current_count)
        return current_count <= self.limit, remaining

    async def reset_in(self, key: str) -> int:
        """Seconds until the window for the given key resets."""
        ttl = await self.redis.ttl(key)
        return ttl if ttl and ttl > 0 else self.window

    async def release(self, key: str) -> None:
        """Give back one action counted by `hit` that did not go through."""
        await self.redis.decr(key)
