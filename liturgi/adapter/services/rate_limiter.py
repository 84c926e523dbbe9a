"""
Rate Limiter Implementations

InMemoryRateLimiter keeps counters in the process and is only correct for a
single instance. RedisRateLimiter shares counters between instances.
"""

import logging
import math
import time
import uuid
from collections import deque
from typing import Callable, Deque, Dict

from redis import asyncio as aioredis
from redis.exceptions import WatchError

from liturgi.app.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class InMemoryRateLimiter(RateLimiter):
    """Keys whose window has emptied are dropped, so the map only holds active keys"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._attempts: Dict[str, Deque[float]] = {}

    def _prune(self, key: str, window_seconds: int) -> Deque[float]:
        attempts = self._attempts.get(key)
        if attempts is None:
            return deque()
        cutoff = self._clock() - window_seconds
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        if not attempts:
            del self._attempts[key]
        return attempts

    async def check_and_consume(self, key: str, limit: int, window_seconds: int) -> bool:
        attempts = self._prune(key, window_seconds)
        if len(attempts) >= limit:
            logger.info(f"Rate limit exceeded for {key}")
            return False
        attempts.append(self._clock())
        self._attempts[key] = attempts
        return True

    async def retry_after(self, key: str, window_seconds: int) -> int:
        attempts = self._prune(key, window_seconds)
        if not attempts:
            return 0
        return max(1, math.ceil(attempts[0] + window_seconds - self._clock()))

    async def reset(self, key: str) -> None:
        self._attempts.pop(key, None)


class RedisRateLimiter(RateLimiter):
    """
    Sliding window over a sorted set of attempt timestamps per key.

    The count and the insert run under WATCH/MULTI; a concurrent attempt on the
    same key aborts the transaction and the check is retried.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "ratelimit:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimiter":
        return cls(aioredis.from_url(url))

    async def check_and_consume(self, key: str, limit: int, window_seconds: int) -> bool:
        redis_key = self.prefix + key
        async with self.client.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(redis_key)
                    now = time.time()
                    cutoff = now - window_seconds
                    count = await pipe.zcount(redis_key, f"({cutoff}", "+inf")
                    if count >= limit:
                        logger.info(f"Rate limit exceeded for {key}")
                        return False

                    pipe.multi()
                    pipe.zremrangebyscore(redis_key, 0, cutoff)
                    pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex}": now})
                    pipe.expire(redis_key, window_seconds)
                    await pipe.execute()
                    return True
                except WatchError:
                    logger.debug(f"Concurrent attempt on {key}, retrying")

    async def retry_after(self, key: str, window_seconds: int) -> int:
        now = time.time()
        oldest = await self.client.zrangebyscore(
            self.prefix + key, f"({now - window_seconds}", "+inf", start=0, num=1, withscores=True
        )
        if not oldest:
            return 0
        _, score = oldest[0]
        return max(1, math.ceil(score + window_seconds - now))

    async def reset(self, key: str) -> None:
        await self.client.delete(self.prefix + key)
