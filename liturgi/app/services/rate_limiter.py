from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """
    Keyed sliding-window limiter.

    Implementations decide where the counters live; the in-memory one is only
    correct for a single process.
    """

    @abstractmethod
    async def check_and_consume(self, key: str, limit: int, window_seconds: int) -> bool:
        """Record an attempt. Returns False when the key is over its limit."""
        pass

    @abstractmethod
    async def retry_after(self, key: str, window_seconds: int) -> int:
        """Seconds until the oldest attempt leaves the window"""
        pass

    @abstractmethod
    async def reset(self, key: str) -> None:
        pass
