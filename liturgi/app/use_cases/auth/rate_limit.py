from typing import Optional

from liturgi.app.services.rate_limiter import RateLimiter
from liturgi.libs.result import Error


async def enforce_rate_limit(
    limiter: RateLimiter, key: str, limit: int, window_seconds: int
) -> Optional[Error]:
    """
    Returns:
        RATE_LIMITED error carrying retry_after seconds, or None when allowed
    """
    if await limiter.check_and_consume(key, limit, window_seconds):
        return None
    retry_after = await limiter.retry_after(key, window_seconds)
    return Error(
        "RATE_LIMITED",
        "Too many attempts. Please try again later.",
        details=[{"retry_after": retry_after}],
    )
