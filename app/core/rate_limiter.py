"""
Redis-based rate limiting.

Fixed-window counters keyed by caller. If Redis is unreachable the limiter
fails open and only logs the error.
"""

import logging
from typing import Optional

import redis
from fastapi import HTTPException, status

from app.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Redis-based rate limiter for protecting endpoints.

    Each request runs SET NX EX and INCR in one MULTI/EXEC transaction, so
    the counter always carries the window TTL and concurrent requests never
    read the same count.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self._redis_client = redis_client

    @property
    def redis_client(self) -> redis.Redis:
        # Created on first use so importing the app never opens a socket
        if self._redis_client is None:
            self._redis_client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                decode_responses=True,
                socket_connect_timeout=1,
            )
        return self._redis_client

    def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int,
        error_message: str = "Rate limit exceeded"
    ) -> None:
        """
        Check if a request is within rate limits.

        Args:
            key: Unique identifier for this rate limit (e.g., "ip:10.0.0.1:api")
            max_requests: Maximum number of requests allowed
            window_seconds: Time window in seconds
            error_message: Custom error message if rate limit exceeded

        Raises:
            HTTPException: 429 Too Many Requests if rate limit exceeded
        """
        try:
            pipe = self.redis_client.pipeline(transaction=True)
            pipe.set(key, 0, ex=window_seconds, nx=True)
            pipe.incr(key)
            _, current_count = pipe.execute()

            if int(current_count) > max_requests:
                ttl = self.redis_client.ttl(key)
                logger.warning(f"Rate limit exceeded for {key}")
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"{error_message}. Try again in {ttl} seconds."
                )

        except redis.RedisError as e:
            # Fail open
            logger.error(f"Redis rate limiter error: {e}")

    def reset_limit(self, key: str) -> None:
        """Reset the rate limit for a key."""
        try:
            self.redis_client.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis reset error: {e}")


# Singleton instance
rate_limiter = RateLimiter()
