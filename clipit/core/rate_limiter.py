"""
Redis-based rate limiting for authentication endpoints.

Prevents credential stuffing and signup abuse per client IP.
"""

import logging
import redis
from fastapi import HTTPException, Request, status
from clipit.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Redis-based fixed-window rate limiter.

    Each key holds a counter that expires after the window. When Redis is
    unreachable the limiter fails open.
    """

    def __init__(self):
        """Initialize Redis client (connects lazily on first command)"""
        self.redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )

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
            key: Unique identifier for this rate limit (e.g., "login:203.0.113.7")
            max_requests: Maximum number of requests allowed
            window_seconds: Time window in seconds
            error_message: Custom error message if rate limit exceeded

        Raises:
            HTTPException: 429 Too Many Requests if rate limit exceeded
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        try:
            current_count = self.redis_client.get(key)

            if current_count is None:
                # First request - set counter with expiration
                self.redis_client.setex(key, window_seconds, 1)
                return

            if int(current_count) >= max_requests:
                ttl = self.redis_client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"{error_message}. Try again in {ttl} seconds."
                )
            self.redis_client.incr(key)

        except redis.RedisError as e:
            logger.warning(f"Redis rate limiter unavailable, allowing request: {e}")


# Singleton instance
rate_limiter = RateLimiter()


def get_client_ip(request: Request) -> str:
    """
    Extract the client's IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first (client IP)
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


def check_login_rate_limit(request: Request) -> None:
    """
    Limit: 10 login attempts per minute per IP.
    """
    rate_limiter.check_rate_limit(
        key=f"login:{get_client_ip(request)}",
        max_requests=10,
        window_seconds=60,
        error_message="Too many login attempts"
    )


def check_register_rate_limit(request: Request) -> None:
    """
    Limit: 5 registrations per 10 minutes per IP.
    """
    rate_limiter.check_rate_limit(
        key=f"register:{get_client_ip(request)}",
        max_requests=5,
        window_seconds=600,
        error_message="Too many registrations from your IP address"
    )
