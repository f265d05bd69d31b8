"""
API-wide rate limiting dependency.

Applied to every /api route: a fixed number of requests per client IP per
window (100 per 15 minutes by default).
"""

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.rate_limiter import rate_limiter


def get_client_ip(request: Request) -> str:
    """
    Extract the client's IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    # Check for X-Forwarded-For header (when behind proxy/load balancer)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first (client IP)
        return forwarded_for.split(",")[0].strip()

    # Fall back to direct connection IP
    return request.client.host if request.client else "unknown"


def check_ip_rate_limit(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> None:
    """
    Check rate limit for the calling IP address.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    if not settings.RATE_LIMIT_ENABLED:
        return

    rate_limiter.check_rate_limit(
        key=f"ip:{get_client_ip(request)}:api",
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        error_message="Too many requests from this IP"
    )
