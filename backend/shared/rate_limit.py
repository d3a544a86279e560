"""
Rate limiting utilities using slowapi.
Keeps a misbehaving terminal (stuck retry loop, double-tap on "send") from
flooding the kitchen with orders.

Usage in a router:
    from shared.rate_limit import limiter, ORDER_SUBMISSION_LIMIT

    @router.post("/orders")
    @limiter.limit(ORDER_SUBMISSION_LIMIT)
    async def create_order(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)


# Create limiter instance using client IP as key
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

ORDER_SUBMISSION_LIMIT = settings.order_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.
    Returns a JSON response with retry information.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "retry_after": exc.detail,
        },
        headers={"Retry-After": "60"},
    )
