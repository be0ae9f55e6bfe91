"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

# Guest endpoints authenticate by password in the body, so they get their
# own tighter bucket against credential guessing.
GUEST_READ_LIMIT = "20/minute"
GUEST_WRITE_LIMIT = "10/minute"

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    message = f"Rate limit exceeded: {detail}"
    return JSONResponse(
        status_code=429,
        content={
            "error": message,
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": message,
            "details": {
                "retry_after": str(detail),
            },
        },
    )
