"""Rate limiting configuration for the Bookmark AI API.

Uses slowapi for rate limiting with configurable limits per endpoint type.
Authenticated requests are tracked per API key, anonymous ones per client IP.

Usage:
    from api.ratelimit import get_analyze_limit, limiter

    @router.post("/analyze")
    @limiter.limit(get_analyze_limit)
    async def analyze(request: Request):
        ...
"""

from __future__ import annotations

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from bookmark_ai.config import get_config
from bookmark_ai.security import hash_api_key

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


def get_rate_limit_key(request: Request) -> str:
    """Get client identifier for rate limiting.

    Uses a prefix of the API key hash when one is presented, so limits follow
    the key rather than the network address. The plaintext key never becomes
    a storage key.

    Args:
        request: The FastAPI request object.

    Returns:
        String identifier for the client.
    """
    api_key = request.headers.get(API_KEY_HEADER)
    if api_key:
        return f"key:{hash_api_key(api_key)[:16]}"
    return get_remote_address(request) or "unknown"


def get_client_address(request: Request) -> str:
    """Network address only, for routes that run before any key is checked."""
    return get_remote_address(request) or "unknown"


def get_default_limit() -> str:
    return get_config().rate_limit.default


def get_analyze_limit() -> str:
    """Limit for bookmark analysis (one engine call per request)."""
    return get_config().rate_limit.analyze


def get_register_limit() -> str:
    """Limit for account registration."""
    return get_config().rate_limit.registration


def get_write_limit() -> str:
    """Limit for settings, category and API key writes."""
    return get_config().rate_limit.write


# Create the limiter instance
# Key function extracts client identifier from request
limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[get_default_limit],
    enabled=True,  # Toggled from config in create_app
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Handle rate limit exceeded errors with proper 429 response.

    Args:
        request: The FastAPI request object.
        exc: The rate limit exception.

    Returns:
        JSON response with 429 status and retry-after header.
    """
    retry_after = 60
    limit = getattr(exc, "limit", None)
    if limit is not None:
        try:
            retry_after = int(limit.limit.get_expiry())
        except (AttributeError, TypeError, ValueError):
            pass

    logger.warning(
        "Rate limit exceeded for %s %s from %s",
        request.method,
        request.url.path,
        get_rate_limit_key(request),
    )

    response_body = {
        "error": "RateLimitExceeded",
        "code": "RATE_LIMIT_EXCEEDED",
        "detail": "Too many requests. Please try again later.",
        "retry_after_seconds": retry_after,
    }

    return JSONResponse(
        status_code=429,
        content=response_body,
        headers={"Retry-After": str(retry_after)},
    )


# Export all public symbols
__all__ = [
    "API_KEY_HEADER",
    "limiter",
    "get_rate_limit_key",
    "get_client_address",
    "get_default_limit",
    "get_analyze_limit",
    "get_register_limit",
    "get_write_limit",
    "rate_limit_exceeded_handler",
]
