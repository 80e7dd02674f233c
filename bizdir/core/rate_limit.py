"""Per-client request rate limiting backed by Redis.

Counters live in Redis and are shared by every API instance. Fixed window:
the first hit in a window creates the key with a TTL, later hits ``INCR`` it.
"""

import logging
import time
from functools import lru_cache

from fastapi import Request, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis, from_url
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from bizdir.core.config import get_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "rate_limit"


@lru_cache
def get_redis() -> Redis:
    return from_url(get_settings().redis_url, decode_responses=True)


def client_ip(request: Request) -> str:
    """First address in the proxy chain, falling back to the socket peer."""
    for header in ("x-forwarded-for", "x-real-ip", "client-ip"):
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "0.0.0.0"


async def hit(redis: Redis, key: str, window_seconds: int) -> int:
    """Count one request against ``key`` and return the running total."""
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, window_seconds)
    return int(count)


async def rate_limit_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return await call_next(request)

    limit = settings.rate_limit_requests
    window = settings.rate_limit_window_seconds
    key = f"{KEY_PREFIX}:{client_ip(request)}"

    try:
        count = await hit(get_redis(), key, window)
    except Exception:
        # Fail open while Redis is unavailable.
        logger.warning("Rate limiter unavailable, allowing request for %s", key)
        return await call_next(request)

    headers = {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(max(0, limit - count)),
        "X-RateLimit-Reset": str(int(time.time()) + window),
    }
    if count > limit:
        logger.info("Rate limit exceeded for %s (%d/%d)", key, count, limit)
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": "Too many requests"},
            headers=headers,
        )

    response = await call_next(request)
    response.headers.update(headers)
    return response
