"""Fixed-window rate limiting for order placement.

Rule: POST /api/v1/orders, ORDER_RATE_LIMIT_PER_MINUTE requests per caller.
The caller is the bearer token subject when the token verifies, else the
client IP (X-Forwarded-For aware).

Redis logic:
    count = INCR ratelimit:orders:{caller}
    if count == 1: EXPIRE key 60
    if count > limit: 429 + Retry-After

If Redis is unreachable the request is let through and a warning logged;
order placement is still protected by the database.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.sf_common.errors import AppError, RateLimitError
from src.sf_common.redis_client import get_redis
from src.sf_common.response import error_response
from src.sf_gateway.auth.jwt_handler import decode_token

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_LIMITED_ROUTES = frozenset({("POST", "/api/v1/orders")})


def client_key(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            return f"user:{decode_token(token)['sub']}"
        except (AppError, KeyError):
            pass
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        limit: int | None = None,
        enabled: bool | None = None,
    ) -> None:
        super().__init__(app)
        self._redis_factory = redis_factory
        self._limit = limit if limit is not None else settings.ORDER_RATE_LIMIT_PER_MINUTE
        self._enabled = enabled if enabled is not None else settings.RATE_LIMIT_ENABLED

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or (request.method, request.url.path) not in _LIMITED_ROUTES:
            return await call_next(request)

        key = f"ratelimit:orders:{client_key(request)}"
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
            ttl = await redis.ttl(key) if count > self._limit else 0
        except RedisError as exc:
            logger.warning("Rate limit check skipped, Redis unavailable: %s", exc)
            return await call_next(request)

        if count > self._limit:
            logger.warning("Rate limit exceeded for %s (%d requests)", key, count)
            err = RateLimitError()
            resp = error_response(err.code, err.message)
            resp.request_id = getattr(request.state, "request_id", resp.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(ttl if ttl > 0 else _WINDOW_SECONDS)},
            )
        return await call_next(request)
