"""Shared Redis pool for the order rate limiter.

Stock, carts and order state live only in PostgreSQL. Timeouts are short so a
slow or absent Redis makes the limiter give up quickly rather than stall
checkout.
"""

import redis.asyncio as aioredis

from config.settings import settings

_SOCKET_TIMEOUT_SECONDS = 0.5

_client: aioredis.Redis | None = None


def _connect() -> aioredis.Redis:
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=_SOCKET_TIMEOUT_SECONDS,
    )


async def get_redis() -> aioredis.Redis:
    """Lazily create the pool; no connection is made until the first command."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = _connect()
    return _client


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    client, _client = _client, None
    if client is not None:
        await client.aclose()
