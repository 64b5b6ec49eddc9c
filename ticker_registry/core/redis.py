"""Shared Redis client for the ticker hash store and the writer lock."""
import asyncio
import redis.asyncio as redis
from ticker_registry.core.config import settings


_client: redis.Redis | None = None
_client_lock = asyncio.Lock()


def build_client(url: str | None = None) -> redis.Redis:
    """New client with the registry's pool and timeout settings."""
    return redis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds
    )


async def get_redis() -> redis.Redis:
    """Process-wide client, created on first use."""
    global _client

    if _client is not None:
        return _client

    async with _client_lock:
        if _client is None:
            _client = build_client()
    return _client


async def close_redis():
    """Close the process-wide client; the next get_redis() opens a new one."""
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.aclose()
            _client = None
