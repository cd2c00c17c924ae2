"""
Redis cache client.

Thin async wrapper over redis-py holding a single client for the catalog's
read-through/write-through caching. Values are JSON strings written without
expiry; a missing key raises CacheMissError so callers can fall back to the
relational store.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis import exceptions as redis_exceptions

from asset_catalog.exceptions import CacheConnectionError, CacheMissError
from asset_catalog.infrastructure.observability import get_infrastructure_logger

log = get_infrastructure_logger("redis-client")


class RedisCacheClient:
    """Key-value cache backed by Redis."""

    def __init__(self, url: str = "redis://localhost:6379/0", client: redis.Redis | None = None):
        """
        Args:
            url: Redis connection URL
            client: Pre-built client (tests, shared connections)
        """
        self._url = url
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self._url, decode_responses=True)
        return self._client

    async def ping(self) -> bool:
        async with self._translate_errors():
            return bool(await self.client.ping())

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        log.info("cache_closed")

    async def get(self, key: str) -> str:
        """Return the raw value stored at ``key``.

        Raises:
            CacheMissError: If the key does not exist
        """
        async with self._translate_errors():
            value = await self.client.get(key)
        if value is None:
            raise CacheMissError(key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        """Store ``value`` at ``key`` with no expiry."""
        async with self._translate_errors():
            await self.client.set(key, value)

    async def count_keys(self, prefix: str) -> int:
        """Count keys starting with ``prefix``. Walks the whole keyspace."""
        count = 0
        async with self._translate_errors():
            async for _ in self.client.scan_iter(match=f"{prefix}*"):
                count += 1
        return count

    @asynccontextmanager
    async def _translate_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError) as e:
            log.error("cache_unreachable", error=str(e))
            raise CacheConnectionError(f"redis: {e}") from e
