"""
Redis Store
===========
Redis-backed store using Lua scripts for atomic multi-step operations.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from ..exceptions import StorageError
from .base import KeyValueStore

logger = structlog.get_logger(__name__)

# Delete only if the value is unchanged since it was read
COMPARE_AND_DELETE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""

# Fixed-window counter: expiry is set once, when the counter is created
INCREMENT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
    redis.call('PEXPIRE', KEYS[1], ARGV[1])
end
return count
"""


def _ms(seconds: float) -> int:
    return max(1, int(seconds * 1000))


class RedisStore(KeyValueStore):
    """
    Store backed by an async Redis client.

    Backend errors and timeouts are raised as StorageError; nothing is
    retried here.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: redis.asyncio client created with decode_responses=True
        """
        self.redis = redis_client
        self._compare_and_delete = self.redis.register_script(COMPARE_AND_DELETE_SCRIPT)
        self._increment = self.redis.register_script(INCREMENT_SCRIPT)

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 2.0) -> "RedisStore":
        """Create a store from a redis:// URL."""
        client = aioredis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    @asynccontextmanager
    async def _guard(self, operation: str, key: str):
        try:
            yield
        except RedisError as e:
            logger.error("Store operation failed", operation=operation, key=key, error=str(e))
            raise StorageError(str(e), operation=operation, key=key) from e

    async def put(self, key: str, value: str, ttl: float) -> None:
        async with self._guard("put", key):
            await self.redis.set(key, value, px=_ms(ttl))

    async def get(self, key: str) -> Optional[str]:
        async with self._guard("get", key):
            return await self.redis.get(key)

    async def delete(self, key: str) -> None:
        async with self._guard("delete", key):
            await self.redis.delete(key)

    async def get_and_delete(self, key: str) -> Optional[str]:
        async with self._guard("get_and_delete", key):
            return await self.redis.getdel(key)

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        async with self._guard("compare_and_delete", key):
            removed = await self._compare_and_delete(keys=[key], args=[expected])
            return bool(removed)

    async def increment(self, key: str, ttl: float) -> int:
        async with self._guard("increment", key):
            count = await self._increment(keys=[key], args=[_ms(ttl)])
            return int(count)

    async def ttl(self, key: str) -> Optional[float]:
        async with self._guard("ttl", key):
            remaining_ms = await self.redis.pttl(key)
        # -2: missing key, -1: no expiry
        if remaining_ms is None or remaining_ms == -2:
            return None
        if remaining_ms == -1:
            return float("inf")
        return remaining_ms / 1000.0

    async def close(self) -> None:
        async with self._guard("close", ""):
            await self.redis.aclose()
