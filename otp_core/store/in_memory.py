"""
In-Memory Store
===============
Dictionary-backed store with TTL for development and testing.
"""

import asyncio
from typing import Dict, Optional, Tuple

import structlog

from ..clock import Clock, SystemClock
from .base import KeyValueStore

logger = structlog.get_logger(__name__)


class InMemoryStore(KeyValueStore):
    """
    Single-process store holding (value, expires_at) pairs.

    For development and testing only.
    Use RedisStore in production.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> Optional[Tuple[str, float]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        if self.clock.now() >= entry[1]:
            del self._data[key]
            return None
        return entry

    async def put(self, key: str, value: str, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        async with self._lock:
            self.cleanup()
            self._data[key] = (value, self.clock.now() + ttl)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def get_and_delete(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            del self._data[key]
            return entry[0]

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry[0] != expected:
                return False
            del self._data[key]
            return True

    async def increment(self, key: str, ttl: float) -> int:
        async with self._lock:
            self.cleanup()
            entry = self._live(key)
            if entry is None:
                self._data[key] = ("1", self.clock.now() + ttl)
                return 1
            count = int(entry[0]) + 1
            self._data[key] = (str(count), entry[1])
            return count

    async def ttl(self, key: str) -> Optional[float]:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            return entry[1] - self.clock.now()

    def cleanup(self) -> int:
        """Drop expired entries. Runs on every write; returns the number removed."""
        now = self.clock.now()
        expired = [key for key, (_, expires_at) in self._data.items() if now >= expires_at]
        for key in expired:
            del self._data[key]
        if expired:
            logger.debug("Expired store entries removed", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._data)
