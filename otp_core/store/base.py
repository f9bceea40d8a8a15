"""
Key-Value Store Interface
=========================
Async key-value store with per-key TTL, the only durable state the OTP core
depends on.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract base class for OTP stores.

    Every per-key operation must be atomic. Implementations raise
    StorageError for any backend failure, including timeouts, and never
    retry on their own.
    """

    @abstractmethod
    async def put(self, key: str, value: str, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds, replacing any previous value."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the live value or None if absent or expired."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def get_and_delete(self, key: str) -> Optional[str]:
        """Atomically read and remove a value."""
        ...

    @abstractmethod
    async def compare_and_delete(self, key: str, expected: str) -> bool:
        """
        Atomically remove ``key`` only if it still holds ``expected``.

        Returns:
            True if this call removed the value
        """
        ...

    @abstractmethod
    async def increment(self, key: str, ttl: float) -> int:
        """
        Atomically add one to the counter at ``key``.

        A missing counter is created with the given TTL; an existing
        counter keeps its original expiry.

        Returns:
            The counter value after incrementing
        """
        ...

    @abstractmethod
    async def ttl(self, key: str) -> Optional[float]:
        """Seconds until ``key`` expires, or None if absent."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        return None
