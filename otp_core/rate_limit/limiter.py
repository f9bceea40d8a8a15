"""
Store-Backed Rate Limiter
=========================
Fixed-window attempt counters kept in the OTP store.

Each counter lives under its own key and expires with its window, so
window rollover is handled by the store's TTL.
"""

import math

import structlog

from ..store.base import KeyValueStore
from .models import RateLimitInfo

logger = structlog.get_logger(__name__)


class RateLimiter:
    """
    Fixed-window rate limiter.
    
    Counters are incremented atomically by the store, so concurrent hits
    on one key never lose counts.
    """
    
    def __init__(self, store: KeyValueStore):
        self.store = store
    
    async def check_and_hit(self, key: str, max_attempts: int, window: float) -> RateLimitInfo:
        """
        Decide whether an attempt is allowed and count it if so.
        
        Attempts 1..max_attempts within a window are allowed; later ones are
        rejected until the window expires. Rejected attempts are not counted,
        so the counter never exceeds max_attempts except by concurrent
        callers racing past the check.
        
        Args:
            key: Operation-scoped key (e.g., send vs. validate for a principal)
            max_attempts: Attempts allowed per window
            window: Window size in seconds
            
        Returns:
            RateLimitInfo with decision and quota
        """
        if await self.too_many_attempts(key, max_attempts):
            return await self._blocked(key, max_attempts)
        
        count = await self.store.increment(key, window)
        if count > max_attempts:
            return await self._blocked(key, max_attempts)
        
        return RateLimitInfo(
            allowed=True,
            remaining=max_attempts - count,
            limit=max_attempts,
        )
    
    async def _blocked(self, key: str, max_attempts: int) -> RateLimitInfo:
        retry_after = await self.available_in(key)
        logger.warning("Rate limit exceeded", key=key, limit=max_attempts)
        return RateLimitInfo(
            allowed=False,
            remaining=0,
            limit=max_attempts,
            retry_after=retry_after,
        )
    
    async def too_many_attempts(self, key: str, max_attempts: int) -> bool:
        """Check the counter without counting an attempt."""
        return await self.attempts(key) >= max_attempts
    
    async def hit(self, key: str, window: float) -> int:
        """Count one attempt. Returns the attempts made in the current window."""
        return await self.store.increment(key, window)
    
    async def attempts(self, key: str) -> int:
        raw = await self.store.get(key)
        return int(raw) if raw else 0
    
    async def remaining(self, key: str, max_attempts: int) -> int:
        return max(0, max_attempts - await self.attempts(key))
    
    async def available_in(self, key: str) -> float:
        """Seconds until the current window resets (0 if no window is open)."""
        ttl = await self.store.ttl(key)
        if ttl is None or math.isinf(ttl):
            return 0.0
        return max(0.0, ttl)
    
    async def clear(self, key: str) -> None:
        await self.store.delete(key)
