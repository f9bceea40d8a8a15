"""
Clocks
======
Injectable time sources. Expiry and throttle windows are computed against
a Clock so tests can move time forward without sleeping.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current time in epoch seconds."""
    
    @abstractmethod
    def now(self) -> float:
        ...


class SystemClock(Clock):
    """Wall-clock time."""
    
    def now(self) -> float:
        return time.time()


class ManualClock(Clock):
    """
    Clock that only moves when told to.
    
    Used with InMemoryStore to test TTL expiry and window rollover.
    """
    
    def __init__(self, start: float = 1_700_000_000.0):
        self._now = float(start)
    
    def now(self) -> float:
        return self._now
    
    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now
    
    def set(self, timestamp: float) -> None:
        self._now = float(timestamp)
