"""
Per-Principal Locks
===================
Serializes issue/validate calls for one principal without a global lock.
"""

import asyncio
import weakref


class PrincipalLocks:
    """
    Registry handing out one asyncio.Lock per principal.
    
    Locks are held weakly and disappear once no call is using them.
    """
    
    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
    
    def get(self, principal_id: str) -> asyncio.Lock:
        lock = self._locks.get(principal_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[principal_id] = lock
        return lock
    
    def __len__(self) -> int:
        return len(self._locks)
