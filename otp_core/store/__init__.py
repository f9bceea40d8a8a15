"""
OTP Stores
==========
Key-value stores with per-key TTL.
"""

from .base import KeyValueStore
from .in_memory import InMemoryStore
from .redis_store import RedisStore, COMPARE_AND_DELETE_SCRIPT, INCREMENT_SCRIPT

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "RedisStore",
    # Scripts
    "COMPARE_AND_DELETE_SCRIPT",
    "INCREMENT_SCRIPT",
]
