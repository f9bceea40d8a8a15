"""
OTP Hashing Utilities
=====================
Code generation plus slow, salted hashing and constant-time verification.

Codes are hashed with Argon2id. Hashing runs in a thread pool executor so
the event loop is never blocked by the deliberately slow KDF.
"""

import asyncio
import secrets
from functools import lru_cache

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from .config import OTPConfig


def generate_code(length: int = 6, leading_zeros: bool = False) -> str:
    """
    Generate a numeric OTP from a cryptographically secure source.

    Args:
        length: Number of digits
        leading_zeros: Draw from the full 0..10**length - 1 space
            (zero-padded) instead of 10**(length-1)..10**length - 1

    Returns:
        OTP string of exactly ``length`` digits
    """
    if leading_zeros:
        return str(secrets.randbelow(10 ** length)).zfill(length)

    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(10 ** length - low))


@lru_cache(maxsize=8)
def get_cached_hasher(
    time_cost: int = 2,
    memory_cost: int = 19456,
    parallelism: int = 1,
) -> PasswordHasher:
    """Get a cached Argon2id hasher for the given cost parameters."""
    return PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=32,
        salt_len=16,
        type=Type.ID,
    )


def hasher_for(config: OTPConfig) -> PasswordHasher:
    return get_cached_hasher(
        config.hash_time_cost,
        config.hash_memory_cost,
        config.hash_parallelism,
    )


@lru_cache(maxsize=8)
def _dummy_hash(time_cost: int, memory_cost: int, parallelism: int) -> str:
    hasher = get_cached_hasher(time_cost, memory_cost, parallelism)
    return hasher.hash(secrets.token_hex(8))


def dummy_hash_for(config: OTPConfig) -> str:
    """
    A throwaway hash with the configured cost.

    Verifying against it costs the same as verifying a real record, which
    keeps "no code stored" indistinguishable from "wrong code" by timing.
    """
    return _dummy_hash(
        config.hash_time_cost,
        config.hash_memory_cost,
        config.hash_parallelism,
    )


def hash_code_sync(code: str, hasher: PasswordHasher) -> str:
    """Synchronous version of hash_code (use async version when possible)."""
    if not code:
        raise ValueError("Code cannot be empty")
    return hasher.hash(code)


def verify_code_sync(code: str, code_hash: str, hasher: PasswordHasher) -> bool:
    """
    Verify a code against its stored hash in constant time.

    Args:
        code: User-provided code
        code_hash: Argon2id PHC string
        hasher: Argon2 hasher to verify with

    Returns:
        True if the code matches
    """
    if not code or not code_hash:
        return False

    if not code_hash.startswith("$argon2"):
        return False

    try:
        return hasher.verify(code_hash, code)
    except (VerificationError, InvalidHashError):
        return False


async def hash_code(code: str, hasher: PasswordHasher) -> str:
    """
    Hash a code with Argon2id off the event loop.

    Returns:
        Argon2id PHC string (algorithm, parameters, salt and hash)
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, hash_code_sync, code, hasher)


async def verify_code(code: str, code_hash: str, hasher: PasswordHasher) -> bool:
    """Verify a code against its hash off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, verify_code_sync, code, code_hash, hasher)

