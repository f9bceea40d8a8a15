"""
Code Validator
==============
Checks submitted codes against stored hashes with throttling and
single-use enforcement.
"""

from typing import Optional

import structlog

from .clock import Clock, SystemClock
from .config import OTPConfig
from .hashing import dummy_hash_for, hasher_for, verify_code
from .keys import VALIDATE_OPERATION, code_key, throttle_key
from .locks import PrincipalLocks
from .models import OtpRecord, ValidationOutcome
from .rate_limit import RateLimiter
from .store.base import KeyValueStore

logger = structlog.get_logger(__name__)


class CodeValidator:
    """
    Validates codes for principals.

    Calls for the same principal are serialized; calls for different
    principals never wait on each other.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[OTPConfig] = None,
        clock: Optional[Clock] = None,
        rate_limiter: Optional[RateLimiter] = None,
        locks: Optional[PrincipalLocks] = None,
    ):
        self.store = store
        self.config = config or OTPConfig()
        self.clock = clock or SystemClock()
        self.rate_limiter = rate_limiter or RateLimiter(store)
        self.locks = locks or PrincipalLocks()
        self._hasher = hasher_for(self.config)
        self._dummy_hash = dummy_hash_for(self.config)

    async def validate(self, principal_id: str, submitted_code: str) -> ValidationOutcome:
        """
        Validate a submitted code.

        Args:
            principal_id: Subject the code was issued for
            submitted_code: Code entered by the user

        Returns:
            VALID (code consumed), INVALID (wrong code, attempt counted),
            EXPIRED (nothing live to check against) or RATE_LIMITED

        Raises:
            StorageError: The store failed; the call is not retried
        """
        prefix = self.config.key_prefix
        attempts_key = throttle_key(prefix, VALIDATE_OPERATION, principal_id)
        record_key = code_key(prefix, principal_id)
        code = (submitted_code or "").strip()

        async with self.locks.get(principal_id):
            if await self.rate_limiter.too_many_attempts(
                attempts_key, self.config.validate_max_attempts
            ):
                logger.warning("OTP validation throttled", principal_id=principal_id)
                return ValidationOutcome.RATE_LIMITED

            raw = await self.store.get(record_key)
            record = None
            if raw:
                try:
                    record = OtpRecord.from_json(raw)
                except ValueError as e:
                    # Unreadable records are treated as absent; they cannot be consumed
                    logger.warning("Unreadable OTP record", principal_id=principal_id, error=str(e))

            if record is None or record.is_expired(self.clock.now()):
                await verify_code(code, self._dummy_hash, self._hasher)
                logger.info("OTP validation found no live code", principal_id=principal_id)
                return ValidationOutcome.EXPIRED

            if not await verify_code(code, record.code_hash, self._hasher):
                attempts = await self.rate_limiter.hit(
                    attempts_key, self.config.validate_window_seconds
                )
                logger.warning(
                    "Invalid OTP attempt",
                    principal_id=principal_id,
                    remaining=max(0, self.config.validate_max_attempts - attempts),
                )
                return ValidationOutcome.INVALID

            # Consume only the exact record that was verified
            if not await self.store.compare_and_delete(record_key, raw):
                logger.warning("OTP consumed or replaced concurrently", principal_id=principal_id)
                return ValidationOutcome.EXPIRED

            await self.rate_limiter.clear(attempts_key)

        logger.info("OTP verified successfully", principal_id=principal_id)
        return ValidationOutcome.VALID
