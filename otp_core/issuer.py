"""
Code Issuer
===========
Generates one-time codes, stores their hashes and hands the plaintext back
for delivery.
"""

from typing import Optional, Tuple

import structlog

from .clock import Clock, SystemClock
from .config import OTPConfig
from .delivery import DeliveryChannel, DeliveryResult
from .exceptions import ConfigurationError
from .hashing import generate_code, hash_code, hasher_for
from .keys import SEND_OPERATION, code_key, throttle_key
from .locks import PrincipalLocks
from .models import OtpRecord, SendResult, SendStatus
from .rate_limit import RateLimiter
from .store.base import KeyValueStore

logger = structlog.get_logger(__name__)


class CodeIssuer:
    """Issues codes for principals. At most one live code exists per principal."""

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[OTPConfig] = None,
        clock: Optional[Clock] = None,
        delivery: Optional[DeliveryChannel] = None,
        rate_limiter: Optional[RateLimiter] = None,
        locks: Optional[PrincipalLocks] = None,
    ):
        self.store = store
        self.config = config or OTPConfig()
        self.clock = clock or SystemClock()
        self.delivery = delivery
        self.rate_limiter = rate_limiter or RateLimiter(store)
        self.locks = locks or PrincipalLocks()
        self._hasher = hasher_for(self.config)

    async def issue(self, principal_id: str) -> str:
        """
        Issue a fresh code, replacing any live code for the principal.

        Args:
            principal_id: Subject the code is issued for

        Returns:
            Plaintext code, for delivery only

        Raises:
            StorageError: The record could not be written
        """
        return (await self._issue(principal_id))[0]

    async def _issue(self, principal_id: str) -> Tuple[str, OtpRecord]:
        code = generate_code(
            length=self.config.code_length,
            leading_zeros=self.config.leading_zeros,
        )
        code_hash = await hash_code(code, self._hasher)

        async with self.locks.get(principal_id):
            now = self.clock.now()
            record = OtpRecord(
                principal_id=principal_id,
                code_hash=code_hash,
                issued_at=now,
                expires_at=now + self.config.code_ttl_seconds,
            )
            await self.store.put(
                code_key(self.config.key_prefix, principal_id),
                record.to_json(),
                self.config.code_ttl_seconds,
            )

        logger.info(
            "OTP issued",
            principal_id=principal_id,
            expires_in=self.config.code_ttl_seconds,
        )
        return code, record

    async def send(self, principal_id: str, destination: str) -> SendResult:
        """
        Throttle, issue and deliver a code.

        Delivery failure does not undo issuance: the stored code stays valid
        and the failure is reported in the result.

        Args:
            principal_id: Subject the code is issued for
            destination: Address understood by the delivery channel

        Returns:
            SendResult with SENT, DELIVERY_FAILED or RATE_LIMITED
        """
        if self.delivery is None:
            raise ConfigurationError("No delivery channel configured")

        throttle = await self.rate_limiter.check_and_hit(
            throttle_key(self.config.key_prefix, SEND_OPERATION, principal_id),
            self.config.send_max_attempts,
            self.config.send_window_seconds,
        )
        if not throttle.allowed:
            logger.warning("OTP send throttled", principal_id=principal_id)
            return SendResult(status=SendStatus.RATE_LIMITED, retry_after=throttle.retry_after)

        code, record = await self._issue(principal_id)

        try:
            delivery = await self.delivery.send(destination, code)
        except Exception as e:
            delivery = DeliveryResult.failed(type(e).__name__, str(e))

        if not delivery.success:
            logger.error(
                "OTP delivery failed",
                principal_id=principal_id,
                channel=self.delivery.name,
                error_code=delivery.error_code,
                error=delivery.error_message,
            )
            return SendResult(
                status=SendStatus.DELIVERY_FAILED,
                expires_at=record.expires_at,
                error_code=delivery.error_code,
                error_message=delivery.error_message,
            )

        logger.info("OTP sent", principal_id=principal_id, channel=self.delivery.name)
        return SendResult(status=SendStatus.SENT, expires_at=record.expires_at)

    async def revoke(self, principal_id: str) -> None:
        """Invalidate any live code for the principal."""
        async with self.locks.get(principal_id):
            await self.store.delete(code_key(self.config.key_prefix, principal_id))
        logger.info("OTP revoked", principal_id=principal_id)
