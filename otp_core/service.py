"""
OTP Service
===========
Caller-facing facade wiring issuer, validator and rate limiter around one
store, one delivery channel and one clock.

Usage:
    store = RedisStore.from_url("redis://localhost:6379/0")
    service = OTPService(store, delivery=EmailDelivery(...))

    result = await service.request_code(user.id, user.email)
    outcome = await service.submit_code(user.id, form.code)
"""

from typing import Optional

from .clock import Clock, SystemClock
from .config import OTPConfig
from .delivery import DeliveryChannel
from .issuer import CodeIssuer
from .locks import PrincipalLocks
from .models import SendResult, ValidationOutcome
from .rate_limit import RateLimiter
from .store.base import KeyValueStore
from .validator import CodeValidator


class OTPService:
    """Explicitly constructed service; every collaborator is injected."""

    def __init__(
        self,
        store: KeyValueStore,
        delivery: Optional[DeliveryChannel] = None,
        config: Optional[OTPConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.config = config or OTPConfig()
        self.clock = clock or SystemClock()
        self.rate_limiter = RateLimiter(store)

        locks = PrincipalLocks()
        self.issuer = CodeIssuer(
            store,
            config=self.config,
            clock=self.clock,
            delivery=delivery,
            rate_limiter=self.rate_limiter,
            locks=locks,
        )
        self.validator = CodeValidator(
            store,
            config=self.config,
            clock=self.clock,
            rate_limiter=self.rate_limiter,
            locks=locks,
        )

    async def request_code(self, principal_id: str, destination: str) -> SendResult:
        """Issue and deliver a code for an authenticated principal."""
        return await self.issuer.send(principal_id, destination)

    async def submit_code(self, principal_id: str, code: str) -> ValidationOutcome:
        """Validate a code submitted by a principal."""
        return await self.validator.validate(principal_id, code)

    async def issue_code(self, principal_id: str) -> str:
        """Issue a code without delivering it."""
        return await self.issuer.issue(principal_id)

    async def revoke(self, principal_id: str) -> None:
        await self.issuer.revoke(principal_id)

    async def close(self) -> None:
        await self.store.close()
