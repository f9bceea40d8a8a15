"""
Delivery Channels
=================
Interface the OTP core uses to hand a plaintext code to email, SMS or push
senders. Sending itself is implemented by the host application.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


@dataclass
class DeliveryResult:
    """Result of a delivery attempt."""
    success: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls) -> "DeliveryResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error_code: str, error_message: Optional[str] = None) -> "DeliveryResult":
        return cls(success=False, error_code=error_code, error_message=error_message)


class DeliveryChannel(ABC):
    """
    Abstract base class for code delivery.

    Implementations should report failures through DeliveryResult; an
    exception escaping ``send`` is treated the same as a failed result.
    """

    name: str = "base"

    @abstractmethod
    async def send(self, destination: str, code: str) -> DeliveryResult:
        """
        Deliver a code.

        Args:
            destination: Email address, E.164 phone number or device token
            code: Plaintext code

        Returns:
            DeliveryResult
        """
        ...


class CallbackDelivery(DeliveryChannel):
    """Delivery channel wrapping an async callable ``(destination, code) -> bool``."""

    name = "callback"

    def __init__(self, callback: Callable[[str, str], Awaitable[bool]]):
        self.callback = callback

    async def send(self, destination: str, code: str) -> DeliveryResult:
        if await self.callback(destination, code):
            return DeliveryResult.ok()
        return DeliveryResult.failed("delivery_rejected")
