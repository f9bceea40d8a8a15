"""
Shared fixtures for OTP core tests.
"""

from typing import List, Tuple

import pytest

from otp_core.clock import ManualClock
from otp_core.config import OTPConfig
from otp_core.delivery import DeliveryChannel, DeliveryResult
from otp_core.store import InMemoryStore


class RecordingDelivery(DeliveryChannel):
    """Delivery channel that remembers what it was asked to send."""
    
    name = "recording"
    
    def __init__(self, result: DeliveryResult = None, error: Exception = None):
        self.result = result or DeliveryResult.ok()
        self.error = error
        self.sent: List[Tuple[str, str]] = []
    
    async def send(self, destination: str, code: str) -> DeliveryResult:
        self.sent.append((destination, code))
        if self.error is not None:
            raise self.error
        return self.result
    
    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture
def config():
    # Cheap Argon2 parameters keep the suite fast
    return OTPConfig(hash_time_cost=1, hash_memory_cost=1024, hash_parallelism=1)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture
def delivery():
    return RecordingDelivery()


@pytest.fixture
def service(store, delivery, config, clock):
    from otp_core.service import OTPService
    
    return OTPService(store, delivery=delivery, config=config, clock=clock)


@pytest.fixture
def make_delivery():
    return RecordingDelivery


@pytest.fixture
def fast_hasher(config):
    from otp_core.hashing import hasher_for
    
    return hasher_for(config)
