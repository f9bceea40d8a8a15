"""
OTP Core Library
================
Issue, store and validate short-lived one-time passcodes used as a second
authentication factor.
"""

__version__ = "1.0.0"

# Configuration
from otp_core.config import OTPConfig

# Exceptions
from otp_core.exceptions import OTPError, StorageError, ConfigurationError

# Models
from otp_core.models import OtpRecord, ValidationOutcome, SendStatus, SendResult

# Clock
from otp_core.clock import Clock, SystemClock, ManualClock

# Hashing
from otp_core.hashing import generate_code, hash_code, verify_code, get_cached_hasher

# Stores
from otp_core.store import KeyValueStore, InMemoryStore, RedisStore

# Rate Limiting
from otp_core.rate_limit import RateLimiter, RateLimitInfo, RateLimitResult

# Delivery
from otp_core.delivery import DeliveryChannel, DeliveryResult, CallbackDelivery

# Components
from otp_core.issuer import CodeIssuer
from otp_core.validator import CodeValidator
from otp_core.service import OTPService

__all__ = [
    # Configuration
    "OTPConfig",
    # Exceptions
    "OTPError",
    "StorageError",
    "ConfigurationError",
    # Models
    "OtpRecord",
    "ValidationOutcome",
    "SendStatus",
    "SendResult",
    # Clock
    "Clock",
    "SystemClock",
    "ManualClock",
    # Hashing
    "generate_code",
    "hash_code",
    "verify_code",
    "get_cached_hasher",
    # Stores
    "KeyValueStore",
    "InMemoryStore",
    "RedisStore",
    # Rate Limiting
    "RateLimiter",
    "RateLimitInfo",
    "RateLimitResult",
    # Delivery
    "DeliveryChannel",
    "DeliveryResult",
    "CallbackDelivery",
    # Components
    "CodeIssuer",
    "CodeValidator",
    "OTPService",
]
