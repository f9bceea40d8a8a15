"""
OTP Exceptions
==============
Exception classes raised by the OTP core.

Expected outcomes (invalid, expired, rate limited, delivery failed) are
returned as values, not raised.
"""

from typing import Optional


class OTPError(Exception):
    """Base exception for all OTP core errors."""
    pass


class StorageError(OTPError):
    """Raised when the backing store is unreachable, times out or rejects a write."""
    
    def __init__(self, message: str, operation: str = "unknown", key: Optional[str] = None):
        self.message = message
        self.operation = operation
        self.key = key
        super().__init__(f"[{operation}] {message}")


class ConfigurationError(OTPError, ValueError):
    """Raised when OTP configuration values are out of range."""
    pass
