"""
Rate Limiting
=============
Fixed-window attempt throttling on top of the OTP store.
"""

from .models import RateLimitResult, RateLimitInfo
from .limiter import RateLimiter

__all__ = [
    # Models
    "RateLimitResult",
    "RateLimitInfo",
    # Limiter
    "RateLimiter",
]
