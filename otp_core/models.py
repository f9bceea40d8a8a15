"""
OTP Models
==========
Data models and enums for OTP issuance and validation.
"""

import json
from dataclasses import dataclass, asdict
from typing import Optional
from enum import Enum


class ValidationOutcome(str, Enum):
    """Result of submitting a code for validation."""
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"
    RATE_LIMITED = "rate_limited"


class SendStatus(str, Enum):
    """Result of requesting a code be issued and delivered."""
    SENT = "sent"
    DELIVERY_FAILED = "delivery_failed"
    RATE_LIMITED = "rate_limited"


@dataclass
class OtpRecord:
    """The stored form of a live OTP. Holds the hash only, never the code."""
    principal_id: str
    code_hash: str
    issued_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_json(self) -> str:
        return json.dumps(asdict(self), separators=(',', ':'))

    @classmethod
    def from_json(cls, raw: str) -> "OtpRecord":
        """Parse a stored record. Raises ValueError for any unreadable payload."""
        try:
            data = json.loads(raw)
            return cls(
                principal_id=str(data["principal_id"]),
                code_hash=str(data["code_hash"]),
                issued_at=float(data["issued_at"]),
                expires_at=float(data["expires_at"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise ValueError(f"Malformed OTP record: {type(e).__name__}") from e


@dataclass
class SendResult:
    """
    Outcome of a send request.

    Issuance and delivery are reported separately: a DELIVERY_FAILED
    result still means a live code was stored.
    """
    status: SendStatus
    expires_at: Optional[float] = None
    retry_after: Optional[float] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def issued(self) -> bool:
        return self.status is not SendStatus.RATE_LIMITED

    @property
    def delivered(self) -> bool:
        return self.status is SendStatus.SENT
