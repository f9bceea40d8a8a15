"""
OTP Configuration
=================
Process-wide OTP settings, read once at startup.

Defaults can be overridden through environment variables with
``OTPConfig.from_env()``.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

ENV_PREFIX = "OTP_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class OTPConfig:
    """Configuration for OTP issuance, validation and throttling."""
    code_length: int = 6
    code_ttl_seconds: int = 600  # 10 minutes
    leading_zeros: bool = False  # True: 000000-999999, False: 100000-999999

    send_max_attempts: int = 5
    send_window_seconds: int = 60
    validate_max_attempts: int = 5
    validate_window_seconds: int = 60

    # Argon2id cost, tuned for 6-digit codes rather than passwords
    hash_time_cost: int = 2
    hash_memory_cost: int = 19456  # KiB
    hash_parallelism: int = 1

    key_prefix: str = "2fa"

    def __post_init__(self):
        if not 4 <= self.code_length <= 12:
            raise ConfigurationError("code_length must be between 4 and 12")
        for name in (
            "code_ttl_seconds",
            "send_max_attempts",
            "send_window_seconds",
            "validate_max_attempts",
            "validate_window_seconds",
            "hash_time_cost",
            "hash_parallelism",
        ):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be a positive integer")
        if self.hash_memory_cost < 8 * self.hash_parallelism:
            raise ConfigurationError(
                "hash_memory_cost must be at least 8 KiB per parallel lane"
            )
        if not self.key_prefix or ":" in self.key_prefix:
            raise ConfigurationError("key_prefix must be non-empty and contain no ':'")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OTPConfig":
        """
        Build a config from ``OTP_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            OTPConfig with overrides applied
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: int) -> int:
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or raw == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None

        leading_zeros = env.get(f"{ENV_PREFIX}LEADING_ZEROS")

        return cls(
            code_length=_int("CODE_LENGTH", defaults.code_length),
            code_ttl_seconds=_int("CODE_TTL_SECONDS", defaults.code_ttl_seconds),
            leading_zeros=(
                leading_zeros.strip().lower() in _TRUE_VALUES
                if leading_zeros is not None
                else defaults.leading_zeros
            ),
            send_max_attempts=_int("SEND_MAX_ATTEMPTS", defaults.send_max_attempts),
            send_window_seconds=_int("SEND_WINDOW_SECONDS", defaults.send_window_seconds),
            validate_max_attempts=_int("VALIDATE_MAX_ATTEMPTS", defaults.validate_max_attempts),
            validate_window_seconds=_int(
                "VALIDATE_WINDOW_SECONDS", defaults.validate_window_seconds
            ),
            hash_time_cost=_int("HASH_TIME_COST", defaults.hash_time_cost),
            hash_memory_cost=_int("HASH_MEMORY_COST", defaults.hash_memory_cost),
            hash_parallelism=_int("HASH_PARALLELISM", defaults.hash_parallelism),
            key_prefix=env.get(f"{ENV_PREFIX}KEY_PREFIX") or defaults.key_prefix,
        )
