"""
Unit Tests for OTP Configuration
================================
"""

import pytest


class TestOTPConfig:
    """Tests for defaults, environment overrides and validation."""

    def test_defaults(self):
        from otp_core.config import OTPConfig

        config = OTPConfig()

        assert config.code_length == 6
        assert config.code_ttl_seconds == 600
        assert config.send_max_attempts == 5
        assert config.send_window_seconds == 60
        assert config.validate_max_attempts == 5
        assert config.key_prefix == "2fa"
        assert config.leading_zeros is False

    def test_from_env_overrides(self):
        """OTP_* variables override defaults."""
        from otp_core.config import OTPConfig

        config = OTPConfig.from_env({
            "OTP_CODE_LENGTH": "8",
            "OTP_CODE_TTL_SECONDS": "300",
            "OTP_LEADING_ZEROS": "true",
            "OTP_VALIDATE_MAX_ATTEMPTS": "3",
            "OTP_KEY_PREFIX": "mfa",
        })

        assert config.code_length == 8
        assert config.code_ttl_seconds == 300
        assert config.leading_zeros is True
        assert config.validate_max_attempts == 3
        assert config.key_prefix == "mfa"
        assert config.send_max_attempts == 5

    def test_from_env_empty_mapping_gives_defaults(self):
        from otp_core.config import OTPConfig

        assert OTPConfig.from_env({}) == OTPConfig()

    def test_from_env_rejects_non_integer(self):
        from otp_core.config import OTPConfig
        from otp_core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            OTPConfig.from_env({"OTP_CODE_LENGTH": "six"})

    @pytest.mark.parametrize("overrides", [
        {"code_length": 2},
        {"code_ttl_seconds": 0},
        {"send_max_attempts": 0},
        {"validate_window_seconds": -1},
        {"hash_memory_cost": 4},
        {"key_prefix": ""},
        {"key_prefix": "a:b"},
    ])
    def test_invalid_values_rejected(self, overrides):
        """Out-of-range settings fail fast at construction."""
        from otp_core.config import OTPConfig
        from otp_core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            OTPConfig(**overrides)

    def test_configuration_error_is_value_error(self):
        from otp_core.config import OTPConfig

        with pytest.raises(ValueError):
            OTPConfig(code_length=20)
