"""
Unit Tests for Code Issuance
============================
"""

import json

import pytest


class TestIssue:
    """Tests for CodeIssuer.issue."""

    @pytest.mark.asyncio
    async def test_issue_stores_hash_with_ttl(self, store, config, clock):
        """The record holds a hash, never the code, and expires with the TTL."""
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config, clock=clock)

        code = await issuer.issue("user-1")

        raw = await store.get("2fa:code:user-1")
        data = json.loads(raw)
        assert set(data) == {"principal_id", "code_hash", "issued_at", "expires_at"}
        assert data["principal_id"] == "user-1"
        assert data["code_hash"].startswith("$argon2id$")
        assert data["code_hash"] != code
        assert data["issued_at"] == clock.now()
        assert data["expires_at"] == clock.now() + 600
        assert await store.ttl("2fa:code:user-1") == pytest.approx(600)

    @pytest.mark.asyncio
    async def test_issue_returns_code_in_range(self, store, config):
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config)

        code = await issuer.issue("user-1")

        assert len(code) == 6
        assert 100000 <= int(code) <= 999999

    @pytest.mark.asyncio
    async def test_issue_overwrites_previous_record(self, store, config):
        """Only one record per principal: a new issue replaces the old one."""
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config)

        await issuer.issue("user-1")
        first = await store.get("2fa:code:user-1")
        await issuer.issue("user-1")
        second = await store.get("2fa:code:user-1")

        assert first != second
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_issue_makes_exactly_one_write(self, store, config):
        from unittest.mock import AsyncMock
        from otp_core.issuer import CodeIssuer

        store.put = AsyncMock(wraps=store.put)
        issuer = CodeIssuer(store, config=config)

        await issuer.issue("user-1")

        assert store.put.await_count == 1

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, store, config):
        """A failed write is a StorageError and leaves nothing behind."""
        from unittest.mock import AsyncMock
        from otp_core.exceptions import StorageError
        from otp_core.issuer import CodeIssuer

        store.put = AsyncMock(side_effect=StorageError("down", operation="put"))
        issuer = CodeIssuer(store, config=config)

        with pytest.raises(StorageError):
            await issuer.issue("user-1")

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_plaintext_code_not_logged(self, store, config):
        from structlog.testing import capture_logs
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config)

        with capture_logs() as logs:
            code = await issuer.issue("user-1")

        assert any(entry["event"] == "OTP issued" for entry in logs)
        assert code not in repr(logs)

    @pytest.mark.asyncio
    async def test_revoke_removes_code(self, store, config):
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config)
        await issuer.issue("user-1")

        await issuer.revoke("user-1")

        assert await store.get("2fa:code:user-1") is None


class TestSend:
    """Tests for CodeIssuer.send."""

    @pytest.mark.asyncio
    async def test_send_delivers_issued_code(self, store, config, clock, delivery):
        from otp_core.issuer import CodeIssuer
        from otp_core.models import SendStatus

        issuer = CodeIssuer(store, config=config, clock=clock, delivery=delivery)

        result = await issuer.send("user-1", "user@example.com")

        assert result.status == SendStatus.SENT
        assert result.issued and result.delivered
        assert result.expires_at == clock.now() + 600
        assert delivery.sent[0][0] == "user@example.com"
        assert len(delivery.last_code) == 6

    @pytest.mark.asyncio
    async def test_delivery_failure_is_reported_not_raised(self, store, config, make_delivery):
        """A failed delivery keeps the code live and reports DELIVERY_FAILED."""
        from otp_core.delivery import DeliveryResult
        from otp_core.issuer import CodeIssuer
        from otp_core.models import SendStatus

        delivery = make_delivery(result=DeliveryResult.failed("smtp_550", "mailbox unavailable"))
        issuer = CodeIssuer(store, config=config, delivery=delivery)

        result = await issuer.send("user-1", "user@example.com")

        assert result.status == SendStatus.DELIVERY_FAILED
        assert result.issued is True
        assert result.delivered is False
        assert result.error_code == "smtp_550"
        assert await store.get("2fa:code:user-1") is not None

    @pytest.mark.asyncio
    async def test_delivery_exception_is_reported_not_raised(self, store, config, make_delivery):
        from otp_core.issuer import CodeIssuer
        from otp_core.models import SendStatus

        delivery = make_delivery(error=ConnectionError("smtp down"))
        issuer = CodeIssuer(store, config=config, delivery=delivery)

        result = await issuer.send("user-1", "user@example.com")

        assert result.status == SendStatus.DELIVERY_FAILED
        assert result.error_code == "ConnectionError"
        assert result.error_message == "smtp down"

    @pytest.mark.asyncio
    async def test_sixth_send_in_window_is_throttled(self, store, config, clock, delivery):
        """Default throttle: 5 sends per 60 seconds per principal."""
        from otp_core.issuer import CodeIssuer
        from otp_core.models import SendStatus

        issuer = CodeIssuer(store, config=config, clock=clock, delivery=delivery)

        for _ in range(5):
            assert (await issuer.send("user-1", "a@example.com")).status == SendStatus.SENT

        result = await issuer.send("user-1", "a@example.com")

        assert result.status == SendStatus.RATE_LIMITED
        assert result.issued is False
        assert result.retry_after == pytest.approx(60)
        assert len(delivery.sent) == 5

        # Other principals are unaffected
        assert (await issuer.send("user-2", "b@example.com")).status == SendStatus.SENT

        clock.advance(60)
        assert (await issuer.send("user-1", "a@example.com")).status == SendStatus.SENT

    @pytest.mark.asyncio
    async def test_send_without_channel_is_configuration_error(self, store, config):
        from otp_core.exceptions import ConfigurationError
        from otp_core.issuer import CodeIssuer

        issuer = CodeIssuer(store, config=config)

        with pytest.raises(ConfigurationError):
            await issuer.send("user-1", "user@example.com")

    @pytest.mark.asyncio
    async def test_callback_delivery(self, store, config):
        from otp_core.delivery import CallbackDelivery
        from otp_core.issuer import CodeIssuer
        from otp_core.models import SendStatus

        received = []

        async def push(destination, code):
            received.append((destination, code))
            return False

        issuer = CodeIssuer(store, config=config, delivery=CallbackDelivery(push))

        result = await issuer.send("user-1", "device-token")

        assert result.status == SendStatus.DELIVERY_FAILED
        assert result.error_code == "delivery_rejected"
        assert received[0][0] == "device-token"
