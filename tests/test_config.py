"""
Tests for threshold_wallet.config.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from threshold_wallet.config import ZERO_ADDRESS, WalletSettings, load_settings


class TestWalletSettings:
    """Tests for WalletSettings."""

    def test_defaults(self, monkeypatch):
        """Should default to rejecting duplicates and retrying on approval."""
        for name in ("LOG_LEVEL", "ALLOW_DUPLICATE_OWNERS", "RETRY_ON_APPROVAL", "NULL_IDENTITY"):
            monkeypatch.delenv(f"THRESHOLD_WALLET_{name}", raising=False)

        settings = WalletSettings(_env_file=None)

        assert settings.null_identity == ZERO_ADDRESS
        assert settings.allow_duplicate_owners is False
        assert settings.retry_on_approval is True
        assert settings.max_payload_bytes == 0
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        """Should read THRESHOLD_WALLET_* variables."""
        monkeypatch.setenv("THRESHOLD_WALLET_ALLOW_DUPLICATE_OWNERS", "true")
        monkeypatch.setenv("THRESHOLD_WALLET_RETRY_ON_APPROVAL", "false")
        monkeypatch.setenv("THRESHOLD_WALLET_LOG_LEVEL", "debug")

        settings = WalletSettings(_env_file=None)

        assert settings.allow_duplicate_owners is True
        assert settings.retry_on_approval is False
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Should reject unknown log levels."""
        with pytest.raises(ValidationError):
            WalletSettings(_env_file=None, log_level="LOUD")

    def test_negative_payload_limit(self):
        """Should reject a negative payload limit."""
        with pytest.raises(ValidationError):
            WalletSettings(_env_file=None, max_payload_bytes=-1)

    @pytest.mark.parametrize(
        "identity, expected",
        [
            (None, True),
            ("", True),
            (ZERO_ADDRESS, True),
            ("0X" + "0" * 40, True),
            ("0x" + "0" * 39 + "1", False),
            ("alice", False),
        ],
    )
    def test_is_null_identity(self, identity, expected):
        """Should recognise None, empty and the configured null identity."""
        settings = WalletSettings(_env_file=None)

        assert settings.is_null_identity(identity) is expected

    def test_custom_null_identity(self):
        """Should honour a configured null identity."""
        settings = WalletSettings(_env_file=None, null_identity="nobody")

        assert settings.is_null_identity("nobody") is True
        assert settings.is_null_identity(ZERO_ADDRESS) is False

    @pytest.mark.parametrize(
        "environment, log_json, expected",
        [
            ("dev", None, False),
            ("sandbox", None, True),
            ("prod", None, True),
            ("dev", True, True),
            ("prod", False, False),
        ],
    )
    def test_json_logs(self, environment, log_json, expected):
        """Should log JSON outside dev unless explicitly overridden."""
        settings = WalletSettings(_env_file=None, environment=environment, log_json=log_json)

        assert settings.json_logs is expected


class TestLoadSettings:
    """Tests for load_settings."""

    def test_cached(self):
        """Should return the same instance for the same arguments."""
        assert load_settings() is load_settings()
