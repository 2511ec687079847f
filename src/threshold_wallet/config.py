"""Canonical configuration surface for threshold wallets."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

ZERO_ADDRESS = "0x" + "0" * 40


class WalletSettings(BaseSettings):
    """Threshold wallet configuration."""

    # Environment
    environment: Literal["dev", "sandbox", "prod"] = "dev"

    # Logging
    log_level: str = "INFO"
    # None = JSON everywhere except dev
    log_json: Optional[bool] = None

    # Identity treated as "no recipient"
    null_identity: str = ZERO_ADDRESS

    # Owner list policy: reject duplicates, or collapse them to one vote
    allow_duplicate_owners: bool = False

    # Re-attempt a failed execution when a further owner approves
    retry_on_approval: bool = True

    # 0 = unlimited
    max_payload_bytes: int = 0

    class Config:
        env_prefix = "THRESHOLD_WALLET_"
        env_file = ".env"
        extra = "ignore"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("max_payload_bytes")
    @classmethod
    def validate_max_payload_bytes(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_payload_bytes must be >= 0")
        return v

    @property
    def json_logs(self) -> bool:
        if self.log_json is None:
            return self.environment != "dev"
        return self.log_json

    def is_null_identity(self, identity: object) -> bool:
        """True for None, empty identities and the configured null identity."""
        if identity is None:
            return True
        if isinstance(identity, str):
            return not identity or identity.lower() == self.null_identity.lower()
        return False


@lru_cache
def load_settings(env_file: str | None = None) -> WalletSettings:
    """Load WalletSettings once per process to keep controllers consistent."""
    env_path = Path(env_file) if env_file else None
    return WalletSettings(_env_file=env_path)
