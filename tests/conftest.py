"""
Pytest configuration for threshold-wallet tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
if str(package_src) not in sys.path:
    sys.path.insert(0, str(package_src))

# Set test environment
os.environ.setdefault("THRESHOLD_WALLET_ENVIRONMENT", "dev")

from threshold_wallet import (  # noqa: E402
    EventLog,
    MultisigController,
    ValueVault,
    WalletSettings,
)

ALICE = "0xa11ce00000000000000000000000000000000001"
BOB = "0xb0b0000000000000000000000000000000000002"
CAROL = "0xca201000000000000000000000000000000000003"
MALLORY = "0x3a11020000000000000000000000000000000004"
RECIPIENT = "0x2ec1e00000000000000000000000000000000005"


@pytest.fixture
def settings():
    """Settings isolated from any .env file."""
    return WalletSettings(_env_file=None)


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def vault(events):
    """Vault funded with 10 units."""
    v = ValueVault(balance=10)
    v.bind_events(events)
    return v


@pytest.fixture
def wallet(vault, events, settings):
    """Owners Alice, Bob and Carol; two approvals required."""
    return MultisigController(
        [ALICE, BOB, CAROL],
        2,
        action=vault,
        events=events,
        settings=settings,
    )
