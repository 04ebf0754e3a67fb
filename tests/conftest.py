"""
Pytest configuration and shared fixtures for SupplyWatch tests.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from monitor.config_store import ConfigurationStore

TOKEN = to_checksum_address("0x" + "ab" * 20)
OWNER = to_checksum_address("0x" + "11" * 20)
STRANGER = to_checksum_address("0x" + "22" * 20)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Send structured logs to a temp dir and drop SUPPLYWATCH_* overrides."""
    monkeypatch.setenv("SUPPLYWATCH_LOG_DIR", str(tmp_path / "logs"))
    for name in (
        "SUPPLYWATCH_CONFIG_PATH",
        "SUPPLYWATCH_RPC_URL",
        "SUPPLYWATCH_TARGET_TOKEN",
        "SUPPLYWATCH_MAX_ALLOWED_INCREASE",
        "SUPPLYWATCH_OWNER",
        "TELEGRAM_ALERTS_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def stranger():
    return STRANGER


@pytest.fixture
def active_store():
    """Store with a target and a threshold of 100."""
    return ConfigurationStore(owner=OWNER, target_token=TOKEN, max_allowed_increase=100)


@pytest.fixture
def supply_reader():
    """Reader whose total_supply() returns 1000 unless reconfigured."""
    reader = MagicMock()
    reader.total_supply.return_value = 1000
    return reader
