"""
Pytest configuration and fixtures for xchain_bitcoin tests.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from xchain_client.explorer import Broadcaster, Explorer


@pytest.fixture
def test_mnemonic() -> str:
    """Test mnemonic (BIP39 test vector)"""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def explorer() -> AsyncMock:
    mock = AsyncMock(spec=Explorer)
    mock.get_suggested_fee_rate.return_value = 20.0
    mock.get_unspent_outputs.return_value = []
    return mock


@pytest.fixture
def broadcaster() -> AsyncMock:
    return AsyncMock(spec=Broadcaster)
