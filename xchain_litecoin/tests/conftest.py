"""
Pytest configuration and fixtures for xchain_litecoin tests.
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
    mock.get_suggested_fee_rate.return_value = 2.0
    return mock


@pytest.fixture
def broadcaster() -> AsyncMock:
    mock = AsyncMock(spec=Broadcaster)
    mock.broadcast.return_value = "cc" * 32
    return mock
