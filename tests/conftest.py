"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Keep a developer's .env or shell settings out of the tests
os.environ["THORSDK_NETWORK"] = "testnet"
os.environ.pop("THORSDK_WALLET_SEED_PHRASE", None)

from thorsdk.chains import Network
from thorsdk.clients.multichain import MultiChain
from thorsdk.config import Settings
from thorsdk.sdk import PoolFeedSDK

# BIP39 test vector (never use with real funds)
TEST_PHRASE = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)

BNB_POOL = {
    "asset": "BNB.BNB",
    "assetDepth": "100000000000",  # 1,000 BNB
    "runeDepth": "5000000000000",  # 50,000 RUNE
    "assetPriceUSD": "300.0",
    "status": "available",
}

BUSD_POOL = {
    "asset": "BNB.BUSD",
    "assetDepth": "10000000000000",  # 100,000 BUSD
    "runeDepth": "10000000000000",  # 100,000 RUNE
    "assetPriceUSD": "1.0",
    "status": "available",
}

ETH_POOL = {
    "asset": "ETH.ETH",
    "assetDepth": "200000000000",  # 2,000 ETH
    "runeDepth": "40000000000000",  # 400,000 RUNE
    "status": "available",
}


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file."""
    return Settings(_env_file=None, network=Network.TESTNET)


@pytest.fixture
def pool_records() -> list[dict]:
    """Midgard /pools payload."""
    return [dict(BNB_POOL), dict(BUSD_POOL), dict(ETH_POOL)]


@pytest.fixture
def midgard(pool_records):
    """Midgard client returning the seeded pools."""
    mock = MagicMock()
    mock.get_pools = AsyncMock(return_value=pool_records)
    return mock


@pytest.fixture
def multichain(settings, midgard) -> MultiChain:
    """Read-only multi-chain client backed by the mocked Midgard."""
    return MultiChain(network=Network.TESTNET, settings=settings, midgard=midgard)


@pytest_asyncio.fixture
async def sdk(settings, multichain):
    """SDK with a running refresh timer, closed after the test."""
    instance = PoolFeedSDK(multichain=multichain, settings=settings)
    yield instance
    await instance.close()
