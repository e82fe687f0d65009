"""SDK configuration using pydantic-settings.

Values are read from environment variables (and a local .env file), so the
default network, seed phrase and endpoints can be set without code changes.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from thorsdk.chains import Chain, Network


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="THORSDK_",
        extra="ignore",
    )

    # ======================
    # Network / Wallet
    # ======================
    network: Network = Field(default=Network.TESTNET, description="THORChain network")
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 seed phrase (empty = read-only mode)"
    )

    # ======================
    # Pool Feed
    # ======================
    fetch_interval_seconds: float = Field(
        default=60, gt=0, description="Seconds between pool refreshes"
    )
    http_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    slip_limit_percent: float = Field(
        default=3.0, ge=0, le=100, description="Default slip limit for swap plans (3%)"
    )
    deposit_expiry_seconds: int = Field(
        default=15 * 60, description="Router deposit expiry for EVM swaps"
    )

    # ======================
    # THORChain API Endpoints
    # ======================
    midgard_mainnet_url: str = Field(
        default="https://midgard.ninerealms.com/v2", description="Midgard mainnet URL"
    )
    midgard_stagenet_url: str = Field(
        default="https://stagenet-midgard.ninerealms.com/v2", description="Midgard stagenet URL"
    )
    midgard_testnet_url: str = Field(
        default="https://testnet.midgard.thorchain.info/v2", description="Midgard testnet URL"
    )
    thornode_mainnet_url: str = Field(
        default="https://thornode.ninerealms.com", description="THORNode mainnet URL"
    )
    thornode_stagenet_url: str = Field(
        default="https://stagenet-thornode.ninerealms.com", description="THORNode stagenet URL"
    )
    thornode_testnet_url: str = Field(
        default="https://testnet.thornode.thorchain.info", description="THORNode testnet URL"
    )

    # ======================
    # EVM RPC Endpoints
    # ======================
    eth_rpc_url: str = Field(default="https://eth.llamarpc.com", description="Ethereum RPC URL")
    eth_testnet_rpc_url: str = Field(
        default="https://rpc.sepolia.org", description="Ethereum testnet RPC URL"
    )
    bsc_rpc_url: str = Field(
        default="https://bsc-dataseed.binance.org", description="BSC RPC URL"
    )
    bsc_testnet_rpc_url: str = Field(
        default="https://data-seed-prebsc-1-s1.binance.org:8545", description="BSC testnet RPC URL"
    )
    avax_rpc_url: str = Field(
        default="https://api.avax.network/ext/bc/C/rpc", description="Avalanche RPC URL"
    )
    avax_testnet_rpc_url: str = Field(
        default="https://api.avax-test.network/ext/bc/C/rpc", description="Avalanche testnet RPC URL"
    )

    @property
    def fetch_interval_ms(self) -> int:
        return int(self.fetch_interval_seconds * 1000)

    @property
    def has_wallet(self) -> bool:
        """Check if wallet seed phrase is configured."""
        return bool(self.wallet_seed_phrase and len(self.wallet_seed_phrase.split()) >= 12)

    def get_midgard_url(self, network: Network) -> str:
        """Get Midgard base URL for a network."""
        return {
            Network.MAINNET: self.midgard_mainnet_url,
            Network.STAGENET: self.midgard_stagenet_url,
            Network.TESTNET: self.midgard_testnet_url,
        }[Network(network)]

    def get_thornode_url(self, network: Network) -> str:
        """Get THORNode base URL for a network."""
        return {
            Network.MAINNET: self.thornode_mainnet_url,
            Network.STAGENET: self.thornode_stagenet_url,
            Network.TESTNET: self.thornode_testnet_url,
        }[Network(network)]

    def get_rpc_url(self, chain: Chain, network: Network) -> str:
        """Get RPC URL for an EVM chain ("" when not configured)."""
        testnet = Network(network) == Network.TESTNET
        rpc_map = {
            Chain.ETH: self.eth_testnet_rpc_url if testnet else self.eth_rpc_url,
            Chain.BSC: self.bsc_testnet_rpc_url if testnet else self.bsc_rpc_url,
            Chain.AVAX: self.avax_testnet_rpc_url if testnet else self.avax_rpc_url,
        }
        return rpc_map.get(chain, "")

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "network": self.network.value,
            "wallet_configured": self.has_wallet,
            "fetch_interval_ms": self.fetch_interval_ms,
            "http_timeout": self.http_timeout,
            "slip_limit_percent": self.slip_limit_percent,
            "midgard": self.get_midgard_url(self.network),
            "thornode": self.get_thornode_url(self.network),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
