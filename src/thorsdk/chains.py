"""Chain and network configuration for THORChain-connected chains.

Each chain carries its native decimals, block explorer URLs per network and,
for EVM chains, the chain id used when signing transactions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Network(str, Enum):
    """THORChain network selector."""

    MAINNET = "mainnet"
    STAGENET = "stagenet"
    TESTNET = "testnet"


class Chain(str, Enum):
    """Chains with THORChain pools."""

    BNB = "BNB"
    BTC = "BTC"
    ETH = "ETH"
    THOR = "THOR"
    LTC = "LTC"
    BCH = "BCH"
    DOGE = "DOGE"
    GAIA = "GAIA"
    AVAX = "AVAX"
    BSC = "BSC"


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a blockchain."""

    # Required fields (no defaults) - must come first
    name: str
    symbol: str
    decimals: int
    explorer_url: str

    # Optional fields (with defaults)
    testnet_explorer_url: Optional[str] = None
    tx_path: str = "/tx/{tx}"
    address_path: str = "/address/{address}"
    network_queries: dict = field(default_factory=dict)  # Network -> query selecting the network
    chain_ids: dict = field(default_factory=dict)  # Network -> EVM chain id

    @property
    def is_evm(self) -> bool:
        return bool(self.chain_ids)

    def explorer_base(self, network: Network) -> str:
        if network == Network.TESTNET and self.testnet_explorer_url:
            return self.testnet_explorer_url
        return self.explorer_url

    def chain_id(self, network: Network) -> Optional[int]:
        return self.chain_ids.get(network)


# ======================
# Chain Configurations
# ======================

CHAINS: dict[Chain, ChainConfig] = {
    Chain.BNB: ChainConfig(
        name="BNB Beacon Chain",
        symbol="BNB",
        decimals=8,
        explorer_url="https://explorer.bnbchain.org",
        testnet_explorer_url="https://testnet-explorer.binance.org",
    ),
    Chain.BTC: ChainConfig(
        name="Bitcoin",
        symbol="BTC",
        decimals=8,
        explorer_url="https://blockstream.info",
        testnet_explorer_url="https://blockstream.info/testnet",
    ),
    Chain.ETH: ChainConfig(
        name="Ethereum",
        symbol="ETH",
        decimals=18,
        explorer_url="https://etherscan.io",
        testnet_explorer_url="https://sepolia.etherscan.io",
        chain_ids={Network.MAINNET: 1, Network.STAGENET: 1, Network.TESTNET: 11155111},
    ),
    Chain.THOR: ChainConfig(
        name="THORChain",
        symbol="RUNE",
        decimals=8,
        explorer_url="https://viewblock.io/thorchain",
        tx_path="/tx/{tx}",
        address_path="/address/{address}",
        network_queries={
            Network.STAGENET: "?network=stagenet",
            Network.TESTNET: "?network=testnet",
        },
    ),
    Chain.LTC: ChainConfig(
        name="Litecoin",
        symbol="LTC",
        decimals=8,
        explorer_url="https://litecoinspace.org",
        testnet_explorer_url="https://litecoinspace.org/testnet",
    ),
    Chain.BCH: ChainConfig(
        name="Bitcoin Cash",
        symbol="BCH",
        decimals=8,
        explorer_url="https://www.blockchain.com/bch",
        testnet_explorer_url="https://www.blockchain.com/bch-testnet",
    ),
    Chain.DOGE: ChainConfig(
        name="Dogecoin",
        symbol="DOGE",
        decimals=8,
        explorer_url="https://blockchair.com/dogecoin",
        tx_path="/transaction/{tx}",
    ),
    Chain.GAIA: ChainConfig(
        name="Cosmos Hub",
        symbol="ATOM",
        decimals=6,
        explorer_url="https://www.mintscan.io/cosmos",
        tx_path="/txs/{tx}",
        address_path="/account/{address}",
    ),
    Chain.AVAX: ChainConfig(
        name="Avalanche",
        symbol="AVAX",
        decimals=18,
        explorer_url="https://snowtrace.io",
        testnet_explorer_url="https://testnet.snowtrace.io",
        chain_ids={Network.MAINNET: 43114, Network.STAGENET: 43114, Network.TESTNET: 43113},
    ),
    Chain.BSC: ChainConfig(
        name="BNB Smart Chain",
        symbol="BNB",
        decimals=18,
        explorer_url="https://bscscan.com",
        testnet_explorer_url="https://testnet.bscscan.com",
        chain_ids={Network.MAINNET: 56, Network.STAGENET: 56, Network.TESTNET: 97},
    ),
}


def get_chain(chain: str) -> Optional[Chain]:
    """Look up a chain by its THORChain identifier (case-insensitive)."""
    try:
        return Chain(chain.upper())
    except (ValueError, AttributeError):
        return None


def get_chain_config(chain: Chain) -> ChainConfig:
    """Get configuration for a chain.

    Raises:
        ValueError: If chain is not supported
    """
    config = CHAINS.get(chain)
    if config is None:
        raise ValueError(f"Unsupported chain: {chain}")
    return config


def _network_query(config: ChainConfig, network: Network) -> str:
    if network == Network.TESTNET and config.testnet_explorer_url:
        return ""
    return config.network_queries.get(network, "")


def get_explorer_tx_url(chain: Chain, network: Network, tx_hash: str) -> str:
    """Build a block explorer link for a transaction."""
    config = get_chain_config(chain)
    path = config.tx_path.format(tx=tx_hash)
    return f"{config.explorer_base(network)}{path}{_network_query(config, network)}"


def get_explorer_address_url(chain: Chain, network: Network, address: str) -> str:
    """Build a block explorer link for an address."""
    config = get_chain_config(chain)
    path = config.address_path.format(address=address)
    return f"{config.explorer_base(network)}{path}{_network_query(config, network)}"


def get_evm_chains() -> list[Chain]:
    """Get chains that sign EVM transactions."""
    return [chain for chain, config in CHAINS.items() if config.is_evm]
