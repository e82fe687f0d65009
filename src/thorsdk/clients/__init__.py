"""Clients for THORChain APIs and per-chain swap submission."""

from thorsdk.clients.base import ChainClient, InboundAddress
from thorsdk.clients.evm import EVMChainClient
from thorsdk.clients.midgard import MidgardClient, ThornodeClient
from thorsdk.clients.multichain import MultiChain, build_swap_memo

__all__ = [
    "ChainClient",
    "InboundAddress",
    "EVMChainClient",
    "MidgardClient",
    "ThornodeClient",
    "MultiChain",
    "build_swap_memo",
]
