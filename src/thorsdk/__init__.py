"""THORChain pool feed SDK.

Keeps a periodically refreshed snapshot of THORChain liquidity pools, values
swaps against it and submits them through a multi-chain wallet client.
"""

from thorsdk.chains import Chain, Network
from thorsdk.clients import MultiChain
from thorsdk.entities import Amount, Asset, AssetAmount, Pool, Swap, SwapType
from thorsdk.errors import (
    InvalidAssetError,
    InvalidPhraseError,
    QuoteError,
    RefreshFetchError,
    SubmissionError,
    ThorSDKError,
)
from thorsdk.sdk import PoolFeedSDK

__all__ = [
    "PoolFeedSDK",
    "MultiChain",
    # Chains
    "Chain",
    "Network",
    # Entities
    "Amount",
    "Asset",
    "AssetAmount",
    "Pool",
    "Swap",
    "SwapType",
    # Errors
    "ThorSDKError",
    "InvalidAssetError",
    "InvalidPhraseError",
    "QuoteError",
    "SubmissionError",
    "RefreshFetchError",
]
