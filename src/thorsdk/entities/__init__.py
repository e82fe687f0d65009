"""Value types for assets, amounts, pools and swap valuation."""

from thorsdk.entities.amount import THOR_DECIMAL, Amount, AssetAmount
from thorsdk.entities.asset import Asset
from thorsdk.entities.pool import Pool
from thorsdk.entities.swap import Swap, SwapType

__all__ = [
    "THOR_DECIMAL",
    "Amount",
    "Asset",
    "AssetAmount",
    "Pool",
    "Swap",
    "SwapType",
]
