"""Liquidity pools as reported by Midgard."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from thorsdk.entities.amount import THOR_DECIMAL, Amount
from thorsdk.entities.asset import Asset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pool:
    """A RUNE/asset liquidity pool.

    Depths are 8-decimal amounts, the precision THORChain uses for every pool.
    """

    asset: Asset
    asset_depth: Amount
    rune_depth: Amount
    detail: dict = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_pool_data(cls, data: dict) -> Optional["Pool"]:
        """Map a Midgard `/pools` record to a Pool.

        Returns None for records with an unknown asset or missing depths.
        """
        if not isinstance(data, dict):
            return None

        asset = Asset.from_asset_string(data.get("asset"))
        if asset is None:
            logger.debug(f"Skipping pool with unparseable asset: {data.get('asset')!r}")
            return None

        asset_depth = _parse_depth(data.get("assetDepth"))
        rune_depth = _parse_depth(data.get("runeDepth"))
        if asset_depth is None or rune_depth is None:
            logger.debug(f"Skipping pool {asset} with invalid depths")
            return None

        return cls(
            asset=asset,
            asset_depth=Amount(asset_depth, THOR_DECIMAL),
            rune_depth=Amount(rune_depth, THOR_DECIMAL),
            detail=dict(data),
        )

    @property
    def status(self) -> str:
        return str(self.detail.get("status", "")).lower()

    @property
    def is_available(self) -> bool:
        return self.status == "available"

    @property
    def asset_price_in_rune(self) -> Decimal:
        """RUNE per unit of the pool asset."""
        if self.asset_depth.is_zero():
            return Decimal("0")
        return Decimal(self.rune_depth.base_amount) / Decimal(self.asset_depth.base_amount)

    @property
    def asset_price_usd(self) -> Optional[Decimal]:
        value = self.detail.get("assetPriceUSD")
        if value is None:
            return None
        try:
            return Decimal(str(value))
        except ArithmeticError:
            return None

    def __str__(self) -> str:
        return f"{self.asset} ({self.asset_depth} / {self.rune_depth} RUNE)"


def _parse_depth(value: object) -> Optional[int]:
    """Depths arrive as base-unit integer strings."""
    if value is None or isinstance(value, bool):
        return None
    try:
        depth = int(str(value))
    except ValueError:
        return None
    return depth if depth >= 0 else None
