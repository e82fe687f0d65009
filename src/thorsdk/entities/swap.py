"""Swap valuation against THORChain continuous liquidity pools.

For a single hop with input x, input-side depth X and output-side depth Y:

    output = x * X * Y / (x + X)^2
    fee    = x^2 * Y / (x + X)^2
    slip   = x / (x + X)

Swaps between two non-RUNE assets route through RUNE (double swap).
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from enum import Enum
from typing import Sequence, Union

from thorsdk.entities.amount import THOR_DECIMAL, Amount, AssetAmount
from thorsdk.entities.asset import Asset
from thorsdk.entities.pool import Pool
from thorsdk.errors import QuoteError

logger = logging.getLogger(__name__)

DEFAULT_SLIP_LIMIT_PERCENT = Decimal("3")


class SwapType(str, Enum):
    SINGLE_SWAP = "single_swap"
    DOUBLE_SWAP = "double_swap"


@dataclass(frozen=True)
class _Hop:
    output: Decimal
    fee: Decimal
    slip: Decimal


def _swap_hop(x: Decimal, input_depth: Decimal, output_depth: Decimal) -> _Hop:
    denominator = (x + input_depth) ** 2
    return _Hop(
        output=x * input_depth * output_depth / denominator,
        fee=x * x * output_depth / denominator,
        slip=x / (x + input_depth),
    )


class Swap:
    """A quoted, not yet submitted swap.

    Usage:
        swap = Swap(btc, eth, pools, AssetAmount(btc, Amount.from_asset_amount(1, 8)))
        swap.output_amount, swap.fee, swap.slip
    """

    def __init__(
        self,
        input_asset: Asset,
        output_asset: Asset,
        pools: Sequence[Pool],
        input_amount: AssetAmount,
        slip_limit_percent: Union[Decimal, float, str] = DEFAULT_SLIP_LIMIT_PERCENT,
    ):
        if input_asset == output_asset:
            raise QuoteError(f"Cannot swap {input_asset} to itself")
        if input_amount.asset != input_asset:
            raise QuoteError(
                f"Input amount is denominated in {input_amount.asset}, expected {input_asset}"
            )
        if input_amount.amount.base_amount <= 0:
            raise QuoteError("Swap amount must be positive")
        if input_amount.to_thor_units().is_zero():
            raise QuoteError(
                f"Swap amount {input_amount} is below THORChain's {THOR_DECIMAL}-decimal precision"
            )

        self._input_asset = input_asset
        self._output_asset = output_asset
        self._pools = tuple(pools)
        self._input_amount = input_amount
        self._slip_limit_percent = Decimal(str(slip_limit_percent))

        if input_asset.is_rune or output_asset.is_rune:
            self._swap_type = SwapType.SINGLE_SWAP
        else:
            self._swap_type = SwapType.DOUBLE_SWAP

        self._output_thor, self._fee_thor, self._slip = self._calculate()

        logger.debug(
            f"Quoted {input_amount} -> {self.output_amount} "
            f"({self._swap_type.value}, slip {self._slip:.4%})"
        )

    def _find_pool(self, asset: Asset) -> Pool:
        for pool in self._pools:
            if pool.asset == asset:
                if pool.asset_depth.is_zero() or pool.rune_depth.is_zero():
                    raise QuoteError(f"Pool {asset} has no liquidity")
                return pool
        raise QuoteError(f"No pool found for {asset}")

    def _calculate(self) -> tuple[Decimal, Decimal, Decimal]:
        """Return (output, fee, slip), amounts in 8-decimal base units."""
        x = Decimal(self._input_amount.to_thor_units().base_amount)

        if self._input_asset.is_rune:
            pool = self._find_pool(self._output_asset)
            hop = _swap_hop(
                x, Decimal(pool.rune_depth.base_amount), Decimal(pool.asset_depth.base_amount)
            )
            return hop.output, hop.fee, hop.slip

        if self._output_asset.is_rune:
            pool = self._find_pool(self._input_asset)
            hop = _swap_hop(
                x, Decimal(pool.asset_depth.base_amount), Decimal(pool.rune_depth.base_amount)
            )
            return hop.output, hop.fee, hop.slip

        in_pool = self._find_pool(self._input_asset)
        out_pool = self._find_pool(self._output_asset)
        out_rune_depth = Decimal(out_pool.rune_depth.base_amount)
        out_asset_depth = Decimal(out_pool.asset_depth.base_amount)

        first = _swap_hop(
            x, Decimal(in_pool.asset_depth.base_amount), Decimal(in_pool.rune_depth.base_amount)
        )
        second = _swap_hop(first.output, out_rune_depth, out_asset_depth)

        # first-hop fee is in RUNE; value it in the output asset
        fee = first.fee * out_asset_depth / out_rune_depth + second.fee
        return second.output, fee, first.slip + second.slip

    def _to_output_amount(self, thor_units: Decimal) -> AssetAmount:
        thor_amount = Amount.from_base_amount(
            thor_units.to_integral_value(rounding=ROUND_DOWN), THOR_DECIMAL
        )
        return AssetAmount(self._output_asset, thor_amount.to_decimal(self._output_asset.decimal))

    @property
    def input_asset(self) -> Asset:
        return self._input_asset

    @property
    def output_asset(self) -> Asset:
        return self._output_asset

    @property
    def input_amount(self) -> AssetAmount:
        return self._input_amount

    @property
    def pools(self) -> tuple[Pool, ...]:
        """The pool snapshot this swap was valued against."""
        return self._pools

    @property
    def swap_type(self) -> SwapType:
        return self._swap_type

    @property
    def output_amount(self) -> AssetAmount:
        """Expected output after fees."""
        return self._to_output_amount(self._output_thor)

    @property
    def fee(self) -> AssetAmount:
        """Liquidity fee, denominated in the output asset."""
        return self._to_output_amount(self._fee_thor)

    @property
    def slip(self) -> Decimal:
        """Price slip as a fraction (0.01 = 1%)."""
        return self._slip

    @property
    def slip_limit_percent(self) -> Decimal:
        return self._slip_limit_percent

    @property
    def exceeds_slip_limit(self) -> bool:
        return self._slip * 100 > self._slip_limit_percent

    @property
    def price(self) -> Decimal:
        """Output units received per input unit."""
        input_value = self._input_amount.amount.asset_amount
        return self.output_amount.amount.asset_amount / input_value

    @property
    def min_output_amount(self) -> AssetAmount:
        """Expected output reduced by the slip limit; used as the swap limit."""
        factor = Decimal(1) - self._slip_limit_percent / Decimal(100)
        return self._to_output_amount(self._output_thor * factor)

    def to_dict(self) -> dict:
        """Convert to dictionary for display or storage."""
        return {
            "input_asset": str(self._input_asset),
            "output_asset": str(self._output_asset),
            "input_amount": str(self._input_amount.amount),
            "output_amount": str(self.output_amount.amount),
            "min_output_amount": str(self.min_output_amount.amount),
            "fee": str(self.fee.amount),
            "slip_percent": str(self._slip * 100),
            "swap_type": self._swap_type.value,
        }

    def __repr__(self) -> str:
        return (
            f"Swap({self._input_amount} -> {self.output_amount}, "
            f"type={self._swap_type.value})"
        )
