"""Fixed-precision amounts and asset/amount pairs."""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Union

from thorsdk.entities.asset import Asset
from thorsdk.errors import QuoteError

# THORChain expresses every pool depth and swap limit with 8 decimals
THOR_DECIMAL = 8

Number = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class Amount:
    """A quantity stored as an integer number of base units."""

    base_amount: int
    decimal: int

    @classmethod
    def from_asset_amount(cls, value: Number, decimal: int) -> "Amount":
        """Build from a human-readable quantity, truncating extra precision.

        Raises:
            QuoteError: If the value is not a finite number
        """
        try:
            quantity = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise QuoteError(f"Invalid amount: {value!r}", cause=e) from e
        if not quantity.is_finite():
            raise QuoteError(f"Amount must be finite, got {value!r}")
        base = (quantity * (Decimal(10) ** decimal)).to_integral_value(rounding=ROUND_DOWN)
        return cls(int(base), decimal)

    @classmethod
    def from_base_amount(cls, value: Union[int, str, Decimal], decimal: int) -> "Amount":
        base = Decimal(value).to_integral_value(rounding=ROUND_DOWN)
        return cls(int(base), decimal)

    @property
    def asset_amount(self) -> Decimal:
        """Human-readable quantity."""
        return Decimal(self.base_amount) / (Decimal(10) ** self.decimal)

    def to_decimal(self, decimal: int) -> "Amount":
        """Re-express at another precision, truncating when reducing it."""
        if decimal == self.decimal:
            return self
        if decimal > self.decimal:
            return Amount(self.base_amount * 10 ** (decimal - self.decimal), decimal)
        return Amount(self.base_amount // 10 ** (self.decimal - decimal), decimal)

    def to_fixed(self, places: int = 8) -> str:
        quantum = Decimal(1).scaleb(-places)
        return str(self.asset_amount.quantize(quantum, rounding=ROUND_DOWN))

    def is_zero(self) -> bool:
        return self.base_amount == 0

    def __str__(self) -> str:
        return str(self.asset_amount)


@dataclass(frozen=True)
class AssetAmount:
    """An amount of a specific asset."""

    asset: Asset
    amount: Amount

    def to_thor_units(self) -> Amount:
        """Amount at THORChain's 8-decimal precision."""
        return self.amount.to_decimal(THOR_DECIMAL)

    def __str__(self) -> str:
        return f"{self.amount} {self.asset}"
