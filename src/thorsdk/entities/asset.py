"""THORChain asset identifiers.

Format: CHAIN.SYMBOL[-CONTRACT] (e.g., BTC.BTC, BNB.BUSD-BD1, ETH.USDT-0X...)
"""

import re
from dataclasses import dataclass
from typing import Optional

from thorsdk.chains import Chain, get_chain, get_chain_config

# Tickers and contract suffixes are alphanumeric; the suffix is separated by "-"
_SYMBOL_RE = re.compile(r"^[A-Z0-9]+(-[A-Z0-9]+)?$")


@dataclass(frozen=True)
class Asset:
    """A parsed chain + symbol pair."""

    chain: Chain
    symbol: str

    @property
    def ticker(self) -> str:
        """Symbol without its contract suffix (BUSD-BD1 -> BUSD)."""
        return self.symbol.split("-", 1)[0]

    @property
    def decimal(self) -> int:
        """Native decimal places of the asset's chain."""
        return get_chain_config(self.chain).decimals

    @property
    def is_rune(self) -> bool:
        return self.chain == Chain.THOR and self.symbol == "RUNE"

    @classmethod
    def rune(cls) -> "Asset":
        return cls(Chain.THOR, "RUNE")

    @classmethod
    def from_asset_string(cls, value: object) -> Optional["Asset"]:
        """Parse an asset string.

        Returns:
            Asset, or None if the string is empty, has no chain separator,
            names an unknown chain or carries a malformed symbol
        """
        if not isinstance(value, str):
            return None

        chain_part, sep, symbol_part = value.strip().partition(".")
        if not sep:
            return None

        chain = get_chain(chain_part)
        if chain is None:
            return None

        symbol = symbol_part.upper()
        if not _SYMBOL_RE.match(symbol):
            return None

        return cls(chain, symbol)

    def __str__(self) -> str:
        return f"{self.chain.value}.{self.symbol}"
