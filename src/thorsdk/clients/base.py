"""Base interfaces for per-chain swap submission.

Swap flow:
1. Look up the inbound vault for the input chain
2. Build a memo naming the output asset, recipient and limit
3. Chain client sends the input amount to the vault with the memo
4. THORChain observes the inbound and pays out the output asset
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from thorsdk.chains import Chain
from thorsdk.entities import AssetAmount

logger = logging.getLogger(__name__)


@dataclass
class InboundAddress:
    """A THORChain vault accepting deposits on one chain."""

    chain: str
    address: str
    router: Optional[str] = None  # EVM chains only
    halted: bool = False
    gas_rate: Optional[str] = None


class ChainClient(ABC):
    """Abstract base class for chain clients.

    Each chain has its own implementation.
    """

    @property
    @abstractmethod
    def chain(self) -> Chain:
        """Chain this client signs for."""
        pass

    @abstractmethod
    async def deposit(
        self,
        asset_amount: AssetAmount,
        inbound: InboundAddress,
        memo: str,
    ) -> str:
        """Send funds to a THORChain vault with a memo.

        Args:
            asset_amount: Asset and amount to send
            inbound: Vault (and router, for EVM chains) to deposit into
            memo: THORChain memo describing the swap

        Returns:
            Transaction hash

        Raises:
            Exception: Any signing or broadcast failure
        """
        pass
