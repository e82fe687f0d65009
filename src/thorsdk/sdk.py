"""Pool feed SDK: periodic pool refresh, swap quotes and swap submission.

PoolFeedSDK keeps an in-memory snapshot of THORChain pools that a recurring
timer refreshes from Midgard. Quotes are valued against whatever snapshot is
current; swaps are forwarded to the multi-chain client.

The snapshot is a tuple replaced in a single assignment, so readers never see
a partially built list.
"""

import logging
import math
from typing import Callable, Optional, Union

from thorsdk.chains import Network
from thorsdk.clients.multichain import MultiChain
from thorsdk.config import Settings, get_settings
from thorsdk.entities import Amount, Asset, AssetAmount, Pool, Swap
from thorsdk.entities.amount import Number
from thorsdk.errors import InvalidAssetError, RefreshFetchError
from thorsdk.scheduler import IntervalTimer
from thorsdk.wallet import validate_phrase

logger = logging.getLogger(__name__)

RefreshErrorHook = Callable[[RefreshFetchError], None]


def _valid_interval(seconds: Union[int, float]) -> bool:
    """Intervals must be finite and at least one millisecond."""
    try:
        return math.isfinite(seconds) and int(seconds * 1000) > 0
    except TypeError:
        return False


class PoolFeedSDK:
    """Stateful facade over MultiChain and the Midgard pool feed.

    Usage:
        async with PoolFeedSDK(Network.MAINNET, phrase) as sdk:
            await sdk.refresh_pools()
            plan = sdk.quote("BTC.BTC", "ETH.ETH", 0.1)
            url = await sdk.swap(plan)
    """

    def __init__(
        self,
        network: Optional[Network] = None,
        phrase: Optional[str] = None,
        *,
        multichain: Optional[MultiChain] = None,
        settings: Optional[Settings] = None,
        on_refresh_error: Optional[RefreshErrorHook] = None,
        fetch_interval: Optional[Union[int, float]] = None,
    ):
        """Initialize the SDK and start the pool refresh timer.

        The timer needs a running event loop; when constructed outside one,
        call start() from async code.

        Args:
            network: THORChain network (defaults to settings.network)
            phrase: BIP39 seed phrase (defaults to settings.wallet_seed_phrase);
                empty for read-only use
            multichain: Pre-built multi-chain client (network/phrase ignored)
            settings: Settings override (defaults to get_settings())
            on_refresh_error: Called with every recovered refresh failure
            fetch_interval: Refresh cadence in seconds (defaults to
                settings.fetch_interval_seconds)

        Raises:
            InvalidPhraseError: If the multi-chain client rejects the phrase
        """
        self.settings = settings or get_settings()
        self.multichain = multichain or MultiChain(
            network=network, phrase=phrase, settings=self.settings
        )
        self.on_refresh_error = on_refresh_error

        self._pools: tuple[Pool, ...] = ()
        self._fetch_interval = self.settings.fetch_interval_ms
        if fetch_interval is not None and _valid_interval(fetch_interval):
            self._fetch_interval = int(fetch_interval * 1000)
        self._timer = IntervalTimer(self._fetch_pools, self._fetch_interval, name="pool-refresh")

        self.start()

    async def __aenter__(self) -> "PoolFeedSDK":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ======================
    # Lifecycle
    # ======================

    @property
    def is_running(self) -> bool:
        return self._timer.is_scheduled

    def start(self) -> None:
        """Start the refresh timer if it is not already scheduled."""
        if self._timer.is_scheduled:
            return
        try:
            self._timer.start()
        except RuntimeError:
            logger.debug("No running event loop; pool refresh starts on start()")

    async def close(self) -> None:
        """Stop the refresh timer and cancel in-flight refreshes."""
        await self._timer.close()

    # ======================
    # Pool snapshot
    # ======================

    @property
    def pools(self) -> tuple[Pool, ...]:
        """Current pool snapshot (empty until the first successful fetch)."""
        return self._pools

    def get_fetch_interval(self) -> int:
        """Get the refresh cadence in milliseconds."""
        return self._fetch_interval

    def set_fetch_interval(self, seconds: Union[int, float]) -> None:
        """Change the refresh cadence; the next refresh fires one interval from now.

        A zero, negative or non-finite value keeps the current cadence.
        """
        if not _valid_interval(seconds):
            logger.warning(
                f"Ignoring fetch interval {seconds!r}; keeping {self._fetch_interval}ms"
            )
            return

        self._fetch_interval = int(seconds * 1000)

        self._timer.reschedule(self._fetch_interval)
        self.start()

        logger.info(f"Pool refresh interval set to {self._fetch_interval}ms")

    async def refresh_pools(self) -> tuple[Pool, ...]:
        """Fetch pools now; failures are recovered like a timer refresh."""
        await self._fetch_pools()
        return self._pools

    async def _fetch_pools(self) -> None:
        try:
            pool_details = await self.multichain.midgard.get_pools()
        except Exception as e:
            self._report_refresh_error(
                RefreshFetchError(f"Failed to fetch pools: {type(e).__name__}: {e}", cause=e)
            )
            return

        pools = []
        for pool_detail in pool_details:
            pool = Pool.from_pool_data(pool_detail)
            if pool is not None:
                pools.append(pool)

        self._pools = tuple(pools)

        dropped = len(pool_details) - len(pools)
        logger.debug(
            f"Pool snapshot refreshed: {len(pools)} pools"
            + (f" ({dropped} malformed records dropped)" if dropped else "")
        )

    def _report_refresh_error(self, error: RefreshFetchError) -> None:
        logger.warning(f"{error}; keeping {len(self._pools)} cached pools")
        if self.on_refresh_error is None:
            return
        try:
            self.on_refresh_error(error)
        except Exception as e:
            logger.error(f"Refresh error hook failed: {type(e).__name__}: {e}")

    # ======================
    # Wallet
    # ======================

    def validate_phrase(self, phrase: str) -> bool:
        """Check a BIP39 seed phrase; never raises."""
        return validate_phrase(phrase)

    def set_phrase(self, phrase: str) -> None:
        """Rotate the active wallet identity.

        Raises:
            InvalidPhraseError: If the phrase is rejected
        """
        self.multichain.set_phrase(phrase)

    # ======================
    # Quote / Swap
    # ======================

    def quote(self, input_asset: str, output_asset: str, amount: Number) -> Swap:
        """Value a swap against the current pool snapshot.

        Args:
            input_asset: Asset string to sell (e.g., "BNB.BNB")
            output_asset: Asset string to buy (e.g., "BNB.BUSD-BD1")
            amount: Quantity of input asset in human-readable units

        Raises:
            InvalidAssetError: If either asset string cannot be parsed
            QuoteError: If the swap cannot be valued
        """
        input_obj = Asset.from_asset_string(input_asset)
        output_obj = Asset.from_asset_string(output_asset)

        if input_obj is None:
            raise InvalidAssetError(input_asset)
        if output_obj is None:
            raise InvalidAssetError(output_asset)

        amount_entity = Amount.from_asset_amount(amount, input_obj.decimal)
        input_asset_amount = AssetAmount(input_obj, amount_entity)

        return Swap(
            input_obj,
            output_obj,
            self._pools,
            input_asset_amount,
            slip_limit_percent=str(self.settings.slip_limit_percent),
        )

    async def swap(self, swap: Swap) -> str:
        """Submit a swap and return an explorer link for the inbound transaction.

        Raises:
            SubmissionError: If signing, broadcast or link formatting fails
        """
        tx_hash = await self.multichain.swap(swap)
        return self.multichain.get_explorer_tx_url(swap.input_asset.chain, tx_hash)
