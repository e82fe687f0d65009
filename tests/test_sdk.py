"""Tests for the PoolFeedSDK facade."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from thorsdk.chains import Chain, Network
from thorsdk.config import Settings
from thorsdk.entities import Asset, Pool
from thorsdk.errors import (
    InvalidAssetError,
    InvalidPhraseError,
    QuoteError,
    RefreshFetchError,
    SubmissionError,
)
from thorsdk.sdk import PoolFeedSDK

from conftest import BNB_POOL, BUSD_POOL, TEST_PHRASE


async def _wait_for(predicate, timeout: float = 2.0) -> None:
    """Poll until predicate() is true."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.01)


class TestConstruction:
    """Tests for SDK construction and lifecycle."""

    @pytest.mark.asyncio
    async def test_starts_refresh_timer(self, sdk):
        assert sdk.is_running
        assert sdk.get_fetch_interval() == 60000
        assert sdk.pools == ()

    def test_construct_outside_event_loop(self, settings, multichain):
        """Timer stays stopped until start() is called from async code."""
        sdk = PoolFeedSDK(multichain=multichain, settings=settings)

        assert not sdk.is_running

    @pytest.mark.asyncio
    async def test_default_multichain(self, settings):
        sdk = PoolFeedSDK(settings=settings)
        try:
            assert sdk.multichain.network == Network.TESTNET
            assert not sdk.multichain.has_wallet
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_network_and_phrase_from_settings(self):
        settings = Settings(_env_file=None, network=Network.MAINNET, wallet_seed_phrase=TEST_PHRASE)
        sdk = PoolFeedSDK(settings=settings)
        try:
            assert sdk.multichain.network == Network.MAINNET
            assert sdk.multichain.has_wallet
            assert sdk.multichain.get_address(Chain.THOR).startswith("thor1")
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_network_from_environment(self, monkeypatch):
        monkeypatch.setenv("THORSDK_NETWORK", "mainnet")
        sdk = PoolFeedSDK(settings=Settings(_env_file=None))
        try:
            assert sdk.multichain.network == Network.MAINNET
            assert not sdk.multichain.has_wallet
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_arguments_override_settings(self):
        settings = Settings(_env_file=None, network=Network.MAINNET, wallet_seed_phrase=TEST_PHRASE)
        sdk = PoolFeedSDK(Network.TESTNET, "", settings=settings)
        try:
            assert sdk.multichain.network == Network.TESTNET
            assert not sdk.multichain.has_wallet
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_invalid_phrase_fails_construction(self, settings):
        with pytest.raises(InvalidPhraseError):
            PoolFeedSDK(Network.TESTNET, "not a real phrase", settings=settings)

    @pytest.mark.asyncio
    async def test_context_manager_closes_timer(self, settings, multichain):
        async with PoolFeedSDK(multichain=multichain, settings=settings) as sdk:
            assert sdk.is_running

        assert not sdk.is_running


class TestFetchInterval:
    """Tests for refresh cadence changes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seconds", [1, 5, 30, 3600])
    async def test_set_fetch_interval(self, sdk, seconds):
        sdk.set_fetch_interval(seconds)

        assert sdk.get_fetch_interval() == seconds * 1000
        assert sdk.is_running

    @pytest.mark.asyncio
    async def test_reschedule_cancels_previous_timer(self, sdk):
        first = sdk._timer._handle

        sdk.set_fetch_interval(10)
        second = sdk._timer._handle
        sdk.set_fetch_interval(20)
        third = sdk._timer._handle

        assert first.cancelled()
        assert second.cancelled()
        assert not third.cancelled()

    @pytest.mark.asyncio
    async def test_no_duplicate_refresh_loops(self, sdk):
        sdk.set_fetch_interval(0.05)
        first = sdk._timer._handle
        sdk.set_fetch_interval(0.05)
        second = sdk._timer._handle

        assert first is not second
        assert first.cancelled()
        assert not second.cancelled()
        assert sdk._timer._handle is second

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seconds", [0, -5, 0.0001, float("nan"), float("inf")])
    async def test_unusable_interval_keeps_cadence(self, sdk, midgard, seconds):
        handle = sdk._timer._handle

        sdk.set_fetch_interval(seconds)
        await asyncio.sleep(0.05)

        assert sdk.get_fetch_interval() == 60000
        assert sdk._timer._handle is handle
        assert not handle.cancelled()
        assert midgard.get_pools.await_count == 0

    @pytest.mark.asyncio
    async def test_constructor_fetch_interval(self, settings, multichain):
        sdk = PoolFeedSDK(multichain=multichain, settings=settings, fetch_interval=5)
        try:
            assert sdk.get_fetch_interval() == 5000
            assert sdk._timer.interval_ms == 5000
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_constructor_ignores_unusable_interval(self, settings, multichain):
        sdk = PoolFeedSDK(multichain=multichain, settings=settings, fetch_interval=0)
        try:
            assert sdk.get_fetch_interval() == 60000
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_set_interval_starts_stopped_timer(self, settings, multichain):
        sdk = PoolFeedSDK(multichain=multichain, settings=settings)
        await sdk.close()
        try:
            sdk.set_fetch_interval(2)

            assert sdk.is_running
            assert sdk._timer.interval_ms == 2000
        finally:
            await sdk.close()


class TestPoolRefresh:
    """Tests for the background pool refresh."""

    @pytest.mark.asyncio
    async def test_refresh_replaces_snapshot(self, sdk, pool_records):
        pools = await sdk.refresh_pools()

        assert len(pools) == len(pool_records)
        assert all(isinstance(pool, Pool) for pool in pools)
        assert sdk.pools is pools

    @pytest.mark.asyncio
    async def test_malformed_records_are_dropped(self, sdk, midgard):
        midgard.get_pools.return_value = [
            dict(BNB_POOL),
            {"asset": "BNB.BUSD", "assetDepth": "oops", "runeDepth": "1"},
            {"asset": "???"},
        ]

        pools = await sdk.refresh_pools()

        assert [str(pool.asset) for pool in pools] == ["BNB.BNB"]

    @pytest.mark.asyncio
    async def test_snapshot_is_replaced_not_mutated(self, sdk, midgard):
        before = await sdk.refresh_pools()
        midgard.get_pools.return_value = [dict(BUSD_POOL)]

        after = await sdk.refresh_pools()

        assert len(before) == 3
        assert [str(pool.asset) for pool in after] == ["BNB.BUSD"]

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_snapshot(self, settings, multichain, midgard):
        errors = []
        sdk = PoolFeedSDK(multichain=multichain, settings=settings, on_refresh_error=errors.append)
        try:
            good = await sdk.refresh_pools()
            midgard.get_pools.side_effect = httpx.ConnectError("midgard down")

            result = await sdk.refresh_pools()

            assert result is good
            assert len(errors) == 1
            assert isinstance(errors[0], RefreshFetchError)
            assert isinstance(errors[0].cause, httpx.ConnectError)
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_recovers_after_consecutive_failures(self, settings, multichain, midgard, pool_records):
        calls = {"count": 0}

        async def flaky_get_pools():
            calls["count"] += 1
            if calls["count"] <= 3:
                raise httpx.ReadTimeout("slow midgard")
            return pool_records

        midgard.get_pools = AsyncMock(side_effect=flaky_get_pools)
        errors = []
        sdk = PoolFeedSDK(multichain=multichain, settings=settings, on_refresh_error=errors.append)
        try:
            sdk.set_fetch_interval(0.02)
            await _wait_for(lambda: len(sdk.pools) == len(pool_records))

            expected = tuple(Pool.from_pool_data(record) for record in pool_records)
            assert sdk.pools == expected
            assert len(errors) == 3
            assert sdk.is_running
        finally:
            await sdk.close()

    @pytest.mark.asyncio
    async def test_failing_hook_does_not_stop_refresh(self, settings, multichain, midgard):
        hook = MagicMock(side_effect=RuntimeError("hook bug"))
        midgard.get_pools.side_effect = ValueError("bad payload")
        sdk = PoolFeedSDK(multichain=multichain, settings=settings, on_refresh_error=hook)
        try:
            await sdk.refresh_pools()
            await sdk.refresh_pools()

            assert hook.call_count == 2
            assert sdk.is_running
        finally:
            await sdk.close()


class TestPhrase:
    """Tests for seed phrase handling."""

    @pytest.mark.asyncio
    async def test_validate_phrase(self, sdk):
        assert sdk.validate_phrase(TEST_PHRASE) is True
        assert sdk.validate_phrase("") is False
        assert sdk.validate_phrase(" ".join(["abandon"] * 12)) is False
        assert sdk.validate_phrase("abandon " * 11 + "notaword") is False

    @pytest.mark.asyncio
    async def test_set_phrase(self, sdk):
        sdk.set_phrase(TEST_PHRASE)

        assert sdk.multichain.has_wallet
        assert sdk.multichain.get_address(Chain.THOR).startswith("tthor1")

    @pytest.mark.asyncio
    async def test_set_invalid_phrase_keeps_wallet(self, sdk):
        sdk.set_phrase(TEST_PHRASE)
        wallet = sdk.multichain.wallet

        with pytest.raises(InvalidPhraseError):
            sdk.set_phrase("abandon " * 12)

        assert sdk.multichain.wallet is wallet


class TestQuote:
    """Tests for swap quoting."""

    @pytest.mark.asyncio
    async def test_quote_bnb_to_busd(self, sdk):
        await sdk.refresh_pools()

        plan = sdk.quote("BNB.BNB", "BNB.BUSD", 1.5)

        x = Decimal(150000000)
        bnb_depth, bnb_rune = Decimal(100000000000), Decimal(5000000000000)
        busd_depth, busd_rune = Decimal(10000000000000), Decimal(10000000000000)
        rune_out = x * bnb_depth * bnb_rune / (x + bnb_depth) ** 2
        busd_out = rune_out * busd_rune * busd_depth / (rune_out + busd_rune) ** 2

        assert plan.input_asset == Asset(Chain.BNB, "BNB")
        assert plan.input_amount.amount.asset_amount == Decimal("1.5")
        assert plan.output_asset == Asset(Chain.BNB, "BUSD")
        assert plan.output_amount.amount.base_amount == int(busd_out)

    @pytest.mark.asyncio
    async def test_quote_uses_input_asset_decimals(self, sdk):
        await sdk.refresh_pools()

        plan = sdk.quote("ETH.ETH", "THOR.RUNE", "0.25")

        assert plan.input_amount.amount.decimal == 18
        assert plan.input_amount.amount.base_amount == 250000000000000000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "input_asset,output_asset",
        [
            ("", "BNB.BUSD"),
            ("BNB.BNB", None),
            ("XYZ.BNB", "BNB.BUSD"),
            ("BNB.BNB", "BNBBUSD"),
            ("BNB.", "BNB.BUSD"),
        ],
    )
    async def test_invalid_asset_skips_valuation(self, sdk, input_asset, output_asset):
        await sdk.refresh_pools()

        with patch("thorsdk.sdk.Swap") as swap_cls:
            with pytest.raises(InvalidAssetError):
                sdk.quote(input_asset, output_asset, 1)

        swap_cls.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), "-inf", "abc"])
    async def test_non_numeric_amount(self, sdk, amount):
        await sdk.refresh_pools()

        with pytest.raises(QuoteError):
            sdk.quote("BNB.BNB", "BNB.BUSD", amount)

    @pytest.mark.asyncio
    async def test_amount_below_thor_precision(self, sdk):
        await sdk.refresh_pools()

        with pytest.raises(QuoteError, match="precision"):
            sdk.quote("ETH.ETH", "THOR.RUNE", 1e-12)

    @pytest.mark.asyncio
    async def test_quote_against_empty_snapshot(self, sdk):
        with pytest.raises(QuoteError, match="No pool found"):
            sdk.quote("BNB.BNB", "BNB.BUSD", 1)

    @pytest.mark.asyncio
    async def test_quote_does_not_touch_snapshot(self, sdk):
        pools = await sdk.refresh_pools()

        sdk.quote("BNB.BNB", "BNB.BUSD", 1)

        assert sdk.pools is pools


class TestSwap:
    """Tests for swap submission."""

    @pytest.mark.asyncio
    async def test_swap_returns_explorer_url(self, sdk):
        await sdk.refresh_pools()
        plan = sdk.quote("BNB.BNB", "BNB.BUSD", 1)
        sdk.multichain.swap = AsyncMock(return_value="ABC123")

        url = await sdk.swap(plan)

        sdk.multichain.swap.assert_awaited_once_with(plan)
        assert url == "https://testnet-explorer.binance.org/tx/ABC123"

    @pytest.mark.asyncio
    async def test_swap_failure_leaves_state_unchanged(self, sdk):
        sdk.set_phrase(TEST_PHRASE)
        pools = await sdk.refresh_pools()
        wallet = sdk.multichain.wallet
        plan = sdk.quote("BNB.BNB", "BNB.BUSD", 1)
        sdk.multichain.swap = AsyncMock(side_effect=SubmissionError("insufficient balance"))

        with pytest.raises(SubmissionError, match="insufficient balance"):
            await sdk.swap(plan)

        assert sdk.pools is pools
        assert sdk.multichain.wallet is wallet
        sdk.multichain.swap.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_swap_without_wallet(self, sdk):
        await sdk.refresh_pools()
        plan = sdk.quote("ETH.ETH", "BNB.BNB", 1)

        with pytest.raises(SubmissionError, match="No wallet"):
            await sdk.swap(plan)
