"""Unit tests for holdings aggregation across wallets."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from polymarket_portfolio.config import DashboardConfig
from polymarket_portfolio.models import COMBINED_WALLET
from polymarket_portfolio.services.holdings import (
    HoldingsAggregator,
    baseline_holding,
    combine_holdings,
    normalize_wallets,
    parse_wallet_input,
)
from tests.factories import WALLET_A, WALLET_B, WALLET_BAD, make_raw_holding


class TestParseWalletInput:
    def test_splits_trims_and_filters(self) -> None:
        assert parse_wallet_input(" 0xaaa , junk, ,0xbbb") == ("0xaaa", "0xbbb")

    def test_drops_duplicates_keeping_first(self) -> None:
        assert parse_wallet_input("0xbbb,0xaaa,0xbbb") == ("0xbbb", "0xaaa")

    def test_empty(self) -> None:
        assert parse_wallet_input("") == ()
        assert parse_wallet_input("   ,  ") == ()

    def test_normalize_wallets_tolerates_empty_entries(self) -> None:
        assert normalize_wallets(["", "0xaaa", None]) == ("0xaaa",)  # type: ignore[list-item]


class TestBaselineHolding:
    def test_pnl_fields(self, dashboard_config: DashboardConfig) -> None:
        h = baseline_holding(
            make_raw_holding(initial_value=100, current_value=150, realized_pnl=10),
            dashboard_config,
        )
        assert h.unrealized_pnl == 50.00
        assert h.total_pnl == 60.00
        assert h.pct_return == 60.00

    def test_rounding(self, dashboard_config: DashboardConfig) -> None:
        h = baseline_holding(
            make_raw_holding(
                initial_value=99.6,
                current_value=123.457,
                realized_pnl=1.234,
                cur_price=0.123456,
            ),
            dashboard_config,
        )
        assert h.cur_price == 0.1235
        assert h.initial_value == 100.0
        assert h.current_value == 123.46
        assert h.realized_pnl == 1.23

    def test_zero_initial_value(self, dashboard_config: DashboardConfig) -> None:
        h = baseline_holding(
            make_raw_holding(initial_value=0, current_value=5, realized_pnl=0),
            dashboard_config,
        )
        assert h.pct_return == 0.0
        assert h.total_pnl == 5.0

    def test_link_icon_and_size(self, dashboard_config: DashboardConfig) -> None:
        h = baseline_holding(make_raw_holding(size=None), dashboard_config)
        assert h.market_link == "https://polymarket.com/event/event-tok1"
        assert h.icon == dashboard_config.fallback_icon_url
        assert h.size == 0.0

        with_image = baseline_holding(
            make_raw_holding(image_url="https://img/x.png"), dashboard_config
        )
        assert with_image.icon == "https://img/x.png"


class TestCombineHoldings:
    @pytest.mark.parametrize("s1, s2", [(10.0, 5.0), (0.0, 3.0), (0.0, 0.0), (2.5, 7.25)])
    def test_sizes_and_totals_sum(
        self, dashboard_config: DashboardConfig, s1: float, s2: float
    ) -> None:
        a = baseline_holding(
            make_raw_holding(wallet=WALLET_A, size=s1, realized_pnl=1), dashboard_config
        )
        b = baseline_holding(
            make_raw_holding(wallet=WALLET_B, size=s2, realized_pnl=-3), dashboard_config
        )

        combined = combine_holdings([a, b])

        assert list(combined) == ["tok1"]
        merged = combined["tok1"]
        assert merged.size == s1 + s2
        assert merged.total_pnl == pytest.approx(a.total_pnl + b.total_pnl)
        assert merged.realized_pnl == pytest.approx(-2.0)
        assert merged.initial_value == 200.0
        assert merged.current_value == 300.0

    def test_first_seen_non_numeric_fields(self, dashboard_config: DashboardConfig) -> None:
        a = baseline_holding(
            make_raw_holding(wallet=WALLET_A, title="First", image_url="https://a.png"),
            dashboard_config,
        )
        b = baseline_holding(
            make_raw_holding(wallet=WALLET_B, title="Second", image_url="https://b.png"),
            dashboard_config,
        )
        merged = combine_holdings([a, b])["tok1"]
        assert merged.title == "First"
        assert merged.icon == "https://a.png"

    def test_combined_wallet_marker(self, dashboard_config: DashboardConfig) -> None:
        a = baseline_holding(make_raw_holding(wallet=WALLET_A), dashboard_config)
        b = baseline_holding(make_raw_holding(wallet=WALLET_B), dashboard_config)
        merged = combine_holdings([a, b])["tok1"]
        assert merged.wallet == COMBINED_WALLET
        assert merged.wallets == (WALLET_A, WALLET_B)

    def test_single_wallet_keeps_owner(self, dashboard_config: DashboardConfig) -> None:
        a = baseline_holding(make_raw_holding("tok1", WALLET_A), dashboard_config)
        b = baseline_holding(make_raw_holding("tok2", WALLET_A), dashboard_config)
        combined = combine_holdings([a, b])
        assert {h.wallet for h in combined.values()} == {WALLET_A}

    def test_pct_return_recomputed(self, dashboard_config: DashboardConfig) -> None:
        a = baseline_holding(
            make_raw_holding(wallet=WALLET_A, initial_value=100, current_value=150,
                             realized_pnl=0),
            dashboard_config,
        )
        b = baseline_holding(
            make_raw_holding(wallet=WALLET_B, initial_value=300, current_value=250,
                             realized_pnl=0),
            dashboard_config,
        )
        merged = combine_holdings([a, b])["tok1"]
        # total 0 on 400 invested
        assert merged.total_pnl == 0.0
        assert merged.pct_return == 0.0

    def test_sub_dollar_position_keeps_baseline_pct_return(
        self, dashboard_config: DashboardConfig
    ) -> None:
        # initial value 0.40 rounds to 0, so the summed initial value is zero
        h = baseline_holding(
            make_raw_holding(initial_value=0.4, current_value=0.6, realized_pnl=0),
            dashboard_config,
        )
        assert h.initial_value == 0.0
        assert h.pct_return == 50.0

        merged = combine_holdings([h])["tok1"]
        assert merged.pct_return == 50.0
        assert merged == h

    def test_empty(self) -> None:
        assert combine_holdings([]) == {}


class TestHoldingsAggregator:
    @pytest.mark.asyncio
    async def test_combines_two_wallets(
        self, holdings_source: AsyncMock, dashboard_config: DashboardConfig
    ) -> None:
        aggregator = HoldingsAggregator(holdings_source, dashboard_config)
        result = await aggregator.aggregate([WALLET_A, WALLET_B])
        assert result["tok1"].size == 15.0

    @pytest.mark.asyncio
    async def test_failing_wallet_is_isolated(
        self, holdings_source: AsyncMock, dashboard_config: DashboardConfig
    ) -> None:
        aggregator = HoldingsAggregator(holdings_source, dashboard_config)
        with_failure = await aggregator.aggregate([WALLET_BAD, WALLET_A])
        alone = await aggregator.aggregate([WALLET_A])
        assert with_failure == alone

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_isolated(
        self, dashboard_config: DashboardConfig
    ) -> None:
        source = AsyncMock()
        source.fetch_holdings.side_effect = RuntimeError("socket closed")
        aggregator = HoldingsAggregator(source, dashboard_config)
        assert await aggregator.aggregate([WALLET_A]) == {}

    @pytest.mark.asyncio
    async def test_empty_wallets_make_no_calls(
        self, holdings_source: AsyncMock, dashboard_config: DashboardConfig
    ) -> None:
        aggregator = HoldingsAggregator(holdings_source, dashboard_config)
        assert await aggregator.aggregate([]) == {}
        assert await aggregator.aggregate(["not-a-wallet", "  "]) == {}
        holdings_source.fetch_holdings.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_wallets_fetched_once(
        self, holdings_source: AsyncMock, dashboard_config: DashboardConfig
    ) -> None:
        aggregator = HoldingsAggregator(holdings_source, dashboard_config)
        result = await aggregator.aggregate([WALLET_A, WALLET_A])
        assert holdings_source.fetch_holdings.await_count == 1
        assert result["tok1"].size == 10.0

    @pytest.mark.asyncio
    async def test_wallet_stamped_from_request(
        self, dashboard_config: DashboardConfig
    ) -> None:
        source = AsyncMock()
        source.fetch_holdings.return_value = [make_raw_holding(wallet="")]
        aggregator = HoldingsAggregator(source, dashboard_config)
        raw = await aggregator.fetch_all([WALLET_B])
        assert raw[0].wallet == WALLET_B
