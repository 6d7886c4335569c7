"""Unit tests for performance leader ranking."""
from __future__ import annotations

import pytest

from polymarket_portfolio.models import EnrichedHolding, RankingDirection, RankingMetric
from polymarket_portfolio.services.ranking import rank_holdings
from tests.factories import make_enriched


def _by_pnl_change(values: list[float]) -> list[EnrichedHolding]:
    return _by_metric(RankingMetric.PNL_CHANGE_PERIOD, values)


def _by_metric(metric: RankingMetric, values: list[float]) -> list[EnrichedHolding]:
    if metric is RankingMetric.TOTAL_PNL:
        return [make_enriched(f"tok{i}", total_pnl=v) for i, v in enumerate(values)]
    return [make_enriched(f"tok{i}", **{metric.value: v}) for i, v in enumerate(values)]


class TestRankHoldings:
    @pytest.mark.parametrize("metric", list(RankingMetric))
    def test_gainers_keep_input_order_on_ties(self, metric: RankingMetric) -> None:
        holdings = _by_metric(metric, [100, -50, 100, 0])
        ranked = rank_holdings(holdings, metric, RankingDirection.GAINERS)
        assert [h.asset for h in ranked] == ["tok0", "tok2", "tok3", "tok1"]

    @pytest.mark.parametrize("metric", list(RankingMetric))
    def test_losers_ascending(self, metric: RankingMetric) -> None:
        holdings = _by_metric(metric, [100, -50, 100, 0])
        ranked = rank_holdings(holdings, metric, RankingDirection.LOSERS)
        assert [h.asset for h in ranked] == ["tok1", "tok3", "tok0", "tok2"]

    def test_limit(self) -> None:
        holdings = _by_pnl_change([float(i) for i in range(15)])
        ranked = rank_holdings(
            holdings, RankingMetric.PNL_CHANGE_PERIOD, RankingDirection.GAINERS
        )
        assert len(ranked) == 10
        assert ranked[0].pnl_change_period == 14.0

        top3 = rank_holdings(
            holdings, RankingMetric.PNL_CHANGE_PERIOD, RankingDirection.GAINERS, limit=3
        )
        assert [h.pnl_change_period for h in top3] == [14.0, 13.0, 12.0]

    def test_input_not_modified(self) -> None:
        holdings = _by_pnl_change([1, 3, 2])
        before = list(holdings)
        rank_holdings(holdings, RankingMetric.PNL_CHANGE_PERIOD, RankingDirection.GAINERS)
        assert holdings == before

    def test_total_pnl_metric(self) -> None:
        holdings = [make_enriched("a", total_pnl=5), make_enriched("b", total_pnl=50)]
        ranked = rank_holdings(holdings, RankingMetric.TOTAL_PNL, RankingDirection.GAINERS)
        assert [h.asset for h in ranked] == ["b", "a"]

    @pytest.mark.parametrize("metric", list(RankingMetric))
    def test_every_metric_ranks(self, metric: RankingMetric) -> None:
        holdings = [
            make_enriched(
                "low",
                total_pnl=-1,
                pnl_change_period=-1,
                asset_price_pct_change_period=-1,
                projected_pnl_from_pct_change_period=-1,
            ),
            make_enriched(
                "high",
                total_pnl=1,
                pnl_change_period=1,
                asset_price_pct_change_period=1,
                projected_pnl_from_pct_change_period=1,
            ),
        ]
        ranked = rank_holdings(holdings, metric, RankingDirection.GAINERS)
        assert ranked[0].asset == "high"

    def test_missing_value_counts_as_zero(self) -> None:
        holdings = [
            make_enriched("neg", pnl_change_period=-1.0),
            make_enriched("none", pnl_change_period=None),  # type: ignore[arg-type]
            make_enriched("pos", pnl_change_period=1.0),
        ]
        ranked = rank_holdings(
            holdings, RankingMetric.PNL_CHANGE_PERIOD, RankingDirection.GAINERS
        )
        assert [h.asset for h in ranked] == ["pos", "none", "neg"]

    def test_empty(self) -> None:
        assert rank_holdings([], RankingMetric.TOTAL_PNL, RankingDirection.LOSERS) == []
