"""Dashboard orchestration — one full recomputation per query cycle."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..clients import DataApiClient
from ..config import AppConfig
from ..errors import AggregateError
from ..interfaces.price_oracle import PriceOracle
from ..interfaces.sources import HoldingsSource, TradeSource
from ..models import (
    ALL_WALLETS,
    COMBINED_WALLET,
    DashboardSummary,
    EnrichedHolding,
    ProcessedTrade,
    QueryParameters,
    RankingDirection,
    RankingMetric,
    WalletOption,
)
from ..oracles import ClobPriceOracle
from ..parser import short_wallet
from .holdings import HoldingsAggregator, normalize_wallets
from .performance import PerformanceEnricher, resolve_window_hours
from .ranking import rank_holdings
from .trades import TradeProcessor, build_title_index

logger = logging.getLogger(__name__)


def _wallet_label(wallet: str) -> str:
    if wallet == COMBINED_WALLET:
        return "Combined"
    return short_wallet(wallet)


@dataclass(frozen=True)
class DashboardResult:
    """Everything computed in one cycle, with wallet-filtered views.

    View arguments left as ``None`` fall back to the query parameters the
    result was computed for.
    """

    params: QueryParameters = field(default_factory=QueryParameters)
    holdings: tuple[EnrichedHolding, ...] = ()
    trades: tuple[ProcessedTrade, ...] = ()
    hours: int = 24
    error: str | None = None
    cash_balance: float = 0.0
    leaders_limit: int = 10
    trade_display_limit: int = 25

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise AggregateError(self.error)

    def _filter(self, wallet_filter: str | None) -> str:
        return self.params.wallet_filter if wallet_filter is None else wallet_filter

    def holdings_for(self, wallet_filter: str | None = None) -> list[EnrichedHolding]:
        wallet = self._filter(wallet_filter)
        if wallet == ALL_WALLETS:
            return list(self.holdings)
        return [h for h in self.holdings if h.wallet == wallet]

    def trades_for(
        self, wallet_filter: str | None = None, limit: int | None = None
    ) -> list[ProcessedTrade]:
        """Newest trades for the filter, capped at the display limit."""
        wallet = self._filter(wallet_filter)
        trades = [t for t in self.trades if wallet == ALL_WALLETS or t.wallet == wallet]
        return trades[: self.trade_display_limit if limit is None else limit]

    def summary_for(self, wallet_filter: str | None = None) -> DashboardSummary:
        holdings = self.holdings_for(wallet_filter)
        if not holdings:
            return DashboardSummary()
        return DashboardSummary(
            realized_pnl=round(sum(h.holding.realized_pnl for h in holdings), 2),
            unrealized_pnl=round(sum(h.holding.unrealized_pnl for h in holdings), 2),
            total_pnl=round(sum(h.holding.total_pnl for h in holdings), 2),
            cash_balance=self.cash_balance,
        )

    def leaders(
        self,
        metric: RankingMetric | None = None,
        direction: RankingDirection | None = None,
        wallet_filter: str | None = None,
    ) -> list[EnrichedHolding]:
        return rank_holdings(
            self.holdings_for(wallet_filter),
            metric or self.params.metric,
            direction or self.params.direction,
            limit=self.leaders_limit,
        )

    def wallet_options(self) -> list[WalletOption]:
        """``All Wallets`` plus one option per distinct owning wallet, ``combined`` included."""
        wallets = dict.fromkeys(h.wallet for h in self.holdings)
        return [WalletOption(label="All Wallets", value=ALL_WALLETS)] + [
            WalletOption(label=_wallet_label(w), value=w) for w in wallets
        ]


class Dashboard:
    """Wires the fetch clients into the holdings → performance → trades pipeline."""

    def __init__(
        self,
        config: AppConfig,
        holdings_source: HoldingsSource | None = None,
        trade_source: TradeSource | None = None,
        oracle: PriceOracle | None = None,
    ) -> None:
        self._config = config
        data_api = DataApiClient(config.data_api)

        self._holdings = HoldingsAggregator(holdings_source or data_api, config.dashboard)
        self._enricher = PerformanceEnricher(
            oracle or ClobPriceOracle(config.clob),
            config.dashboard,
            fidelity=config.clob.history_fidelity,
        )
        self._trades = TradeProcessor(trade_source or data_api, config.dashboard)

    def _result(self, params: QueryParameters, hours: int, **kwargs) -> DashboardResult:
        dash = self._config.dashboard
        return DashboardResult(
            params=params,
            hours=hours,
            leaders_limit=dash.leaders_limit,
            trade_display_limit=dash.trade_display_limit,
            **kwargs,
        )

    async def compute_dashboard(self, params: QueryParameters) -> DashboardResult:
        """Fetch, merge, enrich and order everything for ``params``.

        Fetch failures only shrink the result. Anything else that goes wrong
        is reported through ``DashboardResult.error``.
        """
        wallets = normalize_wallets(params.wallets)
        hours = resolve_window_hours(params.hours, self._config.dashboard.default_hours)

        if not wallets:
            logger.info("No valid wallet addresses, nothing to load")
            return self._result(params, hours)

        logger.info("Loading dashboard for %d wallet(s) over %dh", len(wallets), hours)
        try:
            aggregated = await self._holdings.aggregate(wallets)
            enriched = await self._enricher.enrich(aggregated, hours)
            titles = build_title_index(enriched.values())
            trades = await self._trades.process(wallets, hours, titles)
        except Exception as e:
            logger.exception("Error loading dashboard data")
            return self._result(params, hours, error=str(e) or type(e).__name__)

        return self._result(
            params,
            hours,
            holdings=tuple(enriched.values()),
            trades=tuple(trades),
            cash_balance=self._config.dashboard.placeholder_cash_balance,
        )


class DashboardSession:
    """Holds the latest result; a cycle that finishes after a newer one started is dropped."""

    def __init__(self, dashboard: Dashboard) -> None:
        self._dashboard = dashboard
        self._started = 0
        self._completed = 0
        self.result = DashboardResult()

    @property
    def loading(self) -> bool:
        return self._completed < self._started

    async def refresh(self, params: QueryParameters) -> DashboardResult:
        self._started += 1
        cycle = self._started

        try:
            result = await self._dashboard.compute_dashboard(params)
        finally:
            if cycle == self._started:
                self._completed = cycle

        if cycle != self._started:
            logger.debug("Discarding results of superseded cycle %d", cycle)
            return self.result

        self.result = result
        return result
