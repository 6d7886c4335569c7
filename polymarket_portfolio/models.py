"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

COMBINED_WALLET = "combined"
ALL_WALLETS = "all"


@dataclass(frozen=True)
class RawHolding:
    """One position for one wallet, as returned by the holdings source."""

    asset: str
    title: str
    condition_id: str
    event_slug: str
    cur_price: float
    initial_value: float
    current_value: float
    realized_pnl: float
    wallet: str = ""
    image_url: str | None = None
    size: float | None = None


@dataclass(frozen=True)
class AggregatedHolding:
    """One row per distinct asset across the requested wallets."""

    asset: str
    title: str
    condition_id: str
    cur_price: float
    initial_value: float
    current_value: float
    realized_pnl: float
    unrealized_pnl: float
    total_pnl: float
    pct_return: float
    market_link: str
    icon: str
    size: float
    wallet: str
    wallets: tuple[str, ...] = ()


@dataclass(frozen=True)
class PricePoint:
    t: int
    p: float


@dataclass(frozen=True)
class PriceSnapshot:
    """Past vs current price for one asset over the selected window."""

    asset: str
    past_price: float
    past_timestamp: int
    current_price: float
    change: float
    change_percent: float


@dataclass(frozen=True)
class EnrichedHolding:
    """An aggregated holding plus its period performance figures."""

    holding: AggregatedHolding
    pnl_change_period: float = 0.0
    asset_price_pct_change_period: float = 0.0
    projected_pnl_from_pct_change_period: float = 0.0

    # Convenience pass-throughs used by views and ranking
    @property
    def asset(self) -> str:
        return self.holding.asset

    @property
    def title(self) -> str:
        return self.holding.title

    @property
    def wallet(self) -> str:
        return self.holding.wallet

    @property
    def wallets(self) -> tuple[str, ...]:
        return self.holding.wallets or (self.holding.wallet,)

    @property
    def total_pnl(self) -> float:
        return self.holding.total_pnl


@dataclass(frozen=True)
class RawTrade:
    """One trade event for one wallet, as returned by the activity source."""

    timestamp: int
    asset: str
    side: str
    price: float
    usdc_size: float
    size: float
    wallet: str = ""


@dataclass(frozen=True)
class ProcessedTrade:
    id: str
    timestamp: str
    epoch: int
    asset: str
    title: str
    side: str
    price: float
    usdc_size: float
    size: float
    wallet: str


class RankingMetric(Enum):
    """Performance leader metrics, each with its own accessor."""

    PNL_CHANGE_PERIOD = "pnl_change_period"
    ASSET_PRICE_PCT_CHANGE_PERIOD = "asset_price_pct_change_period"
    PROJECTED_PNL_FROM_PCT_CHANGE_PERIOD = "projected_pnl_from_pct_change_period"
    TOTAL_PNL = "total_pnl"

    @property
    def accessor(self) -> Callable[[EnrichedHolding], float | None]:
        return _METRIC_ACCESSORS[self]

    def value_of(self, holding: EnrichedHolding) -> float:
        """Metric value for a holding; missing values count as zero."""
        value = self.accessor(holding)
        return value if value is not None else 0.0


_METRIC_ACCESSORS: dict[RankingMetric, Callable[[EnrichedHolding], float | None]] = {
    RankingMetric.PNL_CHANGE_PERIOD: lambda h: h.pnl_change_period,
    RankingMetric.ASSET_PRICE_PCT_CHANGE_PERIOD: lambda h: h.asset_price_pct_change_period,
    RankingMetric.PROJECTED_PNL_FROM_PCT_CHANGE_PERIOD: (
        lambda h: h.projected_pnl_from_pct_change_period
    ),
    RankingMetric.TOTAL_PNL: lambda h: h.holding.total_pnl,
}


class RankingDirection(Enum):
    GAINERS = "gainers"
    LOSERS = "losers"


@dataclass(frozen=True)
class QueryParameters:
    """Everything one query cycle depends on."""

    wallets: tuple[str, ...] = ()
    hours: int = 24
    wallet_filter: str = ALL_WALLETS
    metric: RankingMetric = RankingMetric.PNL_CHANGE_PERIOD
    direction: RankingDirection = RankingDirection.GAINERS


@dataclass(frozen=True)
class DashboardSummary:
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0
    total_pnl: float = 0.0
    cash_balance: float = 0.0


@dataclass(frozen=True)
class WalletOption:
    label: str
    value: str

