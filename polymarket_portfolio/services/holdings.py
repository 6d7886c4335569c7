"""Holdings aggregation — fetch per wallet, merge duplicates across wallets."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from ..config import DashboardConfig
from ..interfaces.sources import HoldingsSource
from ..metrics import calc_pct_return, calc_unrealized_pnl
from ..models import COMBINED_WALLET, AggregatedHolding, RawHolding
from ..parser import market_link
from .concurrency import settle_all

logger = logging.getLogger(__name__)

WALLET_PREFIX = "0x"


def normalize_wallets(wallets: Iterable[str]) -> tuple[str, ...]:
    """Trim, keep ``0x``-prefixed entries and drop repeats (first one wins)."""
    cleaned = (w.strip() for w in wallets if w)
    return tuple(dict.fromkeys(w for w in cleaned if w.startswith(WALLET_PREFIX)))


def parse_wallet_input(text: str) -> tuple[str, ...]:
    """Parse a comma-separated wallet list as typed by a user."""
    return normalize_wallets((text or "").split(","))


def baseline_holding(raw: RawHolding, config: DashboardConfig) -> AggregatedHolding:
    """Derive the per-wallet PnL fields for one raw position."""
    realized = round(raw.realized_pnl, 2)
    unrealized = round(calc_unrealized_pnl(raw.current_value, raw.initial_value), 2)
    total = round(realized + unrealized, 2)

    return AggregatedHolding(
        asset=raw.asset,
        title=raw.title,
        condition_id=raw.condition_id,
        cur_price=round(raw.cur_price, 4),
        initial_value=float(round(raw.initial_value)),
        current_value=round(raw.current_value, 2),
        realized_pnl=realized,
        unrealized_pnl=unrealized,
        total_pnl=total,
        pct_return=round(calc_pct_return(total, raw.initial_value), 2),
        market_link=market_link(raw.event_slug, config.market_base_url),
        icon=raw.image_url or config.fallback_icon_url,
        size=raw.size or 0.0,
        wallet=raw.wallet,
        wallets=(raw.wallet,),
    )


def _merge(existing: AggregatedHolding, other: AggregatedHolding) -> AggregatedHolding:
    """Sum the numeric fields; everything else stays first-seen."""
    wallets = existing.wallets
    if other.wallet not in wallets:
        wallets = wallets + (other.wallet,)

    return replace(
        existing,
        size=existing.size + other.size,
        initial_value=existing.initial_value + other.initial_value,
        current_value=round(existing.current_value + other.current_value, 2),
        realized_pnl=round(existing.realized_pnl + other.realized_pnl, 2),
        unrealized_pnl=round(existing.unrealized_pnl + other.unrealized_pnl, 2),
        total_pnl=round(existing.total_pnl + other.total_pnl, 2),
        wallet=COMBINED_WALLET if len(wallets) > 1 else existing.wallet,
        wallets=wallets,
    )


def combine_holdings(
    holdings: Iterable[AggregatedHolding],
) -> dict[str, AggregatedHolding]:
    """Reduce holdings to one entry per asset id.

    Percent return is recomputed from the summed totals when the summed
    initial value is non-zero; otherwise the baseline figure is kept.
    """
    combined: dict[str, AggregatedHolding] = {}
    for holding in holdings:
        existing = combined.get(holding.asset)
        combined[holding.asset] = holding if existing is None else _merge(existing, holding)

    return {
        asset: _with_pct_return(holding) for asset, holding in combined.items()
    }


def _with_pct_return(holding: AggregatedHolding) -> AggregatedHolding:
    if holding.initial_value == 0:
        return holding
    return replace(
        holding,
        pct_return=round(calc_pct_return(holding.total_pnl, holding.initial_value), 2),
    )


class HoldingsAggregator:
    """Fetch holdings for every wallet concurrently and merge them by asset."""

    def __init__(self, source: HoldingsSource, config: DashboardConfig) -> None:
        self._source = source
        self._config = config

    async def fetch_all(self, wallets: Iterable[str]) -> list[RawHolding]:
        """Fetch every wallet's holdings; a failing wallet contributes nothing."""
        wallet_list = normalize_wallets(wallets)
        if not wallet_list:
            return []

        results = await settle_all(
            ((w, self._source.fetch_holdings(w)) for w in wallet_list),
            max_concurrency=self._config.max_concurrency,
        )

        raw: list[RawHolding] = []
        for result in results:
            if not result.ok:
                logger.warning(
                    "Error fetching holdings for wallet %s: %s", result.key, result.error
                )
                continue
            raw.extend(replace(h, wallet=result.key) for h in result.value or [])
        return raw

    async def aggregate(self, wallets: Iterable[str]) -> dict[str, AggregatedHolding]:
        """Return one AggregatedHolding per distinct asset across ``wallets``."""
        raw = await self.fetch_all(wallets)
        combined = combine_holdings(baseline_holding(h, self._config) for h in raw)
        logger.info(
            "Aggregated %d positions into %d assets", len(raw), len(combined)
        )
        return combined
