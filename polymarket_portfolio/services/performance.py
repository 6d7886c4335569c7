"""Period performance — price change per asset over the selected window."""
from __future__ import annotations

import logging
import math
import re
import time
from typing import Any, Callable, Iterable, Mapping

from ..config import DashboardConfig
from ..interfaces.price_oracle import PriceOracle
from ..metrics import build_price_snapshot, calc_pnl_change, calc_projected_pnl
from ..models import AggregatedHolding, EnrichedHolding, PriceSnapshot
from .concurrency import settle_all

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 24

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def resolve_window_hours(value: Any, default: int = DEFAULT_WINDOW_HOURS) -> int:
    """Interpret a user-supplied window in hours.

    Strings are read up to the first non-digit (``"12h"`` -> 12,
    ``"1.5"`` -> 1). Anything unparsable or not positive gives ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        hours = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        hours = int(value)
    else:
        match = _LEADING_INT_RE.match(str(value))
        if not match:
            return default
        hours = int(match.group(1))
    return hours if hours > 0 else default


async def fetch_price_snapshot(
    oracle: PriceOracle,
    asset_id: str,
    hours: int,
    now: int,
    fidelity: int = 1,
) -> PriceSnapshot | None:
    """Price now vs. the price nearest to ``hours`` ago, or None if unavailable."""
    target_ts = now - hours * 3600

    current_price = await oracle.fetch_current_price(asset_id)
    if current_price is None:
        logger.warning(
            "Could not get current price for %s, skipping period change", asset_id
        )
        return None

    history = await oracle.fetch_price_history(asset_id, target_ts, now, fidelity)
    if not history:
        logger.warning("No price history for %s in the last %d hours", asset_id, hours)
        return None

    return build_price_snapshot(asset_id, current_price, history, target_ts)


def enrich_holding(
    holding: AggregatedHolding, snapshot: PriceSnapshot | None
) -> EnrichedHolding:
    """Attach period figures to a holding; no snapshot means all zeros."""
    if snapshot is None:
        return EnrichedHolding(holding=holding)

    return EnrichedHolding(
        holding=holding,
        pnl_change_period=round(calc_pnl_change(snapshot.change, holding.size), 2),
        asset_price_pct_change_period=round(snapshot.change_percent, 2),
        projected_pnl_from_pct_change_period=round(
            calc_projected_pnl(snapshot.change_percent, holding.size, snapshot.past_price),
            2,
        ),
    )


class PerformanceEnricher:
    """Look up one price snapshot per distinct asset and merge it into holdings."""

    def __init__(
        self,
        oracle: PriceOracle,
        config: DashboardConfig,
        fidelity: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._oracle = oracle
        self._config = config
        self._fidelity = fidelity
        self._clock = clock

    async def snapshots(
        self, assets: Iterable[str], hours: int
    ) -> dict[str, PriceSnapshot]:
        """Fetch snapshots concurrently; failed or empty assets are left out."""
        unique_assets = list(dict.fromkeys(assets))
        if not unique_assets:
            return {}

        now = int(self._clock())
        results = await settle_all(
            (
                (asset, fetch_price_snapshot(
                    self._oracle, asset, hours, now, self._fidelity
                ))
                for asset in unique_assets
            ),
            max_concurrency=self._config.max_concurrency,
        )

        found: dict[str, PriceSnapshot] = {}
        for result in results:
            if not result.ok:
                logger.warning(
                    "Failed to get price info for asset %s: %s", result.key, result.error
                )
            elif result.value is not None:
                found[result.key] = result.value
        return found

    async def enrich(
        self, holdings: Mapping[str, AggregatedHolding], hours: Any
    ) -> dict[str, EnrichedHolding]:
        """Return ``holdings`` with period PnL and price-change figures attached."""
        window = resolve_window_hours(hours, self._config.default_hours)
        found = await self.snapshots((h.asset for h in holdings.values()), window)
        logger.info(
            "Price snapshots for %d of %d assets over %dh",
            len(found), len(holdings), window,
        )
        return {
            key: enrich_holding(holding, found.get(holding.asset))
            for key, holding in holdings.items()
        }
