"""Trade activity — fetch per wallet, normalize and order for display."""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Mapping
from zoneinfo import ZoneInfo

from ..config import DashboardConfig
from ..interfaces.sources import TradeSource
from ..models import AggregatedHolding, EnrichedHolding, ProcessedTrade, RawTrade
from .concurrency import settle_all
from .holdings import normalize_wallets

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def _format_number(value: float | int) -> str:
    """Render a number without a trailing ``.0`` for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def trade_id(trade: RawTrade) -> str:
    """Stable id: same timestamp, asset, side, notional and price give the same id."""
    return "-".join(
        (
            str(trade.timestamp),
            trade.asset,
            trade.side,
            _format_number(trade.usdc_size),
            _format_number(trade.price),
        )
    )


def format_timestamp(epoch: int, tz: tzinfo = timezone.utc) -> str:
    """``MM/DD/YYYY, hh:mm:ss AM`` in the given timezone."""
    return datetime.fromtimestamp(epoch, tz).strftime(TIMESTAMP_FORMAT)


def resolve_title(asset_id: str, titles: Mapping[str, str]) -> str:
    title = titles.get(asset_id)
    if title:
        return title
    return f"Unknown Market ({asset_id[:8]}...)"


def build_title_index(
    holdings: Iterable[AggregatedHolding | EnrichedHolding],
) -> dict[str, str]:
    """Map asset id to market title."""
    return {h.asset: h.title for h in holdings}


def process_trade(
    trade: RawTrade, titles: Mapping[str, str], tz: tzinfo = timezone.utc
) -> ProcessedTrade:
    return ProcessedTrade(
        id=trade_id(trade),
        timestamp=format_timestamp(trade.timestamp, tz),
        epoch=trade.timestamp,
        asset=trade.asset,
        title=resolve_title(trade.asset, titles),
        side=trade.side.lower(),
        price=round(trade.price, 4),
        usdc_size=round(trade.usdc_size, 2),
        size=round(trade.size, 4),
        wallet=trade.wallet or "N/A",
    )


def process_trades(
    raw_trades: Iterable[RawTrade],
    titles: Mapping[str, str],
    tz: tzinfo = timezone.utc,
) -> list[ProcessedTrade]:
    """Normalize every trade and sort newest first. Nothing is truncated here."""
    processed = [process_trade(t, titles, tz) for t in raw_trades]
    return sorted(processed, key=lambda t: t.epoch, reverse=True)


class TradeProcessor:
    """Fetch trades for every wallet concurrently and normalize them."""

    def __init__(self, source: TradeSource, config: DashboardConfig) -> None:
        self._source = source
        self._config = config
        self._tz = ZoneInfo(config.display_timezone)

    async def fetch_all(self, wallets: Iterable[str], hours: int) -> list[RawTrade]:
        """Fetch every wallet's trades; a failing wallet contributes nothing."""
        wallet_list = normalize_wallets(wallets)
        if not wallet_list:
            return []

        results = await settle_all(
            ((w, self._source.fetch_trades(w, hours)) for w in wallet_list),
            max_concurrency=self._config.max_concurrency,
        )

        raw: list[RawTrade] = []
        for result in results:
            if not result.ok:
                logger.warning(
                    "Error fetching trades for wallet %s: %s", result.key, result.error
                )
                continue
            raw.extend(replace(t, wallet=result.key) for t in result.value or [])
        return raw

    async def process(
        self, wallets: Iterable[str], hours: int, titles: Mapping[str, str]
    ) -> list[ProcessedTrade]:
        raw = await self.fetch_all(wallets, hours)
        trades = process_trades(raw, titles, self._tz)
        logger.info("Processed %d trades", len(trades))
        return trades
