"""Pure parsing functions for Polymarket API payloads — no I/O."""
from __future__ import annotations

import math
from typing import Any

from .models import PricePoint, RawHolding, RawTrade


def to_float(value: Any) -> float:
    """Coerce an API number to float; missing, null or garbage becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    return int(to_float(value))


def parse_holding(item: dict[str, Any], wallet: str) -> RawHolding:
    """Parse one ``/positions`` item into a RawHolding.

    The condition id comes from ``conditionId`` when present, else ``id``.
    The image comes from ``imageUrl``, else ``icon``.
    """
    size = item.get("size")
    return RawHolding(
        asset=str(item.get("asset", "")),
        title=str(item.get("title") or ""),
        condition_id=str(item.get("conditionId") or item.get("id") or ""),
        event_slug=str(item.get("eventSlug") or ""),
        cur_price=to_float(item.get("curPrice")),
        initial_value=to_float(item.get("initialValue")),
        current_value=to_float(item.get("currentValue")),
        realized_pnl=to_float(item.get("realizedPnl")),
        wallet=wallet,
        image_url=item.get("imageUrl") or item.get("icon") or None,
        size=None if size is None else to_float(size),
    )


def parse_trade(item: dict[str, Any], wallet: str) -> RawTrade:
    """Parse one ``/activity`` item into a RawTrade."""
    return RawTrade(
        timestamp=to_int(item.get("timestamp")),
        asset=str(item.get("asset", "")),
        side=str(item.get("side") or "").upper(),
        price=to_float(item.get("price")),
        usdc_size=to_float(item.get("usdcSize")),
        size=to_float(item.get("size")),
        wallet=wallet,
    )


def is_trade_event(item: dict[str, Any]) -> bool:
    """Activity records without a type are assumed to be trades."""
    event_type = item.get("type")
    return event_type is None or str(event_type).upper() == "TRADE"


def parse_price_history(payload: Any) -> list[PricePoint]:
    """Parse a ``/prices-history`` body, skipping malformed points."""
    if not isinstance(payload, dict):
        return []
    points: list[PricePoint] = []
    for point in payload.get("history") or []:
        if not isinstance(point, dict) or "t" not in point or "p" not in point:
            continue
        points.append(PricePoint(t=to_int(point["t"]), p=to_float(point["p"])))
    return points


def market_link(event_slug: str, base_url: str) -> str:
    return f"{base_url}{event_slug or ''}"


def short_wallet(address: str) -> str:
    """Short label like ``0x1234...abcd``."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"
