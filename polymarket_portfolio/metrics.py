"""Pure PnL and price-change calculations — no I/O."""
from __future__ import annotations

from typing import Iterable

from .models import PricePoint, PriceSnapshot


def calc_unrealized_pnl(current_value: float, initial_value: float) -> float:
    return current_value - initial_value


def calc_pct_return(total_pnl: float, initial_value: float) -> float:
    """Total PnL as a percentage of the initial value; 0 when nothing was invested."""
    if initial_value == 0:
        return 0.0
    return (total_pnl / initial_value) * 100


def select_nearest_point(
    history: Iterable[PricePoint], target_ts: int
) -> PricePoint | None:
    """Return the point closest in time to ``target_ts``.

    Ties keep the earliest point in iteration order.
    """
    nearest: PricePoint | None = None
    best_distance = 0
    for point in history:
        distance = abs(point.t - target_ts)
        if nearest is None or distance < best_distance:
            nearest = point
            best_distance = distance
    return nearest


def calc_change_percent(change: float, past_price: float) -> float:
    if past_price > 0:
        return (change / past_price) * 100
    return 0.0


def build_price_snapshot(
    asset_id: str,
    current_price: float,
    history: Iterable[PricePoint],
    target_ts: int,
) -> PriceSnapshot | None:
    """Compare the current price with the history point nearest ``target_ts``."""
    point = select_nearest_point(history, target_ts)
    if point is None:
        return None

    change = current_price - point.p
    return PriceSnapshot(
        asset=asset_id,
        past_price=point.p,
        past_timestamp=point.t,
        current_price=current_price,
        change=change,
        change_percent=calc_change_percent(change, point.p),
    )


def calc_pnl_change(change: float, size: float) -> float:
    """PnL moved by the price change over the period for a holding of ``size``."""
    return change * size


def calc_projected_pnl(change_percent: float, size: float, past_price: float) -> float:
    """PnL implied by applying the period % change to the value at period start."""
    return (change_percent / 100) * (size * past_price)
