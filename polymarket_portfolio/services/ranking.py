"""Performance leaders — rank holdings by a metric and direction."""
from __future__ import annotations

from typing import Iterable

from ..models import EnrichedHolding, RankingDirection, RankingMetric

DEFAULT_LEADERS_LIMIT = 10


def rank_holdings(
    holdings: Iterable[EnrichedHolding],
    metric: RankingMetric,
    direction: RankingDirection,
    limit: int = DEFAULT_LEADERS_LIMIT,
) -> list[EnrichedHolding]:
    """Top ``limit`` holdings by ``metric``.

    Gainers sort descending, losers ascending. Equal values keep their input
    order and the input is never modified.
    """
    ranked = sorted(
        holdings,
        key=metric.value_of,
        reverse=direction is RankingDirection.GAINERS,
    )
    return ranked[:limit]
