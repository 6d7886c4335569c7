"""Price oracle protocol — current and historical prices for one asset."""
from typing import Protocol

from ..models import PricePoint


class PriceOracle(Protocol):
    """Abstract interface for fetching outcome-token prices."""

    async def fetch_current_price(self, asset_id: str) -> float | None: ...

    async def fetch_price_history(
        self, asset_id: str, start_ts: int, end_ts: int, fidelity: int = 1
    ) -> list[PricePoint]: ...
