"""Holdings and trade source protocols — per-wallet fetches that may raise."""
from typing import Protocol

from ..models import RawHolding, RawTrade


class HoldingsSource(Protocol):
    """Fetches open positions for one wallet. Raises FetchError on failure."""

    async def fetch_holdings(self, wallet_address: str) -> list[RawHolding]: ...


class TradeSource(Protocol):
    """Fetches trade activity for one wallet. Raises FetchError on failure."""

    async def fetch_trades(self, wallet_address: str, hours: int) -> list[RawTrade]: ...
