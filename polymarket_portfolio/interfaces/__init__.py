"""Protocol interfaces for the portfolio tracker's data sources."""
from .price_oracle import PriceOracle
from .sources import HoldingsSource, TradeSource

__all__ = ["HoldingsSource", "PriceOracle", "TradeSource"]
