"""HTTP clients for Polymarket data sources."""
from .data_api import DataApiClient

__all__ = ["DataApiClient"]
