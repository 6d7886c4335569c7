"""Service modules"""
from .dashboard import Dashboard, DashboardResult, DashboardSession
from .holdings import HoldingsAggregator
from .performance import PerformanceEnricher
from .trades import TradeProcessor

__all__ = [
    "Dashboard",
    "DashboardResult",
    "DashboardSession",
    "HoldingsAggregator",
    "PerformanceEnricher",
    "TradeProcessor",
]
