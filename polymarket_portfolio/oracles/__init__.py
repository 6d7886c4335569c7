"""Price oracle implementations."""
from .clob import ClobPriceOracle

__all__ = ["ClobPriceOracle"]
