"""Exception types shared across clients and services."""
from __future__ import annotations


class PortfolioError(Exception):
    """Base class for portfolio tracker errors."""


class FetchError(PortfolioError):
    """A remote fetch failed (HTTP status, transport error, timeout or bad body)."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class AggregateError(PortfolioError):
    """Merging fetched data failed outside the per-wallet/per-asset isolation."""
