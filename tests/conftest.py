"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from polymarket_portfolio.config import (
    AppConfig,
    ClobConfig,
    DashboardConfig,
    DataApiConfig,
)
from polymarket_portfolio.errors import FetchError
from polymarket_portfolio.models import (
    PricePoint,
    RawHolding,
    RawTrade,
)
from tests.factories import (
    WALLET_A,
    WALLET_B,
    WALLET_BAD,
    make_raw_holding,
    make_raw_trade,
)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def dashboard_config() -> DashboardConfig:
    return DashboardConfig(
        default_hours=24,
        leaders_limit=10,
        trade_display_limit=25,
        placeholder_cash_balance=50000.0,
        fallback_icon_url="https://example.com/fallback.png",
        market_base_url="https://polymarket.com/event/",
        display_timezone="UTC",
        max_concurrency=4,
    )


@pytest.fixture()
def app_config(dashboard_config: DashboardConfig) -> AppConfig:
    return AppConfig(
        wallets=(WALLET_A,),
        data_api=DataApiConfig(base_url="https://data.example.com", timeout=5),
        clob=ClobConfig(base_url="https://clob.example.com", timeout=5),
        dashboard=dashboard_config,
    )


SAMPLE_YAML = textwrap.dedent("""\
    wallets:
      - "0xAAA0000000000000000000000000000000000001"
      - "0xBBB0000000000000000000000000000000000002"
    data_api:
      base_url: "https://data.example.com/"
      timeout: 7
      trade_limit: 200
    clob:
      base_url: "https://clob.example.com"
      history_fidelity: 5
    dashboard:
      default_hours: 12
      leaders_limit: 5
      trade_display_limit: 10
      placeholder_cash_balance: 1234.5
      display_timezone: "America/New_York"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file



# ---------------------------------------------------------------------------
# Source fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def holdings_by_wallet() -> dict[str, list[RawHolding]]:
    return {
        WALLET_A: [make_raw_holding("tok1", WALLET_A, size=10.0)],
        WALLET_B: [make_raw_holding("tok1", WALLET_B, size=5.0)],
    }


@pytest.fixture()
def holdings_source(holdings_by_wallet: dict[str, list[RawHolding]]) -> AsyncMock:
    """Holdings source that fails for WALLET_BAD and serves the rest from a dict."""

    def _fetch(wallet: str) -> list[RawHolding]:
        if wallet == WALLET_BAD:
            raise FetchError("HTTP 500", url="https://data.example.com/positions")
        return holdings_by_wallet.get(wallet, [])

    source = AsyncMock()
    source.fetch_holdings.side_effect = _fetch
    return source


@pytest.fixture()
def trades_by_wallet() -> dict[str, list[RawTrade]]:
    return {
        WALLET_A: [
            make_raw_trade(1_700_000_100, "tok1", "BUY", wallet=WALLET_A),
            make_raw_trade(1_700_000_300, "tok2", "SELL", wallet=WALLET_A),
        ],
        WALLET_B: [make_raw_trade(1_700_000_200, "tok1", "SELL", wallet=WALLET_B)],
    }


@pytest.fixture()
def trade_source(trades_by_wallet: dict[str, list[RawTrade]]) -> AsyncMock:
    def _fetch(wallet: str, hours: int) -> list[RawTrade]:
        if wallet == WALLET_BAD:
            raise FetchError("timeout", url="https://data.example.com/activity")
        return trades_by_wallet.get(wallet, [])

    source = AsyncMock()
    source.fetch_trades.side_effect = _fetch
    return source


@pytest.fixture()
def oracle() -> AsyncMock:
    """Oracle where every asset moved from 0.40 to 0.50 over the window."""
    mock = AsyncMock()
    mock.fetch_current_price.return_value = 0.5
    mock.fetch_price_history.side_effect = (
        lambda asset_id, start_ts, end_ts, fidelity=1: [
            PricePoint(t=start_ts, p=0.4),
            PricePoint(t=end_ts, p=0.5),
        ]
    )
    return mock
