"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ICON_URL = (
    "https://polymarket.com/_next/image?url=https%3A%2F%2Fpolymarket-upload.s3."
    "us-east-2.amazonaws.com%2Fwill-iran-close-the-strait-of-hormuz-in-2025-"
    "8Ws7O_Z5D_TX.jpg&w=256&q=100"
)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DataApiConfig:
    base_url: str = "https://data-api.polymarket.com"
    timeout: int = 15
    trade_limit: int = 500


@dataclass(frozen=True)
class ClobConfig:
    base_url: str = "https://clob.polymarket.com"
    timeout: int = 10
    history_fidelity: int = 1


@dataclass(frozen=True)
class DashboardConfig:
    default_hours: int = 24
    leaders_limit: int = 10
    trade_display_limit: int = 25
    # No balance source exists; shown whenever the filtered set is non-empty.
    placeholder_cash_balance: float = 50000.0
    fallback_icon_url: str = DEFAULT_FALLBACK_ICON_URL
    market_base_url: str = "https://polymarket.com/event/"
    display_timezone: str = "UTC"
    max_concurrency: int = 16


@dataclass(frozen=True)
class AppConfig:
    wallets: tuple[str, ...] = ()
    data_api: DataApiConfig = field(default_factory=DataApiConfig)
    clob: ClobConfig = field(default_factory=ClobConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_wallets(raw: Any) -> tuple[str, ...]:
    # Accept either a YAML list or a single comma-separated string
    if isinstance(raw, str):
        raw = raw.split(",")
    wallets = (str(w).strip() for w in raw or [])
    return tuple(w for w in wallets if w)


def _build_data_api(raw: dict[str, Any]) -> DataApiConfig:
    return DataApiConfig(
        base_url=str(raw.get("base_url", DataApiConfig.base_url)).rstrip("/"),
        timeout=int(raw.get("timeout", DataApiConfig.timeout)),
        trade_limit=int(raw.get("trade_limit", DataApiConfig.trade_limit)),
    )


def _build_clob(raw: dict[str, Any]) -> ClobConfig:
    return ClobConfig(
        base_url=str(raw.get("base_url", ClobConfig.base_url)).rstrip("/"),
        timeout=int(raw.get("timeout", ClobConfig.timeout)),
        history_fidelity=int(raw.get("history_fidelity", ClobConfig.history_fidelity)),
    )


def _build_dashboard(raw: dict[str, Any]) -> DashboardConfig:
    defaults = DashboardConfig()
    return DashboardConfig(
        default_hours=int(raw.get("default_hours", defaults.default_hours)),
        leaders_limit=int(raw.get("leaders_limit", defaults.leaders_limit)),
        trade_display_limit=int(
            raw.get("trade_display_limit", defaults.trade_display_limit)
        ),
        placeholder_cash_balance=float(
            raw.get("placeholder_cash_balance", defaults.placeholder_cash_balance)
        ),
        fallback_icon_url=raw.get("fallback_icon_url") or defaults.fallback_icon_url,
        market_base_url=raw.get("market_base_url") or defaults.market_base_url,
        display_timezone=raw.get("display_timezone") or defaults.display_timezone,
        max_concurrency=int(raw.get("max_concurrency", defaults.max_concurrency)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root; when that default is absent the built-in defaults
            are used. An explicit path that does not exist is an error.
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        logger.info("No config file at %s, using defaults", config_path)
        cfg = AppConfig()
        _validate(cfg)
        return cfg

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        wallets=_build_wallets(raw.get("wallets", [])),
        data_api=_build_data_api(raw.get("data_api") or {}),
        clob=_build_clob(raw.get("clob") or {}),
        dashboard=_build_dashboard(raw.get("dashboard") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    for wallet in cfg.wallets:
        if not wallet.startswith("0x"):
            raise ValueError(f"Wallet '{wallet}' is not a 0x-prefixed address")

    dash = cfg.dashboard
    if dash.default_hours <= 0:
        raise ValueError("dashboard.default_hours must be positive")
    if dash.leaders_limit <= 0:
        raise ValueError("dashboard.leaders_limit must be positive")
    if dash.trade_display_limit <= 0:
        raise ValueError("dashboard.trade_display_limit must be positive")
    if dash.max_concurrency <= 0:
        raise ValueError("dashboard.max_concurrency must be positive")
    if cfg.data_api.trade_limit <= 0:
        raise ValueError("data_api.trade_limit must be positive")

    try:
        ZoneInfo(dash.display_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(
            f"Unknown display timezone '{dash.display_timezone}'"
        ) from e
