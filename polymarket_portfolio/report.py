"""Plain-text and JSON renderings of a dashboard result."""
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from .models import EnrichedHolding, ProcessedTrade, RankingMetric
from .services.dashboard import DashboardResult


def _now_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _trend(value: float) -> str:
    if value > 0:
        return "📈"
    if value < 0:
        return "📉"
    return "➖"


def _holding_line(h: EnrichedHolding) -> str:
    row = h.holding
    return (
        f"{row.title}\n"
        f"  Size: {row.size:,.4f} @ ${row.cur_price:.4f} · Value: {_money(row.current_value)}\n"
        f"  PnL: {_money(row.total_pnl)} ({row.pct_return:.2f}%) · "
        f"Realized: {_money(row.realized_pnl)} · Unrealized: {_money(row.unrealized_pnl)}"
    )


def _leader_line(h: EnrichedHolding, metric: RankingMetric) -> str:
    value = metric.value_of(h)
    shown = (
        f"{value:.2f}%"
        if metric is RankingMetric.ASSET_PRICE_PCT_CHANGE_PERIOD
        else _money(value)
    )
    return f"  {_trend(value)} {h.title} — {shown}"


def _trade_line(t: ProcessedTrade) -> str:
    return (
        f"  {t.timestamp} · {t.side.upper()} {t.size:,.4f} @ ${t.price:.4f} "
        f"({_money(t.usdc_size)}) · {t.title}"
    )


def format_report(result: DashboardResult) -> str:
    """Render the filtered views of ``result`` as a text report."""
    if result.error:
        return f"🚨 Error: {result.error}"

    params = result.params
    summary = result.summary_for()
    holdings = result.holdings_for()
    leaders = result.leaders()
    trades = result.trades_for()

    sections = [
        f"📊 Polymarket Portfolio · {params.wallet_filter} · last {result.hours}h",
        (
            f"Realized PnL: {_money(summary.realized_pnl)}\n"
            f"Unrealized PnL: {_money(summary.unrealized_pnl)}\n"
            f"Total PnL: {_money(summary.total_pnl)}\n"
            f"Cash Balance: {_money(summary.cash_balance)} (placeholder)"
        ),
    ]

    if holdings:
        sections.append(
            "━━ Holdings ━━\n\n" + "\n\n".join(_holding_line(h) for h in holdings)
        )
    else:
        sections.append("No holdings found.")

    sections.append(
        f"━━ Performance Leaders ({params.metric.value}, {params.direction.value}) ━━\n"
        + ("\n".join(_leader_line(h, params.metric) for h in leaders) or "  —")
    )

    sections.append(
        "━━ Recent Activity ━━\n"
        + ("\n".join(_trade_line(t) for t in trades) or "  No trades in this window.")
    )

    sections.append(f"{_now_str()} UTC")
    return "\n\n".join(sections)


def result_to_dict(result: DashboardResult) -> dict[str, Any]:
    """JSON-ready dict of the filtered views."""
    params = result.params

    def _holding(h: EnrichedHolding) -> dict[str, Any]:
        data = asdict(h.holding)
        data["wallets"] = list(h.holding.wallets)
        data.update(
            pnl_change_period=h.pnl_change_period,
            asset_price_pct_change_period=h.asset_price_pct_change_period,
            projected_pnl_from_pct_change_period=h.projected_pnl_from_pct_change_period,
        )
        return data

    return {
        "error": result.error,
        "hours": result.hours,
        "wallet_filter": params.wallet_filter,
        "summary": asdict(result.summary_for()),
        "holdings": [_holding(h) for h in result.holdings_for()],
        "leaders": {
            "metric": params.metric.value,
            "direction": params.direction.value,
            "items": [_holding(h) for h in result.leaders()],
        },
        "trades": [asdict(t) for t in result.trades_for()],
        "wallet_options": [asdict(o) for o in result.wallet_options()],
    }
