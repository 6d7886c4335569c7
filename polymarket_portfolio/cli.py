"""Command-line interface for the Polymarket portfolio tracker."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .models import ALL_WALLETS, QueryParameters, RankingDirection, RankingMetric
from .report import format_report, result_to_dict
from .services import Dashboard, DashboardSession
from .services.holdings import parse_wallet_input

logger = logging.getLogger(__name__)


def _add_query_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "wallets",
        nargs="?",
        default=None,
        help="Comma-separated wallet addresses (default: wallets from config)",
    )
    parser.add_argument(
        "--hours",
        default=None,
        help="Lookback window in hours (invalid values fall back to the default)",
    )
    parser.add_argument(
        "--wallet-filter",
        default=ALL_WALLETS,
        help="Show only one wallet's holdings and trades (default: all)",
    )
    parser.add_argument(
        "--metric",
        default=RankingMetric.PNL_CHANGE_PERIOD.value,
        choices=[m.value for m in RankingMetric],
        help="Performance leaders metric",
    )
    parser.add_argument(
        "--direction",
        default=RankingDirection.GAINERS.value,
        choices=[d.value for d in RankingDirection],
        help="Performance leaders direction",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of a text report",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="polymarket-portfolio",
        description="Multi-wallet Polymarket holdings and PnL tracker",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    report_parser = sub.add_parser("report", help="Load the dashboard once and print it")
    _add_query_arguments(report_parser)

    watch_parser = sub.add_parser("watch", help="Reload the dashboard on an interval")
    _add_query_arguments(watch_parser)
    watch_parser.add_argument(
        "--interval",
        type=int,
        default=5,
        help="Refresh interval in minutes (default: 5)",
    )

    return parser


def build_params(args: argparse.Namespace, config: AppConfig) -> QueryParameters:
    """Turn parsed arguments into query parameters."""
    if args.wallets is not None:
        wallets = parse_wallet_input(args.wallets)
    else:
        wallets = config.wallets

    return QueryParameters(
        wallets=tuple(wallets),
        hours=args.hours if args.hours is not None else config.dashboard.default_hours,
        wallet_filter=args.wallet_filter,
        metric=RankingMetric(args.metric),
        direction=RankingDirection(args.direction),
    )


def _render(result, as_json: bool) -> str:
    if as_json:
        return json.dumps(result_to_dict(result), indent=2)
    return format_report(result)


async def _watch(
    session: DashboardSession, params: QueryParameters, interval: int, as_json: bool
) -> None:
    logger.info("Refreshing dashboard every %d minutes", interval)
    while True:
        try:
            result = await session.refresh(params)
            print(_render(result, as_json), flush=True)
            await asyncio.sleep(interval * 60)
        except Exception as e:
            logger.error("Error in refresh loop: %s", e)
            await asyncio.sleep(60)


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    params = build_params(args, config)
    session = DashboardSession(Dashboard(config))

    if args.command == "report":
        result = await session.refresh(params)
        print(_render(result, args.json))
        return 0 if result.ok else 1
    if args.command == "watch":
        await _watch(session, params, args.interval, args.json)
        return 0

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
