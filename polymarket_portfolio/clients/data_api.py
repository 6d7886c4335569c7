"""Polymarket Data API client — positions and trade activity per wallet."""
from __future__ import annotations

import asyncio
import logging
import ssl
import time
from typing import Any

import aiohttp
import certifi

from ..config import DataApiConfig
from ..errors import FetchError
from ..models import RawHolding, RawTrade
from .. import parser

logger = logging.getLogger(__name__)


class DataApiClient:
    """Fetch holdings and trades from the Polymarket Data API.

    Both fetches raise ``FetchError``; isolating one wallet's failure from
    the others is the caller's job.
    """

    def __init__(self, config: DataApiConfig) -> None:
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.trade_limit = config.trade_limit

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET a JSON document, raising FetchError on any failure."""
        url = f"{self.base_url}{path}"
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        raise FetchError(
                            f"HTTP {response.status} from {url}", url=url
                        )
                    return await response.json()
        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

    async def fetch_holdings(self, wallet_address: str) -> list[RawHolding]:
        """Fetch all open positions for a wallet."""
        data = await self._get_json("/positions", {"user": wallet_address})
        if not data:
            return []
        if not isinstance(data, list):
            raise FetchError(
                f"Unexpected positions payload for {wallet_address}",
                url=f"{self.base_url}/positions",
            )

        holdings = [
            parser.parse_holding(item, wallet_address)
            for item in data
            if isinstance(item, dict)
        ]
        logger.info("Fetched %d holdings for %s", len(holdings), wallet_address)
        return holdings

    async def fetch_trades(self, wallet_address: str, hours: int) -> list[RawTrade]:
        """Fetch trade events for a wallet over the last ``hours`` hours."""
        now = int(time.time())
        start = now - hours * 3600
        params = {
            "user": wallet_address,
            "start": start,
            "end": now,
            "type": "TRADE",
            "limit": self.trade_limit,
        }

        data = await self._get_json("/activity", params)
        if not data:
            return []
        if not isinstance(data, list):
            raise FetchError(
                f"Unexpected activity payload for {wallet_address}",
                url=f"{self.base_url}/activity",
            )

        trades = [
            parser.parse_trade(item, wallet_address)
            for item in data
            if isinstance(item, dict) and parser.is_trade_event(item)
        ]
        logger.info(
            "Fetched %d trades for %s over %dh", len(trades), wallet_address, hours
        )
        return trades
