"""Polymarket CLOB price oracle — midpoint and price history per token."""
from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import ClobConfig
from ..models import PricePoint
from .. import parser

logger = logging.getLogger(__name__)


class ClobPriceOracle:
    """Fetch current and historical prices from the Polymarket CLOB API.

    Failures are logged and reported as ``None`` / an empty history rather
    than raised.
    """

    def __init__(self, config: ClobConfig) -> None:
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.fidelity = config.history_fidelity

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    logger.error(
                        "Error fetching %s for %s: HTTP %s",
                        path, params, response.status,
                    )
                    return None
                return await response.json()

    async def fetch_current_price(self, asset_id: str) -> float | None:
        """Current midpoint price for a token, or None on failure."""
        try:
            data = await self._get_json("/midpoint", {"token_id": asset_id})
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Error fetching current price for %s: %s", asset_id, e)
            return None

        if not isinstance(data, dict):
            return None
        return parser.to_float(data.get("mid"))

    async def fetch_price_history(
        self,
        asset_id: str,
        start_ts: int,
        end_ts: int,
        fidelity: int | None = None,
    ) -> list[PricePoint]:
        """Price points for a token between two timestamps (seconds)."""
        params = {
            "market": asset_id,
            "startTs": start_ts,
            "endTs": end_ts,
            "fidelity": fidelity or self.fidelity,
        }
        try:
            data = await self._get_json("/prices-history", params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Error fetching price history for %s: %s", asset_id, e)
            return []

        history = parser.parse_price_history(data)
        logger.debug("Fetched %d history points for %s", len(history), asset_id)
        return history
