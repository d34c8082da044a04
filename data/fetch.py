"""
data/fetch.py
Handles all external data fetching: the CoinGecko market catalog and per-asset
price history. Read-only, unauthenticated, no caching and no retries.

The blocking `requests` calls run in a worker thread via asyncio.to_thread so
the controller's event loop keeps processing input while a fetch is pending.
"""

import asyncio
import logging
import os

import requests
from dotenv import load_dotenv

from data.models import AssetSummary, HistoricalSeries, TimeWindow
from data.process import build_catalog

logger = logging.getLogger(__name__)

load_dotenv()  # optional COINGECKO_BASE_URL / REQUEST_TIMEOUT_SECONDS overrides

# ── Constants ──────────────────────────────────────────────────────────────────
COINGECKO_BASE_URL = os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

CATALOG_PAGE_SIZE = 100

MARKETS_PARAMS = {
    "vs_currency": "usd",
    "order": "market_cap_desc",
    "per_page": CATALOG_PAGE_SIZE,
    "page": 1,
    "sparkline": "true",
    "price_change_percentage": "7d,30d",
}


# ── Failures ───────────────────────────────────────────────────────────────────

class DataSourceError(Exception):
    """Base class for every failure the data source can report."""


class NetworkFailure(DataSourceError):
    """The request could not complete, returned non-2xx, or the body was unusable."""


class EmptyResult(DataSourceError):
    """A well-formed response that carried no usable data."""


# ── Client ─────────────────────────────────────────────────────────────────────

class CoinGeckoClient:
    """Two read-only queries against the CoinGecko v3 API."""

    def __init__(self, base_url: str = COINGECKO_BASE_URL, timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, path: str, params: dict):
        """Blocking GET returning decoded JSON; every failure becomes NetworkFailure."""
        url = f"{self.base_url}{path}"
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise NetworkFailure(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise NetworkFailure(f"GET {path} returned invalid JSON: {e}") from e

    def fetch_top_assets(self) -> list[AssetSummary]:
        """
        Fetch the top CATALOG_PAGE_SIZE assets ranked by market cap.

        Returns:
            Catalog in rank order with unique ids.

        Raises:
            NetworkFailure: transport error, non-2xx, or a non-list body.
            EmptyResult:    the API returned no usable rows.
        """
        payload = self._get_json("/coins/markets", MARKETS_PARAMS)
        if not isinstance(payload, list):
            raise NetworkFailure(f"/coins/markets returned {type(payload).__name__}, expected list")

        catalog = build_catalog(payload)
        if not catalog:
            raise EmptyResult("/coins/markets returned no usable assets")

        logger.info(f"Fetched {len(catalog)} assets from CoinGecko.")
        return catalog

    def fetch_historical_series(self, asset_id: str, window: TimeWindow) -> HistoricalSeries:
        """
        Fetch the USD price series for one asset over one window.

        Raises:
            NetworkFailure: transport error, non-2xx, or a malformed body.
            EmptyResult:    `prices` was present but empty.
        """
        payload = self._get_json(
            f"/coins/{asset_id}/market_chart",
            {"vs_currency": "usd", "days": window.value},
        )
        try:
            series = HistoricalSeries.from_api(asset_id, window, payload)
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkFailure(f"market_chart for {asset_id} is malformed: {e}") from e

        if not series.points:
            raise EmptyResult(f"No price history for {asset_id} over {window.days} days")

        logger.info(f"Fetched {len(series)} price points for {asset_id} ({window.days}d).")
        return series

    # ── Awaitable wrappers used by the controller ─────────────────────────────

    async def list_top_assets(self) -> list[AssetSummary]:
        return await asyncio.to_thread(self.fetch_top_assets)

    async def get_historical_series(self, asset_id: str, window: TimeWindow) -> HistoricalSeries:
        return await asyncio.to_thread(self.fetch_historical_series, asset_id, window)
