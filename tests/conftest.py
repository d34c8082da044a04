"""Pytest configuration and fixtures."""

import asyncio

import pytest

from data.fetch import DataSourceError
from data.models import AssetSummary, HistoricalSeries, PricePoint, TimeWindow


def make_asset(asset_id: str, name: str, symbol: str, price: float = 100.0, **overrides) -> AssetSummary:
    fields = {
        "id": asset_id,
        "name": name,
        "symbol": symbol,
        "image_url": f"https://img.example/{asset_id}.png",
        "current_price": price,
        "price_change_24h_pct": 1.5,
        "price_change_30d_pct": -3.25,
        "market_cap": 1e9,
    }
    fields.update(overrides)
    return AssetSummary(**fields)


def make_series(asset_id: str, window: TimeWindow, start_price: float = 10.0) -> HistoricalSeries:
    points = tuple(
        PricePoint(timestamp_ms=1_700_000_000_000 + i * 86_400_000, price=start_price + i)
        for i in range(3)
    )
    return HistoricalSeries(asset_id=asset_id, window=window, points=points)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ScriptedDataSource:
    """
    Fake data source whose history responses are released by the test,
    so fetches can be made to complete in any order.
    """

    def __init__(self, catalog=None, catalog_error: DataSourceError | None = None):
        self.catalog = list(catalog or [])
        self.catalog_error = catalog_error
        self.history_calls: list[tuple[str, TimeWindow]] = []
        self._pending: list[tuple[str, TimeWindow, asyncio.Future]] = []

    async def list_top_assets(self):
        if self.catalog_error is not None:
            raise self.catalog_error
        return list(self.catalog)

    async def get_historical_series(self, asset_id, window):
        future = asyncio.get_running_loop().create_future()
        self.history_calls.append((asset_id, window))
        self._pending.append((asset_id, window, future))
        return await future

    def _take(self, asset_id, window) -> asyncio.Future:
        for i, (pending_id, pending_window, future) in enumerate(self._pending):
            if pending_id == asset_id and pending_window is window:
                del self._pending[i]
                return future
        raise AssertionError(f"no pending history request for {asset_id} {window}")

    def resolve(self, asset_id, window, series: HistoricalSeries | None = None) -> HistoricalSeries:
        series = series or make_series(asset_id, window)
        self._take(asset_id, window).set_result(series)
        return series

    def fail(self, asset_id, window, error: DataSourceError) -> None:
        self._take(asset_id, window).set_exception(error)

    @property
    def pending_count(self) -> int:
        return len(self._pending)


class FakeChart:
    def __init__(self, series, window):
        self.series = series
        self.window = window
        self.destroyed = False

    def destroy(self):
        self.destroyed = True


class RecordingRenderer:
    """Renderer that records every call instead of drawing anything."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.charts: list[FakeChart] = []
        self.grid = None
        self.overlay = None
        self.overlay_visible = False
        self.detail = None
        self.loading_visible = False
        self.active_window = None
        self.input_clears = 0

    def render_catalog_grid(self, assets):
        self.calls.append(("render_catalog_grid", list(assets)))
        self.grid = list(assets)

    def show_catalog_grid(self):
        self.calls.append(("show_catalog_grid",))
        self.detail = None

    def render_search_overlay(self, assets):
        self.calls.append(("render_search_overlay", list(assets)))
        self.overlay = list(assets)
        self.overlay_visible = True

    def hide_search_overlay(self):
        self.calls.append(("hide_search_overlay",))
        self.overlay_visible = False

    def clear_search_input(self):
        self.calls.append(("clear_search_input",))
        self.input_clears += 1

    def render_asset_detail(self, asset):
        self.calls.append(("render_asset_detail", asset))
        self.detail = asset

    def render_chart(self, series, window):
        self.calls.append(("render_chart", series, window))
        chart = FakeChart(series, window)
        self.charts.append(chart)
        return chart

    def set_loading_visible(self, visible):
        self.calls.append(("set_loading_visible", visible))
        self.loading_visible = visible

    def set_active_window_toggle(self, window):
        self.calls.append(("set_active_window_toggle", window))
        self.active_window = window

    @property
    def live_charts(self) -> list[FakeChart]:
        return [c for c in self.charts if not c.destroyed]

    @property
    def rendered_series(self):
        """Series currently on screen, if any."""
        live = self.live_charts
        return live[-1].series if live else None


@pytest.fixture
def btc():
    return make_asset("bitcoin", "Bitcoin", "btc", price=64_000.0, market_cap=1.26e12)


@pytest.fixture
def eth():
    return make_asset("ethereum", "Ethereum", "eth", price=3_100.0, market_cap=3.7e11)


@pytest.fixture
def catalog(btc, eth):
    return [
        btc,
        eth,
        make_asset("tether", "Tether", "usdt", price=1.0),
        make_asset("ethena", "Ethena", "ena", price=0.4123),
        make_asset("wrapped-bitcoin", "Wrapped Bitcoin", "wbtc", price=63_900.0),
    ]


@pytest.fixture
def renderer():
    return RecordingRenderer()
