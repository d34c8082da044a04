"""
components/renderer.py
The view surface the controller talks to. `Renderer` is the contract; the
Dash implementation records each call into a view model that the page's
poll callback turns into components.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Protocol

import plotly.graph_objects as go

from components.chart import make_price_figure
from data.models import AssetSummary, HistoricalSeries, TimeWindow


class ChartHandle(Protocol):
    def destroy(self) -> None: ...


class Renderer(Protocol):
    def render_catalog_grid(self, assets: list[AssetSummary]) -> None: ...
    def show_catalog_grid(self) -> None: ...
    def render_search_overlay(self, assets: list[AssetSummary]) -> None: ...
    def hide_search_overlay(self) -> None: ...
    def clear_search_input(self) -> None: ...
    def render_asset_detail(self, asset: AssetSummary) -> None: ...
    def render_chart(self, series: HistoricalSeries, window: TimeWindow) -> ChartHandle: ...
    def set_loading_visible(self, visible: bool) -> None: ...
    def set_active_window_toggle(self, window: TimeWindow) -> None: ...


@dataclass(frozen=True)
class ViewModel:
    """Immutable snapshot of everything the page shows."""

    revision: int = 0
    grid_assets: tuple[AssetSummary, ...] = ()
    grid_visible: bool = True
    overlay_assets: tuple[AssetSummary, ...] = ()
    overlay_visible: bool = False
    detail_asset: AssetSummary | None = None
    figure: go.Figure | None = None
    loading_visible: bool = False
    active_window: TimeWindow = field(default_factory=TimeWindow.default)
    clear_input_token: int = 0


class PriceChart:
    """The one live chart. Destroying it removes its figure from the view."""

    def __init__(self, renderer: "DashRenderer", figure: go.Figure):
        self._renderer = renderer
        self.figure = figure
        self.destroyed = False

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self._renderer._release_chart(self)


class DashRenderer:
    """
    Renderer backed by a ViewModel.

    Writes happen on the controller's event loop thread; Dash worker threads
    call snapshot(). Every write bumps the revision so the poll callback
    knows when to rebuild the page.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._view = ViewModel()
        self._chart: PriceChart | None = None

    def _update(self, **changes) -> None:
        with self._lock:
            changes["revision"] = self._view.revision + 1
            self._view = replace(self._view, **changes)

    def snapshot(self) -> ViewModel:
        with self._lock:
            return self._view

    # ── Renderer contract ─────────────────────────────────────────────────────

    def render_catalog_grid(self, assets: list[AssetSummary]) -> None:
        self._update(grid_assets=tuple(assets))

    def show_catalog_grid(self) -> None:
        self._update(grid_visible=True, detail_asset=None)

    def render_search_overlay(self, assets: list[AssetSummary]) -> None:
        self._update(overlay_assets=tuple(assets), overlay_visible=True)

    def hide_search_overlay(self) -> None:
        self._update(overlay_visible=False)

    def clear_search_input(self) -> None:
        self._update(clear_input_token=self._view.clear_input_token + 1)

    def render_asset_detail(self, asset: AssetSummary) -> None:
        self._update(detail_asset=asset, grid_visible=False)

    def render_chart(self, series: HistoricalSeries, window: TimeWindow) -> PriceChart:
        chart = PriceChart(self, make_price_figure(series, window))
        self._chart = chart
        self._update(figure=chart.figure)
        return chart

    def set_loading_visible(self, visible: bool) -> None:
        self._update(loading_visible=visible)

    def set_active_window_toggle(self, window: TimeWindow) -> None:
        self._update(active_window=window)

    # ── Chart lifecycle ───────────────────────────────────────────────────────

    def _release_chart(self, chart: PriceChart) -> None:
        if chart is self._chart:
            self._chart = None
            self._update(figure=None)
