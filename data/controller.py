"""
data/controller.py
The dashboard's state machine. Reacts to user events and data-source
responses, mutates AppState, and drives the renderer.

All methods run on one asyncio event loop. Event handlers are plain methods
that return immediately; history fetches run as tasks so input keeps being
processed while they are outstanding. There is no cancellation: each
selection/window change bumps `state.generation`, and a response issued
under an older generation is dropped when it arrives.
"""

from __future__ import annotations

import asyncio
import logging

from components.renderer import ChartHandle, Renderer
from data.fetch import DataSourceError
from data.models import AssetSummary, HistoricalSeries, TimeWindow
from data.process import find_asset, search_catalog, top_assets
from data.state import AppState, Phase

logger = logging.getLogger(__name__)


class Controller:
    def __init__(self, client, renderer: Renderer, state: AppState | None = None):
        """
        Args:
            client:   Data source exposing async list_top_assets() and
                      get_historical_series(asset_id, window).
            renderer: View surface; see components.renderer.Renderer.
            state:    Starting state (a fresh AppState if omitted).
        """
        self.client = client
        self.renderer = renderer
        self.state = state or AppState()

        self._chart: ChartHandle | None = None
        self._phase_before_fetch = Phase.IDLE
        self._tasks: set[asyncio.Task] = set()
        self._catalog_loading = False

    # ── Startup ───────────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Load the catalog and render the home grid. On failure the page stays as is."""
        self.renderer.set_active_window_toggle(self.state.window)
        self._catalog_loading = True
        try:
            catalog = await self.client.list_top_assets()
        except DataSourceError as e:
            logger.warning(f"Catalog fetch failed: {e}")
            return
        finally:
            self._catalog_loading = False

        # Wholesale replacement, never merged
        self.state.catalog = list(catalog)
        self.renderer.render_catalog_grid(top_assets(self.state.catalog))
        logger.info(f"Catalog ready — {len(self.state.catalog)} assets.")

    async def ensure_catalog(self) -> None:
        """Page (re)load: retry the catalog fetch if no load has succeeded yet."""
        if self.state.catalog or self._catalog_loading:
            return
        await self.start()

    # ── Search overlay ────────────────────────────────────────────────────────

    def on_query(self, text: str | None) -> list[AssetSummary]:
        """
        Update suggestions for raw search input.

        Returns:
            The suggestions now shown (empty if the overlay was hidden).
        """
        self.state.query = text or ""
        matches = search_catalog(self.state.catalog, self.state.query)

        if not matches:
            self._close_overlay()
            return []

        self.state.suggestions = matches
        self.state.search_open = True
        self.renderer.render_search_overlay(matches)
        return matches

    def dismiss_overlay(self) -> None:
        """Click landed outside the overlay."""
        if self.state.search_open:
            self._close_overlay()

    def _close_overlay(self) -> None:
        self.state.search_open = False
        self.state.suggestions = []
        self.renderer.hide_search_overlay()

    # ── Selection / window ────────────────────────────────────────────────────

    def select_asset(self, asset: AssetSummary | str) -> asyncio.Task | None:
        """
        Show the detail panel for an asset and start loading its history.

        Accepts an AssetSummary or a catalog id. Re-selecting the current asset
        keeps the same selection object and re-issues the fetch.

        Returns:
            The history fetch task, or None if the id is not in the catalog.
        """
        if isinstance(asset, str):
            found = find_asset(self.state.catalog, asset)
            if found is None:
                logger.warning(f"Ignoring selection of unknown asset {asset!r}.")
                return None
            asset = found

        state = self.state
        if state.selection is None or state.selection.id != asset.id:
            state.selection = asset
            # Detail opens as a skeleton; the previous asset's chart must not carry over
            state.series = None
            self._release_chart()

        state.query = ""
        self.renderer.clear_search_input()
        self._close_overlay()
        self.renderer.render_asset_detail(state.selection)

        return self._request_history()

    def change_window(self, window: TimeWindow | str) -> asyncio.Task | None:
        """Switch the chart window; refetches if an asset is selected."""
        window = TimeWindow(window)
        self.state.window = window
        self.renderer.set_active_window_toggle(window)

        if self.state.selection is None:
            return None
        return self._request_history()

    def clear_selection(self) -> None:
        """Back to the home grid. Any pending history response becomes stale."""
        state = self.state
        state.generation += 1
        state.selection = None
        state.series = None
        state.phase = Phase.IDLE
        self._phase_before_fetch = Phase.IDLE

        self._release_chart()
        self.renderer.show_catalog_grid()

    # ── History fetch ─────────────────────────────────────────────────────────

    def _request_history(self) -> asyncio.Task:
        state = self.state
        state.generation += 1

        # A fetch superseding one still in flight keeps the phase from before the first
        if state.phase is not Phase.LOADING:
            self._phase_before_fetch = state.phase
        state.phase = Phase.LOADING

        state.in_flight += 1
        self.renderer.set_loading_visible(True)

        task = asyncio.create_task(
            self._load_history(state.generation, state.selection, state.window)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_history_done)
        return task

    async def _load_history(
        self,
        generation: int,
        asset: AssetSummary,
        window: TimeWindow,
    ) -> HistoricalSeries | None:
        state = self.state
        try:
            series = await self.client.get_historical_series(asset.id, window)
        except DataSourceError as e:
            logger.warning(f"History fetch for {asset.id} ({window.days}d) failed: {e}")
            if generation == state.generation:
                state.phase = self._phase_after_failure()
            return None
        finally:
            state.in_flight -= 1
            if state.in_flight == 0:
                self.renderer.set_loading_visible(False)

        if generation != state.generation:
            logger.debug(
                f"Discarding stale history for {asset.id} ({window.days}d); "
                f"generation {generation} != {state.generation}."
            )
            return None

        try:
            self._apply_series(series)
        except Exception:
            # The old chart is already released; nothing is on screen
            state.series = None
            state.phase = Phase.IDLE
            raise
        return series

    def _phase_after_failure(self) -> Phase:
        # Only a series for the selected asset (e.g. before a window change) can stay up
        if self.state.series is not None:
            return self._phase_before_fetch
        return Phase.IDLE

    def _on_history_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"History task crashed: {exc!r}", exc_info=exc)

    def _apply_series(self, series: HistoricalSeries) -> None:
        self.state.series = series
        self.state.phase = Phase.LOADED

        # At most one live chart: release the old one before drawing the next
        self._release_chart()
        self._chart = self.renderer.render_chart(series, self.state.window)

    def _release_chart(self) -> None:
        if self._chart is not None:
            self._chart.destroy()
            self._chart = None

    async def wait_idle(self) -> None:
        """Wait for every outstanding history fetch to settle."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
