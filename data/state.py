"""
data/state.py
Application state for one dashboard session. A single AppState is owned by the
Controller and only mutated there; the renderer is handed values from it, never
the object itself.
"""

from dataclasses import dataclass, field
from enum import Enum

from data.models import AssetSummary, HistoricalSeries, TimeWindow


class Phase(Enum):
    IDLE    = "idle"      # no selection, grid shown
    LOADING = "loading"   # history fetch in flight for current selection + window
    LOADED  = "loaded"    # series available for current selection + window


@dataclass
class AppState:
    catalog: list[AssetSummary] = field(default_factory=list)
    selection: AssetSummary | None = None
    window: TimeWindow = field(default_factory=TimeWindow.default)
    series: HistoricalSeries | None = None

    query: str = ""
    search_open: bool = False
    suggestions: list[AssetSummary] = field(default_factory=list)

    phase: Phase = Phase.IDLE

    # Bumped on every selection/window change; a history response is applied
    # only if the generation it was issued under is still current.
    generation: int = 0
    in_flight: int = 0

    @property
    def detail_visible(self) -> bool:
        return self.selection is not None

    @property
    def grid_visible(self) -> bool:
        return self.selection is None

    def series_is_current(self) -> bool:
        """True if the stored series belongs to the current (selection, window)."""
        return (
            self.series is not None
            and self.selection is not None
            and self.series.asset_id == self.selection.id
            and self.series.window is self.window
        )
