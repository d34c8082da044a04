"""
components/chart.py
Price history line chart for the asset detail panel.
"""

from __future__ import annotations

import plotly.graph_objects as go

from data.format import format_price
from data.models import HistoricalSeries, TimeWindow

CHART_BG    = "#06090f"
PAPER_BG    = "#06090f"
GRID_COLOR  = "rgba(55, 65, 81, 0.5)"
TICK_COLOR  = "#9CA3AF"
LINE_COLOR  = "#A855F7"
FILL_COLOR  = "rgba(168, 85, 247, 0.1)"
HOVER_BG    = "#1F2937"

DAY_MS = 86_400_000

# Tick spacing on the time axis, per window granularity
_TICK_SPACING_MS = {"day": DAY_MS, "week": 7 * DAY_MS}


def make_price_figure(series: HistoricalSeries, window: TimeWindow) -> go.Figure:
    """
    Build the filled price line for one asset over one window.

    Args:
        series: Price history, oldest first.
        window: Active window; picks day or week ticks on the x-axis.

    Returns:
        Plotly Figure.
    """
    df = series.to_frame()
    hover_text = [f"price: {format_price(p)}" for p in df["Price"]]

    fig = go.Figure(go.Scatter(
        x=df["Date"],
        y=df["Price"],
        mode="lines",
        name="price",
        line={"color": LINE_COLOR, "width": 2, "shape": "spline", "smoothing": 0.1},
        fill="tozeroy",
        fillcolor=FILL_COLOR,
        text=hover_text,
        hovertemplate="%{x|%b %d, %Y}<br>%{text}<extra></extra>",
    ))

    fig.update_layout(
        paper_bgcolor=PAPER_BG,
        plot_bgcolor=CHART_BG,
        font={"color": TICK_COLOR, "family": "IBM Plex Mono, monospace", "size": 11},
        margin={"l": 60, "r": 20, "t": 10, "b": 40},
        hovermode="x unified",
        hoverlabel={"bgcolor": HOVER_BG, "bordercolor": "#374151", "font": {"color": "#F9FAFB"}},
        showlegend=False,
    )
    fig.update_xaxes(
        type="date",
        dtick=_TICK_SPACING_MS[window.granularity],
        gridcolor=GRID_COLOR,
        tickfont={"color": TICK_COLOR, "size": 10},
        zeroline=False,
    )
    fig.update_yaxes(
        tickprefix="$",
        tickformat=",.2f",
        gridcolor=GRID_COLOR,
        tickfont={"color": TICK_COLOR, "size": 10},
        zeroline=False,
    )
    return fig


def empty_figure() -> go.Figure:
    """Blank figure in the chart palette, shown before any series has loaded."""
    return go.Figure(layout={"paper_bgcolor": PAPER_BG, "plot_bgcolor": CHART_BG})
