"""
components/detail.py
Asset detail panel — header stats, window toggles, loading indicator and the
price chart.
"""

from __future__ import annotations

from dash import dcc, html

from components.chart import GRID_COLOR, empty_figure
from data.format import format_market_cap, format_percent, format_price, is_positive
from data.models import AssetSummary, TimeWindow

TREND_UP   = "▲"
TREND_DOWN = "▼"


def window_button_id(window: TimeWindow) -> str:
    return f"window-{window.value}"


def build_detail_panel() -> html.Div:
    """Static skeleton; the stats block and chart are filled by the view-sync callback."""
    return html.Div(id="crypto-details", style={"display": "none"}, children=[
        html.Button("← top assets", id="back-to-grid", n_clicks=0, className="back-button"),
        html.Div(id="detail-stats"),

        html.Div(className="chart-controls", children=[
            html.Span(id="time-range-text", className="time-range-text"),
            *[
                html.Button(w.label, id=window_button_id(w), n_clicks=0, className="window-toggle")
                for w in TimeWindow
            ],
        ]),

        html.Div(
            id="loading-indicator",
            style={"display": "none"},
            className="loading-indicator",
            children=[html.Div(className="spinner"), html.Span("loading price history…")],
        ),
        dcc.Graph(
            id="price-chart",
            figure=empty_figure(),
            config={"displayModeBar": False},
            style={"height": "420px", "border": f"1px solid {GRID_COLOR}"},
        ),
    ])


def _stat(label: str, value: str, positive: bool | None = None, icon: str = "") -> html.Div:
    value_class = "stat-value"
    if positive is not None:
        value_class += " positive" if positive else " negative"
    return html.Div(className="stat-card", children=[
        html.Div(label, className="stat-card-label"),
        html.Div([html.Span(icon, className="trend-icon"), value] if icon else value, className=value_class),
    ])


def build_detail_stats(asset: AssetSummary | None) -> list:
    """Header and stat cards for the selected asset."""
    if asset is None:
        return []

    change_24h = asset.price_change_24h_pct
    change_30d = asset.price_change_30d_pct
    up_24h = is_positive(change_24h)

    return [
        html.Div(className="detail-header", children=[
            html.Img(src=asset.image_url, alt=asset.name, className="detail-image"),
            html.Div([
                html.H2(asset.name.lower(),  id="crypto-name"),
                html.P(asset.symbol.lower(), id="crypto-symbol"),
            ]),
            html.Div(format_price(asset.current_price), id="current-price"),
        ]),
        html.Div(className="stats-grid", children=[
            _stat("24h change", format_percent(change_24h), up_24h, TREND_UP if up_24h else TREND_DOWN),
            _stat("30d change", format_percent(change_30d), is_positive(change_30d)),
            _stat("market cap", format_market_cap(asset.market_cap)),
        ]),
    ]


def window_button_classes(active: TimeWindow) -> list[str]:
    """className for each toggle, in TimeWindow order."""
    return [
        "window-toggle active" if w is active else "window-toggle"
        for w in TimeWindow
    ]
