"""
components/grid.py
Home grid — summary cards for the top assets by market cap.
"""

from __future__ import annotations

from dash import html

from data.format import format_percent, format_price, is_positive
from data.models import AssetSummary


def build_asset_card(asset: AssetSummary) -> html.Button:
    """One clickable card: logo, name/symbol, price and 24h badge."""
    badge_class = "badge-positive" if is_positive(asset.price_change_24h_pct) else "badge-negative"

    return html.Button(
        id={"type": "asset-card", "index": asset.id},
        className="crypto-card",
        n_clicks=0,
        children=[
            html.Div(className="crypto-card-header", children=[
                html.Img(src=asset.image_url, alt=asset.name, className="crypto-card-image"),
                html.Div([
                    html.H3(asset.name.lower(),   className="crypto-card-name"),
                    html.P(asset.symbol.lower(),  className="crypto-card-symbol"),
                ]),
            ]),
            html.Div(className="crypto-card-stats", children=[
                html.Div(className="crypto-card-stat", children=[
                    html.Span("price", className="crypto-card-stat-label"),
                    html.Span(format_price(asset.current_price), className="crypto-card-stat-value"),
                ]),
                html.Div(className="crypto-card-stat", children=[
                    html.Span("24h", className="crypto-card-stat-label"),
                    html.Span(format_percent(asset.price_change_24h_pct), className=f"badge {badge_class}"),
                ]),
            ]),
        ],
    )


def build_catalog_grid(assets: tuple[AssetSummary, ...] | list[AssetSummary]) -> list:
    """Grid children; a placeholder while the catalog hasn't loaded."""
    if not assets:
        return [html.Div("Loading market data…", className="grid-placeholder")]
    return [build_asset_card(a) for a in assets]
