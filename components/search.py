"""
components/search.py
Search box and the suggestions overlay shown while typing.
"""

from __future__ import annotations

from dash import dcc, html

from data.format import format_percent, format_price, is_positive
from data.models import AssetSummary


def build_search_box() -> html.Div:
    """Input, overlay container, and the backdrop that closes the overlay on outside clicks."""
    return html.Div(id="search-container", children=[
        dcc.Input(
            id="search-input",
            type="text",
            value="",
            placeholder="search cryptocurrencies…",
            autoComplete="off",
            debounce=False,
            className="search-input",
        ),
        html.Div(id="search-backdrop", n_clicks=0, style={"display": "none"}),
        html.Div(id="search-results", className="search-results", style={"display": "none"}),
    ])


def build_search_result(asset: AssetSummary) -> html.Button:
    change_class = "positive" if is_positive(asset.price_change_24h_pct) else "negative"

    return html.Button(
        id={"type": "search-result", "index": asset.id},
        className="search-result-item",
        n_clicks=0,
        children=[
            html.Img(src=asset.image_url, alt=asset.name, className="result-image"),
            html.Div(className="result-info", children=[
                html.Div(asset.name.lower(),   className="result-name"),
                html.Div(asset.symbol.lower(), className="result-symbol"),
            ]),
            html.Div(className="result-price", children=[
                html.Div(format_price(asset.current_price), className="result-price-value"),
                html.Div(
                    format_percent(asset.price_change_24h_pct),
                    className=f"result-price-change {change_class}",
                ),
            ]),
        ],
    )


def build_search_results(assets: tuple[AssetSummary, ...] | list[AssetSummary]) -> list:
    return [build_search_result(a) for a in assets]
