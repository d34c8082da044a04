"""
app.py — Crypto Market Dashboard
Entry point. Initializes Dash, starts the controller loop, defines layout,
wires the view-sync callback. Keep this file thin — state logic lives in
data/controller.py, markup in components/.
"""

import logging
import os
import uuid

from dash import ALL, Dash, Input, Output, State, callback, ctx, dcc, html, no_update
from dash.exceptions import PreventUpdate
from dotenv import load_dotenv

from components.chart import empty_figure
from components.detail import build_detail_panel, build_detail_stats, window_button_classes, window_button_id
from components.grid import build_catalog_grid
from components.renderer import DashRenderer
from components.search import build_search_box, build_search_results
from data.controller import Controller
from data.fetch import CoinGeckoClient
from data.models import TimeWindow
from data.runtime import ControllerRuntime

load_dotenv()

# ── Settings ──────────────────────────────────────────────────────────────────
DASH_HOST  = os.getenv("DASH_HOST", "127.0.0.1")
DASH_PORT  = int(os.getenv("DASH_PORT", "8050"))
DASH_DEBUG = os.getenv("DASH_DEBUG", "false").lower() in ("1", "true", "yes")
LOG_LEVEL  = os.getenv("LOG_LEVEL", "INFO").upper()

POLL_INTERVAL_MS = 400  # how often the page checks for async view changes

HIDDEN  = {"display": "none"}
VISIBLE = {}

# Backdrop sits under the overlay; clicking it counts as "outside"
BACKDROP_STYLE = {"position": "fixed", "inset": 0, "zIndex": 10}
OVERLAY_STYLE  = {"position": "relative", "zIndex": 20}

logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")

# ══════════════════════════════════════════════════════════════════════════════
# CONTROLLER
# ══════════════════════════════════════════════════════════════════════════════

print("Starting controller loop...")


def new_session_controller() -> Controller:
    return Controller(CoinGeckoClient(), DashRenderer())


runtime = ControllerRuntime(new_session_controller)
runtime.start()  # each session loads its catalog in the background on page load

# ══════════════════════════════════════════════════════════════════════════════
# APP
# ══════════════════════════════════════════════════════════════════════════════

app = Dash(
    __name__,
    title="Crypto Dashboard",
    suppress_callback_exceptions=True,
)
server = app.server

# ══════════════════════════════════════════════════════════════════════════════
# LAYOUT
# ══════════════════════════════════════════════════════════════════════════════

app.layout = html.Div(id="app-wrapper", children=[

    # ── Header ────────────────────────────────────────────────────
    html.Div(id="header", children=[
        html.Span("CRYPTO", id="header-logo"),
        html.Span("Market Dashboard", id="header-subtitle"),
    ]),

    # ── Search ────────────────────────────────────────────────────
    build_search_box(),

    # ── Home grid ─────────────────────────────────────────────────
    html.Div(id="popular-cryptos", children=[
        html.H2("top assets", className="section-title"),
        html.Div(id="crypto-grid", className="crypto-grid", children=build_catalog_grid([])),
    ]),

    # ── Detail ────────────────────────────────────────────────────
    build_detail_panel(),

    # ── Footer ────────────────────────────────────────────────────
    html.Div(id="footer", children=[
        html.Span("Data: CoinGecko"),
        html.Span("Not financial advice"),
    ]),

    # ── View sync ─────────────────────────────────────────────────
    dcc.Interval(id="view-poll", interval=POLL_INTERVAL_MS),
    dcc.Store(id="view-seen", data={"revision": -1, "clear_input_token": 0}),
    dcc.Store(id="session-id", storage_type="session"),
])

# ══════════════════════════════════════════════════════════════════════════════
# CALLBACKS
# ══════════════════════════════════════════════════════════════════════════════

WINDOW_BY_BUTTON = {window_button_id(w): w for w in TimeWindow}


def _dispatch_event(controller: Controller, query: str | None) -> None:
    """Forward whichever input fired to the controller."""
    trigger = ctx.triggered_id
    value = ctx.triggered[0]["value"] if ctx.triggered else None

    if trigger == "search-input":
        runtime.dispatch(controller.on_query, query)
    elif trigger == "search-backdrop" and value:
        runtime.dispatch(controller.dismiss_overlay)
    elif isinstance(trigger, dict) and value:
        # asset-card or search-result; freshly rendered buttons fire with n_clicks=0
        runtime.dispatch(controller.select_asset, trigger["index"])
    elif trigger in WINDOW_BY_BUTTON and value:
        runtime.dispatch(controller.change_window, WINDOW_BY_BUTTON[trigger])
    elif trigger == "back-to-grid" and value:
        runtime.dispatch(controller.clear_selection)


@callback(
    Output("search-results",    "children"),
    Output("search-results",    "style"),
    Output("search-backdrop",   "style"),
    Output("crypto-grid",       "children"),
    Output("popular-cryptos",   "style"),
    Output("crypto-details",    "style"),
    Output("detail-stats",      "children"),
    Output("price-chart",       "figure"),
    Output("price-chart",       "style"),
    Output("loading-indicator", "style"),
    Output("time-range-text",   "children"),
    *[Output(window_button_id(w), "className") for w in TimeWindow],
    Output("search-input",      "value"),
    Output("view-seen",         "data"),
    Output("session-id",        "data"),
    Input("search-input",       "value"),
    Input("search-backdrop",    "n_clicks"),
    Input({"type": "asset-card",    "index": ALL}, "n_clicks"),
    Input({"type": "search-result", "index": ALL}, "n_clicks"),
    *[Input(window_button_id(w), "n_clicks") for w in TimeWindow],
    Input("back-to-grid",       "n_clicks"),
    Input("view-poll",          "n_intervals"),
    State("view-seen",          "data"),
    State("price-chart",        "style"),
    State("session-id",         "data"),
)
def sync_view(query, *args):
    """Apply the triggering user event, then project the session's view model onto the page."""
    seen, chart_style, session_id = args[-3], args[-2], args[-1]

    sid = session_id or uuid.uuid4().hex
    new_session = not runtime.has_session(sid)
    if new_session or ctx.triggered_id is None:
        # Page load: retries the catalog if this session never got one
        runtime.open_page(sid)
    controller = runtime.session(sid)

    _dispatch_event(controller, query)

    view = controller.renderer.snapshot()
    seen = seen or {}
    if not new_session and view.revision == seen.get("revision"):
        raise PreventUpdate

    clear_input = view.clear_input_token != seen.get("clear_input_token", 0)

    return (
        build_search_results(view.overlay_assets),
        OVERLAY_STYLE if view.overlay_visible else HIDDEN,
        BACKDROP_STYLE if view.overlay_visible else HIDDEN,
        build_catalog_grid(view.grid_assets),
        VISIBLE if view.grid_visible else HIDDEN,
        HIDDEN if view.grid_visible else VISIBLE,
        build_detail_stats(view.detail_asset),
        view.figure if view.figure is not None else empty_figure(),
        {**(chart_style or {}), "display": "none" if view.loading_visible else "block"},
        VISIBLE if view.loading_visible else HIDDEN,
        view.active_window.label,
        *window_button_classes(view.active_window),
        "" if clear_input else no_update,
        {"revision": view.revision, "clear_input_token": view.clear_input_token},
        sid if sid != session_id else no_update,
    )


# ══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    app.run(debug=DASH_DEBUG, host=DASH_HOST, port=DASH_PORT, use_reloader=False)
