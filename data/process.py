"""
data/process.py
Catalog cleaning and the in-memory search used by the suggestions overlay.
Pure functions only: no I/O, no state.
"""

import logging

from data.models import AssetSummary

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 8   # max suggestions shown in the overlay
GRID_SIZE    = 9   # cards on the home grid


# ── Catalog building ───────────────────────────────────────────────────────────

def build_catalog(rows: list) -> list[AssetSummary]:
    """
    Convert raw /coins/markets rows to AssetSummary objects.

    Rows missing a required field are skipped. Duplicate ids keep the first
    occurrence, which is the higher market-cap rank.

    Args:
        rows: Decoded JSON array from the markets endpoint.

    Returns:
        List of AssetSummary in the API's rank order, ids unique.
    """
    catalog: list[AssetSummary] = []
    seen: set[str] = set()

    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            asset = AssetSummary.from_api(row)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed asset row {row.get('id', '?')!r}: {e}")
            continue

        if asset.id in seen:
            logger.warning(f"Duplicate asset id {asset.id!r} in catalog, keeping first.")
            continue
        seen.add(asset.id)
        catalog.append(asset)

    return catalog


def find_asset(catalog: list[AssetSummary], asset_id: str) -> AssetSummary | None:
    """Look up a catalog entry by id."""
    for asset in catalog:
        if asset.id == asset_id:
            return asset
    return None


def top_assets(catalog: list[AssetSummary], n: int = GRID_SIZE) -> list[AssetSummary]:
    """First n catalog entries (the catalog is already market-cap ordered)."""
    return catalog[:n]


# ── Search ─────────────────────────────────────────────────────────────────────

def normalize_query(query: str | None) -> str:
    """Trim and lower-case raw search input; None counts as empty."""
    return (query or "").strip().lower()


def search_catalog(
    catalog: list[AssetSummary],
    query: str,
    limit: int = SEARCH_LIMIT,
) -> list[AssetSummary]:
    """
    Case-insensitive substring match on name OR symbol.

    Matches keep catalog order (market-cap rank) and are truncated to `limit`.
    An empty query (after trimming) matches nothing.

    Examples:
        "et"  → Ethereum, Ethena, ...
        "BTC" → Bitcoin, Wrapped Bitcoin (symbol "wbtc"), ...
    """
    term = normalize_query(query)
    if not term:
        return []

    matches = []
    for asset in catalog:
        if term in asset.name.lower() or term in asset.symbol.lower():
            matches.append(asset)
            if len(matches) >= limit:
                break
    return matches
