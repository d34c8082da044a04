"""
data/models.py
Plain value types shared by the fetch layer, the controller and the view.
Everything here is immutable once built from an API payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import pandas as pd


class TimeWindow(Enum):
    """Chart window. Value is the `days` query parameter sent to the API."""

    ONE_MONTH = "30"
    SIX_MONTHS = "180"

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return _WINDOW_LABELS[self]

    @property
    def granularity(self) -> str:
        """Chart x-axis tick unit: "day" or "week"."""
        return "day" if self is TimeWindow.ONE_MONTH else "week"

    @classmethod
    def default(cls) -> "TimeWindow":
        return cls.ONE_MONTH


_WINDOW_LABELS = {
    TimeWindow.ONE_MONTH:  "1 month",
    TimeWindow.SIX_MONTHS: "6 months",
}


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class AssetSummary:
    """One catalog row, as returned by /coins/markets."""

    id: str
    name: str
    symbol: str
    image_url: str
    current_price: float
    price_change_24h_pct: float | None
    price_change_30d_pct: float | None
    market_cap: float

    @classmethod
    def from_api(cls, row: dict) -> "AssetSummary":
        """
        Build an AssetSummary from a raw /coins/markets row.

        Raises:
            KeyError / ValueError / TypeError if a required field is missing
            or not numeric. Callers decide whether to skip the row.
        """
        return cls(
            id=str(row["id"]),
            name=str(row["name"]),
            symbol=str(row["symbol"]),
            image_url=str(row.get("image") or ""),
            current_price=float(row["current_price"]),
            price_change_24h_pct=_optional_float(row.get("price_change_percentage_24h")),
            price_change_30d_pct=_optional_float(row.get("price_change_percentage_30d_in_currency")),
            market_cap=float(row.get("market_cap") or 0),
        )


@dataclass(frozen=True)
class PricePoint:
    timestamp_ms: int
    price: float

    @property
    def at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class HistoricalSeries:
    """
    Price history for one asset over one window, oldest point first.
    Carries the (asset_id, window) pair it was requested for so a late
    response can be matched against the current selection.
    """

    asset_id: str
    window: TimeWindow
    points: tuple[PricePoint, ...]

    @classmethod
    def from_api(cls, asset_id: str, window: TimeWindow, payload: dict) -> "HistoricalSeries":
        points = tuple(
            PricePoint(timestamp_ms=int(ts), price=float(price))
            for ts, price in payload["prices"]
        )
        return cls(asset_id=asset_id, window=window, points=points)

    def __len__(self) -> int:
        return len(self.points)

    def to_frame(self) -> pd.DataFrame:
        """DataFrame with a UTC `Date` column and a `Price` column, for charting."""
        df = pd.DataFrame(
            [(p.timestamp_ms, p.price) for p in self.points],
            columns=["Timestamp", "Price"],
        )
        df["Date"] = pd.to_datetime(df["Timestamp"], unit="ms", utc=True)
        return df[["Date", "Price"]]
