"""
data/format.py
Display formatting for prices, market caps and percentage changes.
"""

MISSING = "—"


def format_price(value: float) -> str:
    """
    USD currency string. Sub-dollar prices keep up to 6 fractional digits
    (never fewer than 2) so low-value assets don't collapse to "$0.00".

    Examples:
        0.000123 → "$0.000123"
        0.5      → "$0.50"
        42.5     → "$42.50"
        64210.3  → "$64,210.30"
    """
    sign = "-" if value < 0 else ""
    value = abs(value)

    if value < 1:
        text = f"{value:,.6f}".rstrip("0")
        whole, _, frac = text.partition(".")
        text = f"{whole}.{frac.ljust(2, '0')}"
    else:
        text = f"{value:,.2f}"

    return f"{sign}${text}"


def format_market_cap(value: float) -> str:
    """
    Compact market cap: "$1.23t", "$4.56b", "$7.89m", else a grouped number.

    Thresholds are inclusive and checked largest first, so exactly 1e12
    reports as "$1.00t".
    """
    if value >= 1e12:
        return f"${value / 1e12:.2f}t"
    if value >= 1e9:
        return f"${value / 1e9:.2f}b"
    if value >= 1e6:
        return f"${value / 1e6:.2f}m"

    # Grouped with up to 3 fractional digits, trailing zeros dropped
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"${text}"


def format_percent(value: float | None) -> str:
    """"+1.23%" for zero/positive, "-4.56%" for negative, "—" when unknown."""
    if value is None:
        return MISSING
    value += 0.0  # -0.0 → 0.0
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{value:.2f}%"


def is_positive(value: float | None) -> bool:
    """Trend direction used for badge colouring; unknown counts as positive."""
    return value is None or value >= 0
