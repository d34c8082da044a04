"""Tests for display formatting."""

from hypothesis import given, strategies as st

from data.format import MISSING, format_market_cap, format_percent, format_price, is_positive


class TestFormatPrice:
    def test_sub_dollar_keeps_precision(self):
        assert format_price(0.000123) == "$0.000123"

    def test_sub_dollar_pads_to_two_digits(self):
        assert format_price(0.5) == "$0.50"

    def test_sub_dollar_rounds_at_six_digits(self):
        assert format_price(0.12345678) == "$0.123457"

    def test_dollar_and_up_uses_two_digits(self):
        assert format_price(42.5) == "$42.50"
        assert format_price(1) == "$1.00"

    def test_thousands_are_grouped(self):
        assert format_price(64210.3) == "$64,210.30"

    def test_zero(self):
        assert format_price(0) == "$0.00"

    @given(st.floats(min_value=1, max_value=1e9, allow_nan=False, allow_infinity=False))
    def test_at_least_one_dollar_always_has_two_decimals(self, value):
        text = format_price(value)
        assert text.startswith("$")
        assert len(text.split(".")[1]) == 2

    @given(st.floats(min_value=0, max_value=0.999, allow_nan=False, allow_infinity=False))
    def test_below_one_dollar_has_two_to_six_decimals(self, value):
        decimals = format_price(value).split(".")[1]
        assert 2 <= len(decimals) <= 6


class TestFormatMarketCap:
    def test_exact_trillion_reports_trillions(self):
        assert format_market_cap(1e12) == "$1.00t"

    def test_just_under_trillion_reports_billions(self):
        assert format_market_cap(999e9) == "$999.00b"

    def test_millions(self):
        assert format_market_cap(1e6) == "$1.00m"
        assert format_market_cap(45_670_000) == "$45.67m"

    def test_small_values_are_grouped(self):
        assert format_market_cap(500) == "$500"
        assert format_market_cap(999_999) == "$999,999"

    def test_small_fractional_value(self):
        assert format_market_cap(1234.5) == "$1,234.5"

    def test_zero(self):
        assert format_market_cap(0) == "$0"


class TestFormatPercent:
    def test_positive_gets_plus(self):
        assert format_percent(2.346) == "+2.35%"
        assert format_percent(12.5) == "+12.50%"

    def test_zero_gets_plus(self):
        assert format_percent(0) == "+0.00%"
        assert format_percent(-0.0) == "+0.00%"

    def test_negative_has_only_minus(self):
        assert format_percent(-4.5) == "-4.50%"

    def test_missing(self):
        assert format_percent(None) == MISSING

    def test_trend_direction(self):
        assert is_positive(0) is True
        assert is_positive(-0.01) is False
        assert is_positive(None) is True
