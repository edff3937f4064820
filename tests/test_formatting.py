from __future__ import annotations

import pytest

from buy_or_rent.formatting import (
    format_currency,
    format_fixed,
    format_grouped,
    format_percentage,
    format_raw,
    format_short_currency,
    format_to_integer,
    parse_percentage,
)
from buy_or_rent.rounding import apply_rounding, round_half_up


class TestCurrency:
    def test_whole_dollars_with_grouping(self) -> None:
        assert format_currency(1234.5) == "$1,235"
        assert format_currency(600_000) == "$600,000"
        assert format_currency(0) == "$0"

    def test_negative(self) -> None:
        assert format_currency(-1234) == "-$1,234"
        assert format_currency(-0.2) == "$0"

    def test_short_form(self) -> None:
        assert format_short_currency(1_500_000) == "$1.5M"
        assert format_short_currency(2_000) == "$2K"
        assert format_short_currency(45_600) == "$46K"
        assert format_short_currency(999) == "$999"


class TestNumbers:
    def test_percentage_drops_trailing_zeros(self) -> None:
        assert format_percentage(2.5) == "2.5"
        assert format_percentage(2.0) == "2"
        assert format_percentage(0.7551) == "0.76"
        assert format_percentage(1234.567) == "1,234.57"

    def test_fixed_and_grouped(self) -> None:
        assert format_fixed(5.5) == "5.50"
        assert format_fixed(27.5, 1) == "27.5"
        assert format_grouped(1234567.891, 2) == "1,234,567.89"

    def test_integer(self) -> None:
        assert format_to_integer(24.5) == "25"
        assert format_to_integer(24.4) == "24"

    def test_raw(self) -> None:
        assert format_raw(20.0) == "20"
        assert format_raw(5.5) == "5.5"
        assert format_raw(600000) == "600000"


class TestParsePercentage:
    def test_strips_decoration(self) -> None:
        assert parse_percentage("2.5 %") == 2.5
        assert parse_percentage("-1.25%") == -1.25

    @pytest.mark.parametrize("text", ["", "-", "%"])
    def test_nothing_numeric(self, text) -> None:
        assert parse_percentage(text) is None


class TestRounding:
    def test_half_up(self) -> None:
        assert round_half_up(12.5) == 13
        assert round_half_up(2.345, 1) == 2.3
        assert round_half_up(0.125, 2) == 0.13

    def test_modes(self) -> None:
        assert apply_rounding(1.23456, "none") == 1.23456
        assert apply_rounding(1.23456, "cents") == 1.23
        with pytest.raises(ValueError):
            apply_rounding(1.0, "nearest")
