"""Display helpers shared by the reconciled fields and the CLI tables.

The calculators never format; everything here turns an already computed
number into text (or lenient text back into a number).
"""

from __future__ import annotations

import re
from typing import Optional

from .rounding import round_half_up

_NOT_NUMERIC = re.compile(r"[^\d.\-]")
_LEADING_FLOAT = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def format_currency(value: float) -> str:
    """``1234.5`` -> ``"$1,235"``; negative amounts keep the sign in front."""
    amount = round_half_up(abs(value))
    sign = "-" if value < 0 and amount else ""
    return f"{sign}${amount:,.0f}"


def format_short_currency(value: float) -> str:
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${round_half_up(value / 1_000):.0f}K"
    return format_currency(value)


def format_grouped(value: float, decimals: int = 0) -> str:
    return f"{round_half_up(value, decimals):,.{decimals}f}"


def format_percentage(value: float) -> str:
    """Up to two decimals with trailing zeros dropped: ``2.50`` -> ``"2.5"``."""
    text = format_grouped(value, 2)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_fixed(value: float, decimals: int = 2) -> str:
    return f"{round_half_up(value, decimals):.{decimals}f}"


def format_to_integer(value: float) -> str:
    return str(int(round_half_up(value)))


def format_raw(value: float) -> str:
    """Plain editable text for a value, no grouping: ``20.0`` -> ``"20"``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_percentage(formatted: str) -> Optional[float]:
    """Read a number out of loosely formatted text such as ``"2.5 %"``.

    Only digits, ``.`` and ``-`` are kept; an empty result or a lone minus
    sign gives ``None``.
    """
    return parse_leading_float(formatted)


def parse_leading_float(text: str) -> Optional[float]:
    cleaned = _NOT_NUMERIC.sub("", text or "")
    if cleaned in ("", "-"):
        return None
    match = _LEADING_FLOAT.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))
