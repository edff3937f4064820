from __future__ import annotations

import math
from typing import Literal

RoundMode = Literal["none", "cents"]

ROUND_MODES = ("none", "cents")


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round ``value`` with halves going up, the way spreadsheet users expect.

    Python's builtin ``round`` uses banker's rounding (``round(0.5) == 0``),
    which makes ``12.5`` cents collapse to ``12``.
    """
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def apply_rounding(value: float, mode: RoundMode) -> float:
    if mode == "cents":
        return round_half_up(value, 2)
    if mode == "none":
        return value
    raise ValueError(f"unknown round mode {mode!r}; expected one of {ROUND_MODES}")
