"""Year-by-year projection of rent paid under compounding annual increases."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from .rounding import RoundMode, apply_rounding
from .schemas import CompactRow, MonthlyRentData, YearlyRent

logger = logging.getLogger(__name__)


def calculate_monthly_rent_data(
    monthly_rent: float,
    analysis_years: int,
    annual_increase_percent: float,
    *,
    start_year: int = 1,
    round_to: RoundMode = "none",
    increase_month: Optional[int] = None,
) -> MonthlyRentData:
    """Project rent over ``analysis_years`` years.

    Growth compounds once per year: year ``n`` pays
    ``monthly_rent * (1 + annual_increase_percent / 100) ** (n - 1)`` every
    month. A negative rate is not rejected; it simply shrinks the rent.

    ``increase_month`` (1-12) moves each year's increase to that month, so
    the earlier months of year ``n`` still pay year ``n - 1``'s rent. The
    first year is always flat. ``start_year`` only relabels ``year``.
    """
    if increase_month is not None and increase_month not in range(1, 13):
        logger.warning(
            "ignoring increase_month=%r, expected a month between 1 and 12",
            increase_month,
        )
        increase_month = None

    years: List[YearlyRent] = []
    total_paid = 0.0

    for year_index in range(max(int(analysis_years), 0)):
        current = calculate_monthly_rent_for_year(
            monthly_rent, year_index, annual_increase_percent, round_to
        )
        if increase_month is None or year_index == 0:
            months = [current] * 12
            year_total = apply_rounding(current * 12, round_to)
        else:
            previous = calculate_monthly_rent_for_year(
                monthly_rent, year_index - 1, annual_increase_percent, round_to
            )
            months = [previous] * (increase_month - 1) + [current] * (
                13 - increase_month
            )
            year_total = apply_rounding(sum(months), round_to)

        total_paid = apply_rounding(total_paid + year_total, round_to)
        years.append(
            YearlyRent(
                year=start_year + year_index,
                year_total=year_total,
                months=months,
                cumulative_total=total_paid,
            )
        )

    logger.debug(
        "projected %d years of rent from %.2f/month, total %.2f",
        len(years),
        monthly_rent,
        total_paid,
    )
    return MonthlyRentData(years=years, total_paid=total_paid)


def calculate_monthly_rent_for_year(
    base_rent: float,
    year_index: int,
    annual_increase_percent: float,
    round_to: RoundMode = "none",
) -> float:
    """Monthly rent in the 0-based ``year_index`` after compounding."""
    if year_index == 0:
        return apply_rounding(base_rent, round_to)
    rent = base_rent * (1 + annual_increase_percent / 100.0) ** year_index
    return apply_rounding(rent, round_to)


def compress_year_data(
    years: Sequence[YearlyRent], max_rows: int, round_to: RoundMode = "none"
) -> List[CompactRow]:
    """Collapse consecutive years so at most ``max_rows`` rows remain.

    ``max_rows <= 0`` folds everything into a single row. The last row
    always carries the final cumulative total.
    """
    if not years:
        return []

    if max_rows <= 0:
        per_row = len(years)
    elif len(years) <= max_rows:
        per_row = 1
    else:
        per_row = math.ceil(len(years) / max_rows)

    rows: List[CompactRow] = []
    for start in range(0, len(years), per_row):
        group = years[start : start + per_row]
        first, last = group[0], group[-1]
        label = str(first.year) if first.year == last.year else f"{first.year}-{last.year}"
        rows.append(
            CompactRow(
                year_range=label,
                total=apply_rounding(sum(y.year_total for y in group), round_to),
                cumulative_total=apply_rounding(last.cumulative_total, round_to),
            )
        )
    return rows
