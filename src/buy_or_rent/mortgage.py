"""Fixed-payment mortgage amortization.

Everything here is a pure function of plain numbers. Inputs are expected
to be reconciled already (see :mod:`buy_or_rent.reconciliation`); the
calculator does not validate them and never raises for degenerate values
such as a zero rate or a fully paid-down purchase.
"""

from __future__ import annotations

import logging
import math
from itertools import groupby
from typing import List

from .rounding import RoundMode, apply_rounding
from .schemas import (
    AmortizationMonth,
    CompactMortgageRow,
    MortgageAmortizationData,
    MortgageYearSummary,
)

logger = logging.getLogger(__name__)


def calculate_mortgage_amortization(
    price: float,
    down_payment_percent: float,
    annual_rate_percent: float,
    term_years: float,
    round_mode: RoundMode = "none",
) -> MortgageAmortizationData:
    """Build the full month-by-month schedule for a level-payment mortgage.

    The final month pays off whatever balance is left, so the schedule
    always ends at exactly zero. Any residue from floating point (or from
    cent rounding when ``round_mode="cents"``) is absorbed entirely by that
    last month's principal and payment.
    """
    loan_amount = price * (1 - down_payment_percent / 100.0)
    monthly_rate = annual_to_monthly_rate(annual_rate_percent)
    total_months = int(round(term_years * 12))
    logger.debug(
        "amortizing %.2f over %d months at %.6f monthly",
        loan_amount,
        total_months,
        monthly_rate,
    )

    if total_months <= 0:
        logger.debug("empty term, returning an empty schedule")
        return MortgageAmortizationData(
            monthly_payment=0.0,
            total_principal_paid=0.0,
            total_interest_paid=0.0,
            total_paid=0.0,
        )

    payment = calculate_monthly_payment(
        loan_amount, monthly_rate, total_months, round_mode
    )

    months: List[AmortizationMonth] = []
    balance = apply_rounding(loan_amount, round_mode)
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for index in range(1, total_months + 1):
        balance_start = balance
        interest = apply_rounding(balance_start * monthly_rate, round_mode)

        if index == total_months:
            principal = balance_start
            month_payment = apply_rounding(principal + interest, round_mode)
            balance = 0.0
        else:
            principal = apply_rounding(payment - interest, round_mode)
            month_payment = payment
            if principal > balance_start:
                # A payment rounded up to the cent can outrun a tiny loan.
                principal = balance_start
                month_payment = apply_rounding(principal + interest, round_mode)
            balance = apply_rounding(balance_start - principal, round_mode)

        cumulative_principal = apply_rounding(
            cumulative_principal + principal, round_mode
        )
        cumulative_interest = apply_rounding(cumulative_interest + interest, round_mode)

        months.append(
            AmortizationMonth(
                index=index,
                year=math.ceil(index / 12),
                month_in_year=(index - 1) % 12 + 1,
                payment=month_payment,
                interest=interest,
                principal=principal,
                balance_start=balance_start,
                balance_end=balance,
                cumulative_principal=cumulative_principal,
                cumulative_interest=cumulative_interest,
            )
        )

    return MortgageAmortizationData(
        monthly_payment=payment,
        total_principal_paid=cumulative_principal,
        total_interest_paid=cumulative_interest,
        total_paid=cumulative_principal + cumulative_interest,
        months=months,
    )


def calculate_monthly_payment(
    loan_amount: float,
    monthly_rate: float,
    total_months: int,
    round_mode: RoundMode = "none",
) -> float:
    if loan_amount <= 0 or total_months <= 0:
        return 0.0
    if monthly_rate == 0:
        return apply_rounding(loan_amount / total_months, round_mode)
    growth = (1 + monthly_rate) ** total_months
    payment = loan_amount * monthly_rate * growth / (growth - 1)
    return apply_rounding(payment, round_mode)


def annual_to_monthly_rate(annual_rate_pct: float) -> float:
    if annual_rate_pct <= 0:
        return 0.0
    return annual_rate_pct / 100.0 / 12.0


def summarize_amortization_by_year(
    data: MortgageAmortizationData,
) -> List[MortgageYearSummary]:
    """Roll the monthly schedule up into one entry per loan year."""
    summaries: List[MortgageYearSummary] = []
    for year, grouped in groupby(data.months, key=lambda month: month.year):
        year_months = list(grouped)
        last = year_months[-1]
        summaries.append(
            MortgageYearSummary(
                year=year,
                payment=sum(m.payment for m in year_months),
                principal=sum(m.principal for m in year_months),
                interest=sum(m.interest for m in year_months),
                balance_end=last.balance_end,
                cumulative_principal=last.cumulative_principal,
                cumulative_interest=last.cumulative_interest,
            )
        )
    return summaries


def compress_mortgage_data(
    data: MortgageAmortizationData, max_rows: int
) -> List[CompactMortgageRow]:
    """Group loan years so a table never needs more than ``max_rows`` rows.

    With ``max_rows <= 0``, or when there are no more years than rows, each
    year keeps its own row.
    """
    summaries = summarize_amortization_by_year(data)
    if not summaries:
        return []

    per_row = 1
    if 0 < max_rows < len(summaries):
        per_row = math.ceil(len(summaries) / max_rows)

    rows: List[CompactMortgageRow] = []
    for start in range(0, len(summaries), per_row):
        group = summaries[start : start + per_row]
        last = group[-1]
        rows.append(
            CompactMortgageRow(
                year_range=_year_range(group[0].year, last.year),
                payment=sum(s.payment for s in group),
                principal=sum(s.principal for s in group),
                interest=sum(s.interest for s in group),
                balance_end=last.balance_end,
                cumulative_principal=last.cumulative_principal,
                cumulative_interest=last.cumulative_interest,
            )
        )
    return rows


def _year_range(first: int, last: int) -> str:
    if first == last:
        return str(first)
    return f"{first}-{last}"
