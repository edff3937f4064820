"""
Buy vs. rent projection toolkit.

Turns a handful of housing assumptions (price, down payment, mortgage rate
and length, rent and its growth) into month-by-month mortgage schedules
and year-by-year rent projections, and reconciles raw user input into the
clamped numbers those calculators expect.
"""

from .config import ConfigProvider, FieldConfig
from .mortgage import calculate_mortgage_amortization, summarize_amortization_by_year
from .reconciliation import (
    EMPTY,
    ClampedNumericField,
    FieldState,
    MirroredQuantity,
    Representation,
    clamp,
)
from .rent import calculate_monthly_rent_data, compress_year_data
from .schemas import (
    AmortizationMonth,
    MonthlyRentData,
    MortgageAmortizationData,
    ScenarioInputs,
    YearlyRent,
)
from .session import ProjectionSession

__all__ = [
    "AmortizationMonth",
    "ClampedNumericField",
    "ConfigProvider",
    "EMPTY",
    "FieldConfig",
    "FieldState",
    "MirroredQuantity",
    "MonthlyRentData",
    "MortgageAmortizationData",
    "ProjectionSession",
    "Representation",
    "ScenarioInputs",
    "YearlyRent",
    "calculate_monthly_rent_data",
    "calculate_mortgage_amortization",
    "clamp",
    "compress_year_data",
    "summarize_amortization_by_year",
]
