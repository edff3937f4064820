from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class AmortizationMonth:
    """One month of a fixed-payment mortgage schedule."""

    index: int  # 1-based absolute month number
    year: int
    month_in_year: int  # 1-12
    payment: float
    interest: float
    principal: float
    balance_start: float
    balance_end: float
    cumulative_principal: float
    cumulative_interest: float


@dataclass
class MortgageAmortizationData:
    monthly_payment: float
    total_principal_paid: float
    total_interest_paid: float
    total_paid: float
    months: List[AmortizationMonth] = field(default_factory=list)

    @property
    def term_months(self) -> int:
        return len(self.months)

    @property
    def loan_amount(self) -> float:
        if not self.months:
            return 0.0
        return self.months[0].balance_start


@dataclass
class MortgageYearSummary:
    """Twelve schedule months rolled up for yearly tables and graphs."""

    year: int
    payment: float
    principal: float
    interest: float
    balance_end: float
    cumulative_principal: float
    cumulative_interest: float


@dataclass
class YearlyRent:
    year: int
    year_total: float
    months: List[float] = field(default_factory=list)
    cumulative_total: float = 0.0


@dataclass
class MonthlyRentData:
    years: List[YearlyRent] = field(default_factory=list)
    total_paid: float = 0.0


@dataclass
class CompactRow:
    """A group of consecutive years collapsed into a single table row."""

    year_range: str
    total: float
    cumulative_total: float


@dataclass
class CompactMortgageRow:
    year_range: str
    payment: float
    principal: float
    interest: float
    balance_end: float
    cumulative_principal: float
    cumulative_interest: float


@dataclass
class ScenarioInputs:
    """Every reconciled input of a buy-vs-rent scenario.

    Rates and percentages are in percent (``5.5`` for 5.5%), lengths in
    years and money in the base currency unit.
    """

    analysis_years: float = 25
    monthly_rent: float = 2000.0
    rent_increase: float = 2.5
    purchase_price: float = 600000.0
    down_payment_percentage: float = 20.0
    mortgage_rate: float = 5.5
    mortgage_length: float = 25
    property_tax_percentage: float = 0.75
    maintenance_percentage: float = 1.0
    investment_return: float = 7.5

    @property
    def down_payment_amount(self) -> float:
        return self.purchase_price * self.down_payment_percentage / 100.0

    @property
    def loan_amount(self) -> float:
        return max(self.purchase_price - self.down_payment_amount, 0.0)
