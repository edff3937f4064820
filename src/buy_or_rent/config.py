from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional, Tuple

from .reconciliation import ClampedNumericField, NumberKind
from .schemas import ScenarioInputs

logger = logging.getLogger(__name__)

COUNTRY_ENV = "BUYORRENT_COUNTRY"
DEFAULT_COUNTRY = "Canada"


@dataclass(frozen=True)
class FieldConfig:
    """Bounds and fallback for one input field in one country."""

    minimum: float
    maximum: float
    default: float
    step: float = 1.0
    kind: NumberKind = NumberKind.NORMAL


def _money(minimum: float, maximum: float, default: float) -> FieldConfig:
    return FieldConfig(minimum, maximum, default, step=1, kind=NumberKind.CURRENCY)


def _percent(minimum: float, maximum: float, default: float) -> FieldConfig:
    return FieldConfig(minimum, maximum, default, step=0.01, kind=NumberKind.PERCENTAGE)


CountryConfig = Mapping[str, Mapping[str, FieldConfig]]

# All money in CAD, rates in percent, lengths in years.
CANADA_CONFIG: CountryConfig = {
    "common": {
        "analysis_years": FieldConfig(1, 50, 25, step=1, kind=NumberKind.INTEGER),
    },
    "rent": {
        "monthly_rent": _money(0, 10_000, 2_000),
        "rent_increase_rate": _percent(0, 20, 2.5),
    },
    "purchase": {
        "purchase_price": _money(100_000, 3_000_000, 600_000),
        "mortgage_rate": _percent(0, 15, 5.5),
        "mortgage_length": FieldConfig(1, 40, 25, step=2.5, kind=NumberKind.YEARS),
        "down_payment_percentage": _percent(0, 100, 20),
        "down_payment_amount": _money(0, 3_000_000, 120_000),
        "closing_costs_percentage": _percent(0, 5, 1.5),
        "closing_costs_amount": _money(0, 100_000, 12_000),
        "property_tax_percentage": _percent(0, 5, 0.75),
        "property_tax_amount": _money(0, 50_000, 4_500),
        "maintenance_percentage": _percent(0, 10, 1.0),
        "maintenance_amount": _money(0, 100_000, 6_000),
        "asset_appreciation_rate": _percent(-5, 20, 3.0),
    },
    "investment": {
        "investment_return": _percent(-20, 100, 7.5),
    },
}

COUNTRIES: Dict[str, CountryConfig] = {"Canada": CANADA_CONFIG}

# ScenarioInputs attribute -> (section, field)
SCENARIO_FIELDS: Dict[str, Tuple[str, str]] = {
    "analysis_years": ("common", "analysis_years"),
    "monthly_rent": ("rent", "monthly_rent"),
    "rent_increase": ("rent", "rent_increase_rate"),
    "purchase_price": ("purchase", "purchase_price"),
    "down_payment_percentage": ("purchase", "down_payment_percentage"),
    "mortgage_rate": ("purchase", "mortgage_rate"),
    "mortgage_length": ("purchase", "mortgage_length"),
    "property_tax_percentage": ("purchase", "property_tax_percentage"),
    "maintenance_percentage": ("purchase", "maintenance_percentage"),
    "investment_return": ("investment", "investment_return"),
}


def default_country() -> str:
    return os.environ.get(COUNTRY_ENV) or DEFAULT_COUNTRY


class ConfigProvider:
    """Min/max/default lookup for every input field of one country."""

    def __init__(self, country: Optional[str] = None) -> None:
        country = country or default_country()
        if country not in COUNTRIES:
            logger.warning(
                "country %r is not supported, falling back to %s",
                country,
                DEFAULT_COUNTRY,
            )
            country = DEFAULT_COUNTRY
        self.country = country
        self.config = COUNTRIES[country]

    def get_section(self, section: str) -> Optional[Mapping[str, FieldConfig]]:
        section_config = self.config.get(section)
        if section_config is None:
            logger.warning("section %r not found in %s config", section, self.country)
        return section_config

    def get_field(self, section: str, field: str) -> Optional[FieldConfig]:
        section_config = self.get_section(section)
        if section_config is None:
            return None
        field_config = section_config.get(field)
        if field_config is None:
            logger.warning("field %r not found in section %r", field, section)
        return field_config

    def field_policy(self, section: str, field: str) -> ClampedNumericField:
        field_config = self.get_field(section, field)
        if field_config is None:
            raise KeyError(f"{section}.{field}")
        return ClampedNumericField(
            name=field,
            minimum=field_config.minimum,
            maximum=field_config.maximum,
            step=field_config.step,
            default=field_config.default,
            kind=field_config.kind,
        )

    def scenario_fields(self) -> Dict[str, ClampedNumericField]:
        """Policies keyed by :class:`ScenarioInputs` attribute name."""
        return {
            name: self.field_policy(section, field)
            for name, (section, field) in SCENARIO_FIELDS.items()
        }

    def default_inputs(self) -> ScenarioInputs:
        return ScenarioInputs(
            **{name: policy.default for name, policy in self.scenario_fields().items()}
        )

    def reconcile(self, inputs: ScenarioInputs) -> ScenarioInputs:
        """Clamp every input, replacing non-finite values with defaults."""
        policies = self.scenario_fields()
        return ScenarioInputs(
            **{
                f.name: policies[f.name].clamp(getattr(inputs, f.name))
                for f in fields(ScenarioInputs)
            }
        )
