"""Scenario inputs carried in URL query strings.

This is the only persistence the calculator has: a shared link such as
``?monthlyRent=2500&rentIncrease=3`` restores the scenario. Keys follow the
web app's camelCase names.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

from .config import ConfigProvider
from .formatting import format_raw
from .reconciliation import EMPTY
from .schemas import ScenarioInputs

logger = logging.getLogger(__name__)

QUERY_KEYS: Dict[str, str] = {
    "analysis_years": "analysisYears",
    "monthly_rent": "monthlyRent",
    "rent_increase": "rentIncrease",
    "purchase_price": "purchasePrice",
    "down_payment_percentage": "downPaymentPercentage",
    "mortgage_rate": "mortgageRate",
    "mortgage_length": "mortgageLength",
    "property_tax_percentage": "propertyTaxPercentage",
    "maintenance_percentage": "maintenancePercentage",
    "investment_return": "investmentReturn",
}


def encode_inputs(inputs: ScenarioInputs) -> str:
    return urlencode(
        [(QUERY_KEYS[f.name], format_raw(getattr(inputs, f.name))) for f in fields(inputs)]
    )


def decode_inputs(
    query: Union[str, Mapping[str, str]],
    provider: Optional[ConfigProvider] = None,
) -> ScenarioInputs:
    """Rebuild inputs from a query string (or an already parsed mapping).

    Missing, blank and unreadable values fall back to the field default;
    every value is clamped to its field's bounds. Unknown keys are ignored.
    """
    provider = provider or ConfigProvider()
    params = _as_mapping(query)

    known = set(QUERY_KEYS.values())
    unknown = sorted(key for key in params if key not in known)
    if unknown:
        logger.debug("ignoring unknown query keys: %s", ", ".join(unknown))

    values = {}
    for name, policy in provider.scenario_fields().items():
        text = params.get(QUERY_KEYS[name])
        raw = policy.parse(text) if text else EMPTY
        values[name] = policy.clamp(raw)
    return ScenarioInputs(**values)


def _as_mapping(query: Union[str, Mapping[str, str]]) -> Mapping[str, str]:
    if not isinstance(query, str):
        return query
    if "?" in query:
        query = query.split("?", 1)[1]
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        # First occurrence wins, like URLSearchParams.get().
        params.setdefault(key, value)
    return params
