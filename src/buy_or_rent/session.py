from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Optional

from . import reconciliation
from .config import ConfigProvider
from .mortgage import calculate_mortgage_amortization
from .query_params import encode_inputs
from .reconciliation import (
    ClampedNumericField,
    FieldState,
    MirroredQuantity,
    Representation,
    Transition,
)
from .rent import calculate_monthly_rent_data
from .schemas import MonthlyRentData, MortgageAmortizationData, ScenarioInputs

logger = logging.getLogger(__name__)

DOWN_PAYMENT_FIELDS = {
    Representation.PERCENTAGE: "down_payment_percentage",
    Representation.AMOUNT: "down_payment_amount",
}


class ProjectionSession:
    """Field states plus the projections computed from them.

    Every event that stores a new value triggers a full recompute of both
    projections; results are replaced, never patched.
    """

    def __init__(
        self,
        inputs: Optional[ScenarioInputs] = None,
        provider: Optional[ConfigProvider] = None,
    ) -> None:
        self.provider = provider or ConfigProvider()
        self.fields: Dict[str, ClampedNumericField] = self.provider.scenario_fields()
        self.fields["down_payment_amount"] = self.provider.field_policy(
            "purchase", "down_payment_amount"
        )

        self.inputs = self.provider.reconcile(inputs or self.provider.default_inputs())
        amount = self.fields["down_payment_amount"].clamp(
            self.inputs.down_payment_amount
        )
        self.down_payment = MirroredQuantity(
            Representation.PERCENTAGE, self.inputs.down_payment_percentage, amount
        )

        values = {name: getattr(self.inputs, name) for name in self.fields}
        values["down_payment_amount"] = amount
        self.states: Dict[str, FieldState] = {
            name: reconciliation.initial_state(field, values[name])
            for name, field in self.fields.items()
        }

        self.mortgage: Optional[MortgageAmortizationData] = None
        self.rent: Optional[MonthlyRentData] = None
        self.recompute_count = 0
        self.recompute()

    def display(self, name: str) -> str:
        return reconciliation.display_text(self.fields[name], self.states[name])

    def focus(self, name: str) -> None:
        self.states[name] = reconciliation.focus(self.fields[name], self.states[name])

    def edit(self, name: str, text: str) -> Optional[float]:
        return self._apply(
            name, reconciliation.edit(self.fields[name], self.states[name], text)
        )

    def blur(self, name: str) -> Optional[float]:
        return self._apply(name, reconciliation.blur(self.fields[name], self.states[name]))

    def slide(self, name: str, value: float) -> Optional[float]:
        return self._apply(
            name, reconciliation.slide(self.fields[name], self.states[name], value)
        )

    def switch_down_payment(self, representation: Representation) -> None:
        name = DOWN_PAYMENT_FIELDS[representation]
        self.down_payment = self.down_payment.switch(
            representation, self.inputs.purchase_price, self.fields[name]
        )
        self.states[name] = reconciliation.sync(
            self.fields[name], self.states[name], self.down_payment.value
        )
        self.recompute()

    def to_query(self) -> str:
        return encode_inputs(self.inputs)

    def recompute(self) -> None:
        percent_field = self.fields["down_payment_percentage"]
        down_payment_percentage = self.inputs.down_payment_percentage
        percentage = self.down_payment.as_percentage(self.inputs.purchase_price)
        if percentage is not None:
            # The engine gets the exact share of the active representation;
            # only the stored input is snapped to the percentage grid.
            down_payment_percentage = max(
                percent_field.minimum, min(percent_field.maximum, percentage)
            )
            self.inputs = replace(
                self.inputs, down_payment_percentage=percent_field.clamp(percentage)
            )

        inputs = self.inputs
        self.mortgage = calculate_mortgage_amortization(
            inputs.purchase_price,
            down_payment_percentage,
            inputs.mortgage_rate,
            inputs.mortgage_length,
        )
        self.rent = calculate_monthly_rent_data(
            inputs.monthly_rent, int(inputs.analysis_years), inputs.rent_increase
        )
        self.recompute_count += 1
        logger.debug("recomputed projections (#%d)", self.recompute_count)

    def _apply(self, name: str, transition: Transition) -> Optional[float]:
        self.states[name] = transition.state
        if transition.emitted is None:
            return None
        self._store(name, transition.emitted)
        self.recompute()
        return transition.emitted

    def _store(self, name: str, value: float) -> None:
        if name in DOWN_PAYMENT_FIELDS.values():
            if DOWN_PAYMENT_FIELDS[self.down_payment.representation] == name:
                self.down_payment = self.down_payment.with_value(value)
            if name == "down_payment_percentage":
                self.inputs = replace(self.inputs, down_payment_percentage=value)
            return
        self.inputs = replace(self.inputs, **{name: value})
