from __future__ import annotations

import logging

import pytest

from buy_or_rent.config import COUNTRY_ENV, ConfigProvider, FieldConfig
from buy_or_rent.reconciliation import NumberKind
from buy_or_rent.schemas import ScenarioInputs


class TestConfigProvider:
    def test_canada_is_default(self, monkeypatch) -> None:
        monkeypatch.delenv(COUNTRY_ENV, raising=False)
        assert ConfigProvider().country == "Canada"

    def test_unknown_country_falls_back(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="buy_or_rent.config"):
            provider = ConfigProvider("Narnia")
        assert provider.country == "Canada"
        assert "Narnia" in caplog.text

    def test_country_from_environment(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv(COUNTRY_ENV, "Atlantis")
        with caplog.at_level(logging.WARNING, logger="buy_or_rent.config"):
            provider = ConfigProvider()
        assert provider.country == "Canada"
        assert "Atlantis" in caplog.text

    def test_get_field(self) -> None:
        field = ConfigProvider("Canada").get_field("rent", "rent_increase_rate")
        assert field == FieldConfig(0, 20, 2.5, step=0.01, kind=NumberKind.PERCENTAGE)

    def test_get_section(self) -> None:
        section = ConfigProvider("Canada").get_section("purchase")
        assert section["purchase_price"].maximum == 3_000_000
        assert section["mortgage_length"].step == 2.5

    def test_unknown_lookups_warn_and_return_none(self, caplog) -> None:
        provider = ConfigProvider("Canada")
        with caplog.at_level(logging.WARNING, logger="buy_or_rent.config"):
            assert provider.get_section("lottery") is None
            assert provider.get_field("rent", "parking") is None
        assert "lottery" in caplog.text
        assert "parking" in caplog.text

    def test_field_policy(self) -> None:
        policy = ConfigProvider("Canada").field_policy("purchase", "mortgage_rate")
        assert (policy.minimum, policy.maximum, policy.default) == (0, 15, 5.5)
        assert policy.clamp(float("nan")) == 5.5
        assert policy.clamp(22) == 15

    def test_field_policy_unknown_field(self) -> None:
        with pytest.raises(KeyError):
            ConfigProvider("Canada").field_policy("purchase", "pool_maintenance")


class TestScenarioDefaults:
    def test_defaults_match_scenario_inputs(self) -> None:
        assert ConfigProvider("Canada").default_inputs() == ScenarioInputs()

    def test_reconcile_replaces_invalid_values(self) -> None:
        provider = ConfigProvider("Canada")
        inputs = ScenarioInputs(
            monthly_rent=float("nan"),
            purchase_price=50_000,
            mortgage_length=26,
            down_payment_percentage=None,
            analysis_years=80,
        )
        reconciled = provider.reconcile(inputs)
        assert reconciled.monthly_rent == 2_000
        assert reconciled.purchase_price == 100_000
        assert reconciled.mortgage_length == 25
        assert reconciled.down_payment_percentage == 20
        assert reconciled.analysis_years == 50

    def test_derived_amounts(self) -> None:
        inputs = ScenarioInputs(purchase_price=500_000, down_payment_percentage=20)
        assert inputs.down_payment_amount == pytest.approx(100_000)
        assert inputs.loan_amount == pytest.approx(400_000)
