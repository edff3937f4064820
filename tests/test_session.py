from __future__ import annotations

import pytest

from buy_or_rent.config import ConfigProvider
from buy_or_rent.reconciliation import Representation
from buy_or_rent.schemas import ScenarioInputs
from buy_or_rent.session import ProjectionSession


@pytest.fixture
def session() -> ProjectionSession:
    return ProjectionSession(provider=ConfigProvider("Canada"))


class TestProjectionSession:
    def test_defaults_are_computed_once(self, session) -> None:
        assert session.recompute_count == 1
        assert len(session.mortgage.months) == 300
        assert len(session.rent.years) == 25

    def test_invalid_inputs_are_reconciled(self) -> None:
        session = ProjectionSession(
            ScenarioInputs(purchase_price=float("nan"), mortgage_rate=99),
            ConfigProvider("Canada"),
        )
        assert session.inputs.purchase_price == 600_000
        assert session.inputs.mortgage_rate == 15
        assert session.display("purchase_price") == "600,000"

    def test_edit_recomputes(self, session) -> None:
        session.focus("monthly_rent")
        assert session.edit("monthly_rent", "3000") == 3000
        assert session.rent.years[0].year_total == 36_000
        assert session.recompute_count == 2

    def test_partial_text_does_not_recompute(self, session) -> None:
        session.focus("monthly_rent")
        assert session.edit("monthly_rent", "-") is None
        assert session.recompute_count == 1
        assert session.display("monthly_rent") == "-"

    def test_blur_restores_default_for_cleared_field(self, session) -> None:
        session.focus("mortgage_rate")
        session.edit("mortgage_rate", "")
        assert session.blur("mortgage_rate") == 5.5
        assert session.display("mortgage_rate") == "5.50"

    def test_slider(self, session) -> None:
        assert session.slide("analysis_years", 10) == 10
        assert len(session.rent.years) == 10

    def test_down_payment_as_amount(self, session) -> None:
        session.switch_down_payment(Representation.AMOUNT)
        assert session.down_payment.value == pytest.approx(120_000)
        assert session.display("down_payment_amount") == "120,000"

        session.focus("down_payment_amount")
        session.edit("down_payment_amount", "150000")
        assert session.inputs.down_payment_percentage == pytest.approx(25)
        assert session.mortgage.months[0].balance_start == pytest.approx(450_000)

        session.switch_down_payment(Representation.PERCENTAGE)
        assert session.down_payment.value == pytest.approx(25.0)
        assert session.display("down_payment_percentage") == "25.00"

    def test_blur_just_past_the_bound_is_stored(self, session) -> None:
        session.focus("purchase_price")
        assert session.edit("purchase_price", "3000000.0009") is None
        assert session.blur("purchase_price") == 3_000_000
        assert session.inputs.purchase_price == 3_000_000
        assert session.display("purchase_price") == "3,000,000"
        assert session.mortgage.months[0].balance_start == pytest.approx(2_400_000)

    def test_amount_reaches_mortgage_unsnapped(self) -> None:
        session = ProjectionSession(
            ScenarioInputs(purchase_price=3_000_000), ConfigProvider("Canada")
        )
        session.switch_down_payment(Representation.AMOUNT)
        session.focus("down_payment_amount")
        session.edit("down_payment_amount", "600149")
        assert session.mortgage.months[0].balance_start == pytest.approx(2_399_851)
        # The stored percentage stays on its 0.01 grid.
        assert session.inputs.down_payment_percentage == 20.0
        assert "downPaymentPercentage=20" in session.to_query()

    def test_to_query(self, session) -> None:
        session.focus("down_payment_percentage")
        session.edit("down_payment_percentage", "25")
        assert "downPaymentPercentage=25" in session.to_query()

    def test_unknown_field(self, session) -> None:
        with pytest.raises(KeyError):
            session.focus("swimming_pool")


def test_session_is_exported_from_package() -> None:
    import buy_or_rent

    assert buy_or_rent.ProjectionSession is ProjectionSession
    assert "ProjectionSession" in buy_or_rent.__all__
