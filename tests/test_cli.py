from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from buy_or_rent.cli import app
from buy_or_rent.config import COUNTRY_ENV

runner = CliRunner()


@pytest.fixture(autouse=True)
def _canada(monkeypatch) -> None:
    monkeypatch.delenv(COUNTRY_ENV, raising=False)


class TestMortgageCommand:
    def test_summary(self) -> None:
        result = runner.invoke(
            app, ["mortgage", "500000", "--down-payment", "20", "--rate", "5", "--years", "25"]
        )
        assert result.exit_code == 0, result.output
        assert "Loan amount: $400,000" in result.output
        assert "Monthly payment: $2,338" in result.output

    def test_json(self) -> None:
        result = runner.invoke(app, ["mortgage", "500000", "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert len(payload["months"]) == 300
        assert payload["months"][-1]["balance_end"] == 0

    def test_invalid_round_mode(self) -> None:
        result = runner.invoke(app, ["mortgage", "500000", "--round", "pennies"])
        assert result.exit_code == 2

    def test_non_finite_price_uses_default(self) -> None:
        result = runner.invoke(app, ["mortgage", "nan"])
        assert result.exit_code == 0, result.output
        assert "Purchase price: $600,000" in result.output

    def test_max_rows(self) -> None:
        result = runner.invoke(app, ["mortgage", "500000", "--max-rows", "5"])
        assert result.exit_code == 0, result.output
        assert "1-5" in result.output
        assert "21-25" in result.output


class TestRentCommand:
    def test_summary(self) -> None:
        result = runner.invoke(app, ["rent", "2500", "--years", "3", "--increase", "2.5"])
        assert result.exit_code == 0, result.output
        assert "Total rent paid: $92,269" in result.output
        assert "$30,750" in result.output

    def test_zero_max_rows_prints_every_year(self) -> None:
        result = runner.invoke(app, ["rent", "2500", "--years", "3", "--max-rows", "0"])
        assert result.exit_code == 0, result.output
        assert "1-3" not in result.output
        lines = [line.split()[0] for line in result.output.splitlines() if line.strip()]
        assert lines[-3:] == ["1", "2", "3"]

    def test_max_rows_groups_years(self) -> None:
        result = runner.invoke(app, ["rent", "2500", "--years", "4", "--max-rows", "2"])
        assert result.exit_code == 0, result.output
        assert "1-2" in result.output
        assert "3-4" in result.output

    def test_years_are_clamped(self) -> None:
        result = runner.invoke(app, ["rent", "2500", "--years", "0", "--json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["years"]) == 1


class TestScenarioCommand:
    def test_prints_both_projections_and_link(self) -> None:
        result = runner.invoke(app, ["scenario", "monthlyRent=2500&purchasePrice=750000"])
        assert result.exit_code == 0, result.output
        assert "Purchase price: $750,000" in result.output
        assert "Monthly rent: $2,500" in result.output
        assert "Share link: ?" in result.output
        assert "purchasePrice=750000" in result.output

    def test_json(self) -> None:
        result = runner.invoke(app, ["scenario", "analysisYears=5", "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["inputs"]["analysis_years"] == 5
        assert len(payload["rent"]["years"]) == 5
