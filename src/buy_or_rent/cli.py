from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import List, Optional

import typer

from .config import ConfigProvider, default_country
from .formatting import format_currency, format_percentage
from .mortgage import calculate_mortgage_amortization, compress_mortgage_data
from .query_params import decode_inputs, encode_inputs
from .rent import calculate_monthly_rent_data, compress_year_data
from .rounding import ROUND_MODES
from .schemas import MonthlyRentData, MortgageAmortizationData, ScenarioInputs

app = typer.Typer(help="Project the cost of buying versus renting a home.")


@app.callback()
def main(
    ctx: typer.Context,
    country: str = typer.Option(
        default_factory=default_country,
        help="Country whose field bounds apply (env BUYORRENT_COUNTRY if omitted).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = ConfigProvider(country)


@app.command()
def mortgage(
    ctx: typer.Context,
    price: Optional[float] = typer.Argument(None, help="Purchase price."),
    down_payment: Optional[float] = typer.Option(
        None, help="Down payment as a percentage of the price."
    ),
    rate: Optional[float] = typer.Option(None, help="Annual mortgage rate in percent."),
    years: Optional[float] = typer.Option(None, help="Amortization length in years."),
    round_mode: str = typer.Option("none", "--round", help="'none' or 'cents'."),
    max_rows: int = typer.Option(
        0, help="Group years so at most this many rows print (0 for every year)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Dump the full schedule as JSON."),
) -> None:
    """
    Print the amortization schedule of a fixed-rate mortgage.
    """
    if round_mode not in ROUND_MODES:
        raise typer.BadParameter(
            f"expected one of {', '.join(ROUND_MODES)}", param_hint="--round"
        )
    provider: ConfigProvider = ctx.obj
    inputs = provider.reconcile(
        ScenarioInputs(
            purchase_price=price,
            down_payment_percentage=down_payment,
            mortgage_rate=rate,
            mortgage_length=years,
        )
    )
    result = calculate_mortgage_amortization(
        inputs.purchase_price,
        inputs.down_payment_percentage,
        inputs.mortgage_rate,
        inputs.mortgage_length,
        round_mode=round_mode,
    )

    if as_json:
        typer.echo(json.dumps(asdict(result), indent=2))
        return
    _echo_mortgage(inputs, result, max_rows)


@app.command()
def rent(
    ctx: typer.Context,
    monthly_rent: Optional[float] = typer.Argument(None, help="Starting monthly rent."),
    years: Optional[float] = typer.Option(None, help="Analysis period in years."),
    increase: Optional[float] = typer.Option(
        None, help="Annual rent increase in percent."
    ),
    increase_month: Optional[int] = typer.Option(
        None, help="Month (1-12) in which each yearly increase takes effect."
    ),
    max_rows: int = typer.Option(
        0, help="Group years so at most this many rows print (0 for every year)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Dump the projection as JSON."),
) -> None:
    """
    Print how much rent is paid each year of the analysis period.
    """
    provider: ConfigProvider = ctx.obj
    inputs = provider.reconcile(
        ScenarioInputs(
            monthly_rent=monthly_rent, analysis_years=years, rent_increase=increase
        )
    )
    result = calculate_monthly_rent_data(
        inputs.monthly_rent,
        int(inputs.analysis_years),
        inputs.rent_increase,
        increase_month=increase_month,
    )

    if as_json:
        typer.echo(json.dumps(asdict(result), indent=2))
        return
    _echo_rent(inputs, result, max_rows)


@app.command()
def scenario(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Query string, e.g. 'monthlyRent=2500&purchasePrice=750000'."),
    max_rows: int = typer.Option(
        10, help="Group years so at most this many rows print (0 for every year)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Dump inputs and projections as JSON."),
) -> None:
    """
    Restore a scenario from its query string and print both projections.
    """
    provider: ConfigProvider = ctx.obj
    inputs = decode_inputs(query, provider)
    mortgage_data = calculate_mortgage_amortization(
        inputs.purchase_price,
        inputs.down_payment_percentage,
        inputs.mortgage_rate,
        inputs.mortgage_length,
    )
    rent_data = calculate_monthly_rent_data(
        inputs.monthly_rent, int(inputs.analysis_years), inputs.rent_increase
    )

    if as_json:
        payload = {
            "inputs": asdict(inputs),
            "mortgage": asdict(mortgage_data),
            "rent": asdict(rent_data),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    _echo_mortgage(inputs, mortgage_data, max_rows)
    typer.echo("")
    _echo_rent(inputs, rent_data, max_rows)
    typer.echo("")
    typer.echo(f"Share link: ?{encode_inputs(inputs)}")


def _echo_mortgage(
    inputs: ScenarioInputs, result: MortgageAmortizationData, max_rows: int
) -> None:
    typer.echo(f"Purchase price: {format_currency(inputs.purchase_price)}")
    typer.echo(
        f"Down payment: {format_percentage(inputs.down_payment_percentage)}% "
        f"({format_currency(inputs.down_payment_amount)})"
    )
    typer.echo(f"Loan amount: {format_currency(result.loan_amount)}")
    typer.echo(
        f"Mortgage rate: {inputs.mortgage_rate:.2f}% over "
        f"{format_percentage(inputs.mortgage_length)} years"
    )
    typer.echo(f"Monthly payment: {format_currency(result.monthly_payment)}")
    typer.echo(f"Total principal: {format_currency(result.total_principal_paid)}")
    typer.echo(f"Total interest: {format_currency(result.total_interest_paid)}")
    typer.echo(f"Total paid: {format_currency(result.total_paid)}")
    typer.echo("")
    rows: List[List[str]] = [
        [
            row.year_range,
            format_currency(row.payment),
            format_currency(row.principal),
            format_currency(row.interest),
            format_currency(row.balance_end),
        ]
        for row in compress_mortgage_data(result, max_rows)
    ]
    _echo_table(["Year", "Payment", "Principal", "Interest", "Balance"], rows)


def _echo_rent(inputs: ScenarioInputs, result: MonthlyRentData, max_rows: int) -> None:
    typer.echo(f"Monthly rent: {format_currency(inputs.monthly_rent)}")
    typer.echo(f"Annual increase: {format_percentage(inputs.rent_increase)}%")
    typer.echo(f"Total rent paid: {format_currency(result.total_paid)}")
    typer.echo("")
    # compress_year_data folds everything into one row for max_rows <= 0.
    if max_rows <= 0:
        max_rows = len(result.years)
    rows = [
        [row.year_range, format_currency(row.total), format_currency(row.cumulative_total)]
        for row in compress_year_data(result.years, max_rows)
    ]
    _echo_table(["Year", "Rent", "Cumulative"], rows)


def _echo_table(header: List[str], rows: List[List[str]]) -> None:
    widths = [
        max(len(cell) for cell in column) for column in zip(header, *rows)
    ]
    for line in [header, *rows]:
        typer.echo(
            "  ".join(
                cell.ljust(width) if i == 0 else cell.rjust(width)
                for i, (cell, width) in enumerate(zip(line, widths))
            ).rstrip()
        )


if __name__ == "__main__":
    app()
