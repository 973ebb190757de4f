"""Command‑line interface for the amortisation calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute full amortisation schedules or view only the
summary figures. Results can be printed to the terminal as a table, TSV or
JSON, or exported to JSON/CSV files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import click

from .data_models import InterestMethod, InterestType, LoanTerms, Schedule
from .engine import compute_schedule
from .errors import CalculationError, InputParseError, InvalidLoanTermsError
from .formatter import (
    export_to_csv,
    export_to_json,
    print_schedule,
    print_summary,
    print_tsv,
    schedule_to_json,
)
from .utils import decimal_from_str, optional_decimal, parse_date, percent_to_fraction

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_terms_from_options(
    principal: str,
    rate: str,
    num_payments: int,
    disbursal_date: str,
    first_payment_date: str,
    first_capitalisation_date: str,
    interest_method: str,
    interest_type: str,
    fixed_payment: Optional[str] = None,
    balloon_payment: Optional[str] = None,
    option_fee: Optional[str] = None,
) -> LoanTerms:
    """Turn raw option strings into validated ``LoanTerms``.

    ``rate`` is given in percent. Any parse or validation failure is raised
    as ``click.BadParameter`` so nothing is computed from bad input.
    """
    try:
        terms = LoanTerms(
            principal=decimal_from_str(principal),
            annual_rate=percent_to_fraction(decimal_from_str(rate)),
            num_payments=num_payments,
            disbursal_date=parse_date(disbursal_date),
            first_payment_date=parse_date(first_payment_date),
            first_capitalisation_date=parse_date(first_capitalisation_date),
            interest_method=InterestMethod.from_str(interest_method),
            interest_type=InterestType.from_str(interest_type),
            fixed_payment=optional_decimal(fixed_payment),
            balloon_payment=optional_decimal(balloon_payment),
            option_fee=optional_decimal(option_fee),
        )
        terms.validate()
    except (InputParseError, InvalidLoanTermsError) as exc:
        raise click.BadParameter(str(exc)) from exc
    return terms


def _run(terms: LoanTerms) -> Schedule:
    logger.info(
        "amortising %s over %d payments (%s, %s)",
        terms.principal,
        terms.num_payments,
        terms.interest_method.name,
        terms.interest_type.name,
    )
    try:
        result = compute_schedule(terms)
    except CalculationError as exc:
        raise click.ClickException(str(exc)) from exc
    if not result.converged:
        raise click.ClickException("Payment solver failed to converge; no schedule produced")
    return result


def loan_options(func: Callable) -> Callable:
    """Attach the loan definition options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Principal amount"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--num-payments", "-n", "num_payments", required=True, type=click.IntRange(min=1), help="Number of monthly payments"),
        click.option("--disbursal-date", "-d", "disbursal_date", required=True, help="Disbursal date (YYYY-MM-DD)"),
        click.option("--first-payment-date", "-f", "first_payment_date", required=True, help="First payment date (YYYY-MM-DD)"),
        click.option("--first-capitalisation-date", "-c", "first_capitalisation_date", required=True, help="First interest capitalisation date (YYYY-MM-DD)"),
        click.option(
            "--interest-method",
            "-i",
            "interest_method",
            type=click.Choice(InterestMethod.tokens()),
            default=InterestMethod.ActualActual.name,
            show_default=True,
            help="Day-count convention",
        ),
        click.option(
            "--interest-type",
            "-t",
            "interest_type",
            type=click.Choice(InterestType.tokens()),
            default=InterestType.Simple.name,
            show_default=True,
            help="Whether the rate is simple or compounded monthly",
        ),
        click.option("--fixed-payment", "fixed_payment", help="Use this monthly payment instead of solving for one"),
        click.option("--balloon-payment", "balloon_payment", help="Final (balloon) payment amount"),
        click.option("--option-fee", "option_fee", help="One-off fee added to the final payment"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    "log_level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="LOAN_AMORTISE_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """A command‑line loan amortisation schedule calculator."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option(
    "--output-format",
    "-o",
    "output_format",
    type=click.Choice(["table", "tsv", "json"]),
    default="table",
    show_default=True,
    help="Terminal output format",
)
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    num_payments: int,
    disbursal_date: str,
    first_payment_date: str,
    first_capitalisation_date: str,
    interest_method: str,
    interest_type: str,
    fixed_payment: Optional[str],
    balloon_payment: Optional[str],
    option_fee: Optional[str],
    output_format: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortisation schedule."""
    terms = build_terms_from_options(
        principal,
        rate,
        num_payments,
        disbursal_date,
        first_payment_date,
        first_capitalisation_date,
        interest_method,
        interest_type,
        fixed_payment,
        balloon_payment,
        option_fee,
    )
    result = _run(terms)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result.payments)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    if output_format == "json":
        click.echo(schedule_to_json(result))
    elif output_format == "tsv":
        print_tsv(result.payments)
    else:
        print_summary(result.meta)
        print_schedule(result.payments)


@cli.command()
@loan_options
def summary(
    principal: str,
    rate: str,
    num_payments: int,
    disbursal_date: str,
    first_payment_date: str,
    first_capitalisation_date: str,
    interest_method: str,
    interest_type: str,
    fixed_payment: Optional[str],
    balloon_payment: Optional[str],
    option_fee: Optional[str],
) -> None:
    """Compute and print only the summary figures for a loan."""
    terms = build_terms_from_options(
        principal,
        rate,
        num_payments,
        disbursal_date,
        first_payment_date,
        first_capitalisation_date,
        interest_method,
        interest_type,
        fixed_payment,
        balloon_payment,
        option_fee,
    )
    result = _run(terms)
    first = result.payments[0]
    click.echo(f"Monthly payment    : {first.payment:.2f}")
    click.echo(f"Final payment      : {result.payments[-1].payment:.2f}")
    print_summary(result.meta)


if __name__ == "__main__":
    cli()
