"""Command-line interface for the mortgage calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can print the payment for every frequency, the full
amortization schedule, a summary of the schedule or a comparison across
frequencies. Schedules can be written to the terminal, to a text file or
exported to JSON/CSV. Every option can also be set through the environment
as ``MORTGAGE_<COMMAND>_<OPTION>``.
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .data_models import CalculatorOptions, Loan, PaymentFrequency, PaymentRecord
from .engine import compare_frequencies, compute_schedule, loan_value, summarize_schedule
from .formatter import (
    write_comparison,
    write_loan,
    write_payments,
    write_record,
    write_schedule,
    write_summary,
)
from .log import setup_logging
from .utils import (
    parse_amount,
    parse_percent,
    principal_from_purchase,
    validate_loan,
    years_from_months,
)

logger = logging.getLogger(__name__)


def resolve_frequency(monthly: bool, biweekly: bool, weekly: bool) -> PaymentFrequency:
    """Pick the payment frequency from the command-line switches.

    Bi-weekly wins over weekly, which wins over the monthly default.
    """
    if biweekly:
        return PaymentFrequency.BIWEEKLY
    if weekly:
        return PaymentFrequency.WEEKLY
    return PaymentFrequency.MONTHLY


def build_options(
    principal: Optional[str],
    purchase: Optional[str],
    down_percent: Optional[str],
    amortization: Optional[int],
    amortization_months: Optional[int],
    interest_rate: str,
    extra_payment: str,
    monthly: bool = True,
    biweekly: bool = False,
    weekly: bool = False,
    limit: Optional[int] = None,
    output: Optional[str] = None,
) -> CalculatorOptions:
    """Turn raw option values into validated ``CalculatorOptions``.

    A purchase price with a positive down payment percentage overrides the
    principal, and a term in months overrides the term in years.
    """
    try:
        principal_value = parse_amount(principal) if principal else Decimal("0")
        if purchase and down_percent:
            purchase_value = parse_amount(purchase)
            down_value = parse_percent(down_percent)
            if purchase_value > 0 and down_value > 0:
                principal_value = principal_from_purchase(purchase_value, down_value)
        years = amortization or 0
        if amortization_months:
            years = years_from_months(amortization_months)
        loan = Loan(principal_value, parse_percent(interest_rate), years)
        extra = parse_amount(extra_payment)
        validate_loan(loan, extra)
    except (ValueError, ArithmeticError) as exc:
        raise click.BadParameter(str(exc))

    if limit is not None and limit < 0:
        raise click.BadParameter(f"Row limit must not be negative; got {limit}")

    options = CalculatorOptions(
        loan=loan,
        frequency=resolve_frequency(monthly, biweekly, weekly),
        extra_payment=extra,
        limit=limit or None,
        output=Path(output) if output else None,
    )
    logger.debug("Resolved options: %s", options)
    return options


def record_to_dict(record: PaymentRecord) -> Dict[str, Any]:
    """Convert a schedule record into a JSON-serialisable dictionary."""
    return {
        "period": record.period,
        "year": record.year,
        "period_in_year": record.period_in_year,
        "payment": float(record.scheduled_payment),
        "extra": float(record.extra_payment),
        "principal": float(record.principal_portion),
        "interest": float(record.interest_portion),
        "balance": float(record.remaining_balance),
    }


def _jsonable(summary: Dict[str, object]) -> Dict[str, object]:
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in summary.items()}


def export_to_json(path: Path, schedule: List[PaymentRecord], summary: Dict[str, object]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": _jsonable(summary), "schedule": [record_to_dict(r) for r in schedule]}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PaymentRecord]) -> None:
    """Export schedule to a CSV file."""
    header = ["Period", "Year", "Num", "Payment", "Extra", "Principal", "Interest", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in schedule:
            writer.writerow(
                [
                    r.period,
                    r.year,
                    r.period_in_year,
                    float(r.scheduled_payment),
                    float(r.extra_payment),
                    float(r.principal_portion),
                    float(r.interest_portion),
                    float(r.remaining_balance),
                ]
            )


_LOAN_OPTIONS = [
    click.option("--principal", "-p", "principal", help="Loan principal"),
    click.option("--purchase", "-s", "purchase", help="Purchase price"),
    click.option("--down-percent", "-d", "down_percent", help="Down payment percentage"),
    click.option("--amortization", "--ay", "amortization", type=int, help="Amortization years"),
    click.option(
        "--amortization-months", "--am", "amortization_months", type=int, help="Amortization months"
    ),
    click.option(
        "--interest-rate", "-i", "interest_rate", default="3", show_default=True,
        help="Annual interest rate (percent)",
    ),
    click.option(
        "--extra-payment", "--ep", "extra_payment", default="0", show_default=True,
        help="Extra payment per period",
    ),
    click.option("--monthly", "monthly", is_flag=True, default=True, help="Monthly payments (default)"),
    click.option("--biweekly", "biweekly", is_flag=True, help="Bi-weekly payments"),
    click.option("--weekly", "weekly", is_flag=True, help="Weekly payments"),
]


def loan_options(func):
    """Attach the options that describe a loan to a command."""
    for option in reversed(_LOAN_OPTIONS):
        func = option(func)
    return func


@click.group(context_settings={"auto_envvar_prefix": "MORTGAGE"})
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool) -> None:
    """A command-line mortgage calculator for fixed-rate loans."""
    setup_logging("DEBUG" if verbose else "WARNING")


@cli.command()
@loan_options
def payment(**params: Any) -> None:
    """Print the loan and its payment for every frequency."""
    options = build_options(**params)
    out = sys.stdout
    write_loan(options.loan, out)
    print(file=out)
    write_payments(options.loan, out)


@cli.command()
@loan_options
@click.option("--limit", "-n", "limit", type=int, help="Number of periods to print")
@click.option("--output", "-f", "output", type=str, help="Output file path (.json, .csv or text)")
@click.option("--period", "period", type=int, help="Print only this period in detail")
def schedule(period: Optional[int], **params: Any) -> None:
    """Compute and print the full amortization schedule."""
    options = build_options(**params)
    loan = options.loan
    records = compute_schedule(loan, options.frequency, options.extra_payment)
    if period is not None:
        if not 1 <= period <= len(records):
            raise click.BadParameter(
                f"Period must be between 1 and {len(records)}; got {period}", param_hint="--period"
            )
        write_record(records[period - 1], sys.stdout)
        return
    path = options.output
    if path is None:
        out = sys.stdout
        write_loan(loan, out)
        print(file=out)
        write_schedule(records, out, loan.principal, options.limit)
        return

    suffix = path.suffix.lower()
    if suffix == ".json":
        export_to_json(path, records, summarize_schedule(loan, options.frequency, records))
    elif suffix == ".csv":
        export_to_csv(path, records)
    else:
        with path.open("w", encoding="utf-8") as f:
            write_loan(loan, f)
            print(file=f)
            write_schedule(records, f, loan.principal, options.limit)
    click.echo(f"Schedule exported to {path}")


@cli.command()
@loan_options
@click.option("--output", "-f", "output", type=str, help="Output file path (.json)")
def summary(**params: Any) -> None:
    """Compute and print only the summary of the schedule."""
    options = build_options(**params)
    loan = options.loan
    records = compute_schedule(loan, options.frequency, options.extra_payment)
    summary_data = summarize_schedule(loan, options.frequency, records)
    if options.output is None:
        write_summary(summary_data, sys.stdout)
        return
    if options.output.suffix.lower() != ".json":
        raise click.BadParameter("Summary export must use .json extension")
    with options.output.open("w", encoding="utf-8") as f:
        json.dump({"summary": _jsonable(summary_data)}, f, indent=2)
    click.echo(f"Summary exported to {options.output}")


@cli.command()
@loan_options
def compare(**params: Any) -> None:
    """Compare the schedule totals of every payment frequency."""
    options = build_options(**params)
    write_comparison(compare_frequencies(options.loan, options.extra_payment), sys.stdout)


@cli.command()
@loan_options
@click.option("--months", "-m", "months", type=int, required=True, help="Monthly payments made so far")
def balance(months: int, **params: Any) -> None:
    """Print the balance left after a number of monthly payments."""
    if months < 0:
        raise click.BadParameter(f"Months must not be negative; got {months}", param_hint="--months")
    options = build_options(**params)
    click.echo(f"Balance after {months} months: {loan_value(options.loan, months):.2f}")


if __name__ == "__main__":
    cli()
