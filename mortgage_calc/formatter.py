"""Output helpers for the mortgage calculator.

This module renders loans, payments and amortization schedules as fixed
width text. Every function writes to the stream it is given so the command
line can send the same output to the terminal or to a file.
"""

from __future__ import annotations

from decimal import Decimal
from itertools import islice
from typing import Dict, Iterable, List, Optional, TextIO

from .data_models import Loan, PaymentFrequency, PaymentRecord
from .engine import periodic_payment

BREAK_EVEN = "-" * 25 + " Break Even " + "-" * 25

SCHEDULE_HEADER = (
    "Period | Year | Num |  Payment  |  Extra  | Principal | Interest |    Value    "
)


def write_loan(loan: Loan, out: TextIO) -> None:
    """Write the loan parameters."""
    print(f"Principal:              {loan.principal:.2f}", file=out)
    print(f"Interest Rate (Annual): {loan.annual_rate:.2f}", file=out)
    print(f"Amortization (Years):   {loan.amortization_years}", file=out)


def write_payments(loan: Loan, out: TextIO) -> None:
    """Write the payment for every frequency."""
    for frequency in PaymentFrequency:
        label = f"Payment ({frequency.label}):"
        print(f"{label:22s}{periodic_payment(loan, frequency):.2f}", file=out)


def write_record(record: PaymentRecord, out: TextIO) -> None:
    """Write a single schedule record as a labelled block."""
    print(f"Year / Period: {record.year:02d}/{record.period_in_year:02d}", file=out)
    print(f"Value:         {record.remaining_balance:.2f}", file=out)
    print(f"Payment:       {record.scheduled_payment:.2f}", file=out)
    print(f"Extra:         {record.extra_payment:.2f}", file=out)
    print(f"Principal:     {record.principal_portion:.2f}", file=out)
    print(f"Interest:      {record.interest_portion:.2f}", file=out)


def _format_row(record: PaymentRecord) -> str:
    return (
        f"{record.period: 6d} | {record.year: 3d}  | {record.period_in_year: 3d} | "
        f"{record.scheduled_payment: 9.2f} | {record.extra_payment: 7.2f} | "
        f"{record.principal_portion: 9.2f} | {record.interest_portion: 8.2f} | "
        f"{record.remaining_balance: 11.2f}"
    )


def write_schedule(
    schedule: Iterable[PaymentRecord],
    out: TextIO,
    principal: Decimal,
    limit: Optional[int] = None,
) -> None:
    """Write the amortization schedule as a table followed by totals.

    Parameters
    ----------
    schedule: Iterable[PaymentRecord]
        The records to write.
    out: TextIO
        Destination stream.
    principal: Decimal
        Starting balance, shown on the row above the first period.
    limit: Optional[int]
        Write at most this many rows. Totals cover the rows written.
    """
    print(SCHEDULE_HEADER, file=out)
    print(f"       |      |     |           |         |           |          | {principal: 11.2f}", file=out)

    payments = Decimal("0")
    interest = Decimal("0")
    broke_even = False
    for record in islice(schedule, limit):
        # banner on both sides of the first break-even row
        at_break_even = not broke_even and record.principal_portion >= record.interest_portion
        if at_break_even:
            print(BREAK_EVEN, file=out)
        print(_format_row(record), file=out)
        if at_break_even:
            print(BREAK_EVEN, file=out)
            broke_even = True

        interest += record.interest_portion
        payments += record.principal_portion + record.extra_payment

    print(f"Payments:{payments: 12.2f}", file=out)
    print(f"Interest:{interest: 12.2f}", file=out)
    print(f"Total:   {payments + interest: 12.2f}", file=out)


def write_summary(summary: Dict[str, object], out: TextIO) -> None:
    """Write a schedule summary in a human-readable format."""
    print("Summary", file=out)
    print("-" * 62, file=out)
    print(f"Frequency          : {summary['frequency']}", file=out)
    print(f"Payment            : {summary['payment']:.2f}", file=out)
    print(f"Payments made      : {summary['payments_made']} of {summary['num_periods']}", file=out)
    if summary.get("periods_saved"):
        print(f"Periods saved      : {summary['periods_saved']}", file=out)
    if summary.get("total_extra"):
        print(f"Total extra        : {summary['total_extra']:.2f}", file=out)
    print(f"Total principal    : {summary['total_principal']:.2f}", file=out)
    print(f"Total interest     : {summary['total_interest']:.2f}", file=out)
    print(f"Total paid         : {summary['total_paid']:.2f}", file=out)
    if summary.get("break_even_period"):
        print(f"Break even period  : {summary['break_even_period']}", file=out)
    print("-" * 62, file=out)


def write_comparison(summaries: List[Dict[str, object]], out: TextIO) -> None:
    """Write summaries for several frequencies side by side."""
    print("Comparison", file=out)
    print("=" * 62, file=out)
    print(f"{'Metric':16s}" + "".join(f"{s['frequency']:>15s}" for s in summaries), file=out)
    for key in ("payment", "payments_made", "total_interest", "total_paid"):
        values = "".join(f"{s[key]:15.2f}" for s in summaries)
        print(f"{key:16s}{values}", file=out)
    print("=" * 62, file=out)
