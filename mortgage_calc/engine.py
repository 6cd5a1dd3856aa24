"""Core calculation engine for the mortgage calculator.

This module implements the amortization math for fixed-rate loans: the
periodic payment, the number of periods in the term and the period-by-period
schedule, optionally with a constant extra payment applied every period.
Schedules are produced as ``PaymentRecord`` objects; the engine performs no
I/O and never raises for numeric input.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import Dict, Iterable, Iterator, List, Optional

from .data_models import Loan, Number, PaymentFrequency, PaymentRecord, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _monthly_rate(loan: Loan) -> Decimal:
    return loan.annual_rate / Decimal(12) / Decimal(100)


def _negligible(rate: Decimal) -> bool:
    """True when ``1 + rate`` rounds to exactly 1."""
    return 1 + rate == 1


def _annuity_payment(principal: Decimal, rate: Decimal, periods: int) -> Decimal:
    """Return the level payment that amortizes ``principal`` over ``periods``.

    The formula is:

        payment = (r * P) / (1 - (1 + r)^-N)

    When the rate is zero, or too small to move ``1 + r`` at the working
    precision, the payment is ``P / N``. A term without any periods has
    nothing to spread the principal over and yields zero.
    """
    if periods <= 0:
        return ZERO
    if _negligible(rate):
        return principal / Decimal(periods)
    denominator = 1 - (1 + rate) ** -periods
    if denominator == 0:
        return principal / Decimal(periods)
    return (rate * principal) / denominator


def monthly_payment(loan: Loan) -> Decimal:
    """Return the monthly annuity payment of ``loan``."""
    return _annuity_payment(loan.principal, _monthly_rate(loan), loan.amortization_years * 12)


def periodic_payment(loan: Loan, frequency: PaymentFrequency) -> Decimal:
    """Return the payment due each period at ``frequency``.

    The payment is always sized as a monthly annuity and then split evenly
    across the sub-monthly periods: bi-weekly is half the monthly payment and
    weekly a quarter of it.
    """
    payment = monthly_payment(loan) / Decimal(frequency.divisor)
    logger.debug("%s payment for %s: %s", frequency.label, loan, payment)
    return payment


def num_periods(loan: Loan, frequency: PaymentFrequency) -> int:
    """Return the number of periods in the full term at ``frequency``.

    This is an upper bound on the schedule length; extra payments end the
    schedule earlier. A non-positive term gives a non-positive count.
    """
    return loan.amortization_years * frequency.periods_per_year


def _period_position(period: int, frequency: PaymentFrequency) -> tuple:
    """Return the 1-based ``(year, period_in_year)`` of ``period``."""
    year, offset = divmod(period - 1, frequency.periods_per_year)
    return year + 1, offset + 1


def iter_schedule(
    loan: Loan,
    frequency: PaymentFrequency,
    extra_payment: Number = ZERO,
) -> Iterator[PaymentRecord]:
    """Yield the amortization schedule of ``loan`` one period at a time.

    Interest accrues on the balance at the start of each period at the
    annual rate divided into ``12 * frequency.divisor`` parts. The scheduled
    payment is fixed for the whole loan, except in the final period where it
    is reduced by any overshoot so the balance lands exactly on zero.

    Iteration stops after ``num_periods`` periods or as soon as the balance
    reaches zero, whichever comes first. Zero principal or a non-positive
    term yields nothing.
    """
    extra = to_decimal(extra_payment)
    rate = loan.annual_rate / Decimal(12 * frequency.divisor) / Decimal(100)
    payment = periodic_payment(loan, frequency)
    last_period = num_periods(loan, frequency)

    balance = loan.principal
    period = 1
    while period <= last_period and balance > 0:
        interest = rate * balance
        scheduled = payment
        new_balance = balance - (scheduled + extra - interest)
        if new_balance < 0:
            # final period: shrink the payment by the overshoot
            scheduled += new_balance
            new_balance = ZERO

        year, period_in_year = _period_position(period, frequency)
        yield PaymentRecord(
            period=period,
            period_in_year=period_in_year,
            year=year,
            scheduled_payment=scheduled,
            extra_payment=extra,
            interest_portion=interest,
            principal_portion=scheduled - interest,
            remaining_balance=new_balance,
        )
        balance = new_balance
        period += 1

    if period - 1 < last_period:
        logger.debug("Loan paid off after %d of %d periods", period - 1, last_period)


def compute_schedule(
    loan: Loan,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    extra_payment: Number = ZERO,
) -> List[PaymentRecord]:
    """Compute the full amortization schedule of ``loan``.

    Parameters
    ----------
    loan: Loan
        The loan to amortize.
    frequency: PaymentFrequency
        How often payments are made.
    extra_payment: Decimal
        A constant additional principal payment applied every period.

    Returns
    -------
    List[PaymentRecord]
        One record per period, in order.
    """
    schedule = list(iter_schedule(loan, frequency, extra_payment))
    logger.debug("Computed %d %s periods", len(schedule), frequency.value)
    return schedule


def loan_value(loan: Loan, months: int) -> Decimal:
    """Return the remaining balance after ``months`` monthly payments.

    Uses the closed form

        B(n) = (1 + r)^n * P - ((1 + r)^n - 1) * c / r

    where ``c`` is the monthly payment. The balance never goes below zero.
    """
    principal = loan.principal
    rate = _monthly_rate(loan)
    payment = monthly_payment(loan)
    if _negligible(rate):
        value = principal - payment * Decimal(months)
    else:
        growth = (1 + rate) ** months
        value = growth * principal - (growth - 1) * payment / rate
    return value if value > 0 else ZERO


def find_break_even(records: Iterable[PaymentRecord]) -> Optional[PaymentRecord]:
    """Return the first record whose principal portion covers its interest."""
    for record in records:
        if record.principal_portion >= record.interest_portion:
            return record
    return None


def summarize_schedule(
    loan: Loan,
    frequency: PaymentFrequency,
    schedule: List[PaymentRecord],
) -> Dict[str, object]:
    """Aggregate a schedule into summary metrics.

    Principal totals include the extra payments, so ``total_paid`` is the
    whole cash outflow over the life of the loan.
    """
    total_principal = sum((r.principal_portion + r.extra_payment for r in schedule), ZERO)
    total_interest = sum((r.interest_portion for r in schedule), ZERO)
    total_extra = sum((r.extra_payment for r in schedule), ZERO)
    periods = num_periods(loan, frequency)
    break_even = find_break_even(schedule)

    return {
        "frequency": frequency.value,
        "payment": periodic_payment(loan, frequency),
        "num_periods": periods,
        "payments_made": len(schedule),
        "periods_saved": max(periods - len(schedule), 0),
        "total_principal": total_principal,
        "total_interest": total_interest,
        "total_extra": total_extra,
        "total_paid": total_principal + total_interest,
        "break_even_period": break_even.period if break_even else None,
    }


def compare_frequencies(loan: Loan, extra_payment: Number = ZERO) -> List[Dict[str, object]]:
    """Return one schedule summary per payment frequency."""
    summaries = []
    for frequency in PaymentFrequency:
        schedule = compute_schedule(loan, frequency, extra_payment)
        summaries.append(summarize_schedule(loan, frequency, schedule))
    return summaries
