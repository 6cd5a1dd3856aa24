"""Utility functions for the mortgage calculator.

This module provides helpers for turning user input into loan parameters:
parsing amounts and percentages, deriving the principal from a purchase
price and down payment, converting a term in months to years and the
optional guard that rejects meaningless loans before they reach the engine.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, Overflow

from .data_models import InvalidLoanError, Loan, Number, to_decimal

_SUFFIXES = {"k": Decimal(1_000), "m": Decimal(1_000_000)}


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("300000"), thousands separators ("300,000") and
    shorthand with ``k``/``m`` suffixes (e.g. "300k" meaning 300_000).

    Raises
    ------
    ValueError
        If the string is not a number.
    """
    cleaned = str(value).strip().lower().replace(",", "")
    factor = Decimal(1)
    if cleaned[-1:] in _SUFFIXES:
        factor = _SUFFIXES[cleaned[-1]]
        cleaned = cleaned[:-1]
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value}")
    try:
        return amount * factor
    except Overflow as exc:
        raise ValueError(f"Amount out of range: {value}") from exc


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as "4.5" or "4.5%".

    The result stays in percent: "4.5%" gives ``Decimal("4.5")``.
    """
    cleaned = str(value).strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    try:
        percent = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
    if not percent.is_finite():
        raise ValueError(f"Invalid percentage: {value}")
    return percent


def principal_from_purchase(purchase: Number, down_percent: Number) -> Decimal:
    """Return the financed amount of a purchase after the down payment."""
    return to_decimal(purchase) * (1 - to_decimal(down_percent) / Decimal(100))


def years_from_months(months: int) -> int:
    """Convert a term in months to whole years."""
    years, remainder = divmod(months, 12)
    if remainder:
        raise ValueError(f"Amortization of {months} months is not a whole number of years")
    return years


def validate_loan(loan: Loan, extra_payment: Number = 0) -> None:
    """Reject inputs for which a schedule would be meaningless.

    The engine itself accepts anything and degrades gracefully; this guard is
    for callers that prefer an error.

    Raises
    ------
    InvalidLoanError
        If the principal, rate or extra payment is negative or the term is
        not positive.
    """
    if loan.principal < 0:
        raise InvalidLoanError(f"Principal must not be negative; got {loan.principal}")
    if loan.annual_rate < 0:
        raise InvalidLoanError(f"Interest rate must not be negative; got {loan.annual_rate}")
    if loan.amortization_years <= 0:
        raise InvalidLoanError(
            f"Amortization must be at least one year; got {loan.amortization_years}"
        )
    if to_decimal(extra_payment) < 0:
        raise InvalidLoanError(f"Extra payment must not be negative; got {extra_payment}")
