"""Data models for the mortgage calculator.

This module defines the value types shared by the engine, the formatter and
the command-line interface: the loan itself, the payment frequency, the
records of a generated schedule and the resolved calculator options. Using
frozen dataclasses keeps these values immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional, Union

Number = Union[Decimal, int, float, str]


class InvalidLoanError(ValueError):
    """Raised by the optional input guard when loan inputs are meaningless."""


def to_decimal(value: Number) -> Decimal:
    """Return ``value`` as a ``Decimal``.

    Floats go through ``str`` so that ``3.0`` becomes ``Decimal("3.0")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class PaymentFrequency(Enum):
    """How often a payment is made.

    ``divisor`` splits the monthly payment (and the monthly rate) into
    sub-monthly periods; ``periods_per_year`` bounds the schedule and drives
    the year numbering. The two are deliberately independent.
    """

    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"

    @property
    def divisor(self) -> int:
        return _DIVISORS[self]

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_DIVISORS = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.BIWEEKLY: 2,
    PaymentFrequency.WEEKLY: 4,
}

_PERIODS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.WEEKLY: 52,
}

_LABELS = {
    PaymentFrequency.MONTHLY: "Monthly",
    PaymentFrequency.BIWEEKLY: "Bi-Weekly",
    PaymentFrequency.WEEKLY: "Weekly",
}


@dataclass(frozen=True)
class Loan:
    """A fixed-rate loan.

    Attributes
    ----------
    principal: Decimal
        The original loan amount.
    annual_rate: Decimal
        Nominal annual interest rate in percent (``3.0`` means 3 %).
    amortization_years: int
        Loan term in years.

    No validation happens here; see ``utils.validate_loan`` for the optional
    guard used by the command line.
    """

    principal: Decimal
    annual_rate: Decimal
    amortization_years: int

    def __post_init__(self) -> None:
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "principal", to_decimal(self.principal))
        object.__setattr__(self, "annual_rate", to_decimal(self.annual_rate))
        object.__setattr__(self, "amortization_years", int(self.amortization_years))


@dataclass(frozen=True)
class PaymentRecord:
    """One period of an amortization schedule.

    ``principal_portion`` is ``scheduled_payment - interest_portion`` and
    never includes ``extra_payment``; the extra payment only reduces
    ``remaining_balance``.
    """

    period: int
    period_in_year: int
    year: int
    scheduled_payment: Decimal
    extra_payment: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class CalculatorOptions:
    """Resolved inputs of a single calculator invocation."""

    loan: Loan
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    extra_payment: Decimal = Decimal("0")
    limit: Optional[int] = None  # rows of the schedule to print
    output: Optional[Path] = None  # None means stdout
