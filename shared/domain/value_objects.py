"""
Common Value Objects

Value objects used across multiple housing contexts:
- Money: Flat prices with currency
- DateRange: Inclusive application period of a project
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('SGD',)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative monetary amount with currency.
    """
    amount: Decimal
    currency: str = 'SGD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __str__(self):
        return f"{self.currency} {self.amount:,.2f}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents an application period from start_date to end_date, both
    inclusive. A single-day period has start_date == end_date.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Both ends are inclusive, so ranges that merely touch overlap.

        Examples:
            - DateRange(1 Jan, 31 Jan) overlaps with DateRange(15 Jan, 15 Feb) -> True
            - DateRange(1 Jan, 31 Jan) overlaps with DateRange(31 Jan, 5 Feb) -> True
            - DateRange(1 Jan, 31 Jan) overlaps with DateRange(1 Feb, 5 Feb) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return not (self.start_date > other.end_date) and not (other.start_date > self.end_date)

    def contains(self, check_date: date) -> bool:
        """Check if a date falls within this range (inclusive)"""
        return self.start_date <= check_date <= self.end_date

    @property
    def days(self) -> int:
        """Number of calendar days covered, counting both ends"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.strftime('%d/%m/%Y')} - {self.end_date.strftime('%d/%m/%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


def normalize_nric(value: str) -> str:
    """
    Canonical form of an NRIC identity key

    NRICs are compared case-insensitively everywhere, so the upper-cased,
    stripped form is what entities store and repositories look up.
    """
    if not value or not value.strip():
        raise ValueError("NRIC is required")
    return value.strip().upper()
