"""
Conversion between major currency units (rupees) and the provider's integer
minor units (paise).

Amounts go through Decimal(str(amount)) so a float such as 1.005 is rounded
as written rather than as its binary approximation.
"""

from decimal import ROUND_HALF_UP, Decimal
from numbers import Real

MINOR_UNITS_PER_MAJOR = 100


def is_positive_amount(amount) -> bool:
    """True for a finite real number above zero. Booleans are not amounts."""
    if isinstance(amount, bool) or not isinstance(amount, Real):
        return False
    return Decimal(str(amount)).is_finite() and amount > 0


def to_minor_units(amount: float) -> int:
    """199.999 -> 20000, 100 -> 10000 (round half up)."""
    minor = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(minor.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(minor: int) -> float:
    return float(Decimal(minor) / MINOR_UNITS_PER_MAJOR)


# bookings.amount is NUMERIC(12, 2)
MAX_AMOUNT = Decimal(10) ** 10


def fits_amount_column(amount) -> bool:
    """At least one minor unit and below 10^10 once rounded to minor units."""
    if not is_positive_amount(amount):
        return False
    minor = to_minor_units(amount)
    return 1 <= minor < MAX_AMOUNT * MINOR_UNITS_PER_MAJOR


def round_to_minor_units(amount: float) -> float:
    """199.999 -> 200.0, so the stored and echoed amount agree."""
    return from_minor_units(to_minor_units(amount))
