"""Mini README: Minor-unit helpers for exact monetary arithmetic.

Structure:
    * to_minor_units - convert boundary values (str/int/Decimal/float) to cents.
    * format_minor_units - render cents as a two decimal string.
    * to_percentage - parse a percentage into an exact ``Decimal``.
    * round_half_up - integer rounding of an exact ``Decimal``.

The engine never stores floats. Values enter through ``to_minor_units`` and
leave through ``format_minor_units``; everything in between is ``int``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import ErrorKind, LedgerValidationError

CENTS_PER_UNIT = 100
EPSILON_CENTS = 1
_TWO_PLACES = Decimal("0.01")


def _to_decimal(value: object, label: str) -> Decimal:
    if isinstance(value, bool):
        raise LedgerValidationError(ErrorKind.INVALID_AMOUNT, f"{label} must be numeric, got {value!r}")
    if isinstance(value, float):
        # str() keeps the shortest repr so 0.1 becomes Decimal("0.1").
        value = str(value)
    try:
        number = Decimal(value) if not isinstance(value, Decimal) else value
    except (InvalidOperation, TypeError, ValueError) as error:
        raise LedgerValidationError(
            ErrorKind.INVALID_AMOUNT, f"{label} must be numeric, got {value!r}"
        ) from error
    if not number.is_finite():
        raise LedgerValidationError(ErrorKind.INVALID_AMOUNT, f"{label} must be finite, got {value!r}")
    return number


def round_half_up(value: Decimal) -> int:
    """Round an exact decimal to the nearest integer, halves away from zero."""

    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_minor_units(value: object, label: str = "amount") -> int:
    """Convert a decimal currency value into integer cents.

    Integers are interpreted as whole currency units (``90`` -> ``9000``).
    Anything with more than two decimal places is rounded half-up.
    """

    number = _to_decimal(value, label)
    try:
        return round_half_up(number.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP) * CENTS_PER_UNIT)
    except InvalidOperation as error:
        raise LedgerValidationError(
            ErrorKind.INVALID_AMOUNT, f"{label} is too large to represent in cents, got {value!r}"
        ) from error


def to_percentage(value: object, label: str = "percentage") -> Decimal:
    return _to_decimal(value, label)


def format_minor_units(cents: int) -> str:
    """Render cents as ``"-12.50"`` style strings."""

    return str((Decimal(cents) / CENTS_PER_UNIT).quantize(_TWO_PLACES))


def is_trivial(cents: int) -> bool:
    """Return True when an amount sits below the one cent noise floor."""

    return abs(cents) < EPSILON_CENTS
