"""DTO utilities for service layer.

Provides standardized money and quantity helpers for data transfer objects,
ensuring consistent JSON serialization and API contracts.

All money in the costing pipeline is carried as Decimal. Values are rounded
to cents only at the result boundary, never while accumulating.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENTS = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, float, int, str, None]


def to_decimal(value: Number) -> Decimal:
    """
    Convert a numeric value to Decimal without binary float artifacts.

    Floats go through str() so that 0.1 becomes Decimal("0.1") rather than
    Decimal("0.1000000000000000055511151231257827...").

    Returns:
        Decimal value; Decimal("0") if value is None.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value: Number) -> Decimal:
    """
    Round a money value to 2 decimal places, half away from zero.

    Examples:
        >>> round_currency(Decimal("65.3055"))
        Decimal('65.31')
        >>> round_currency(2.005)
        Decimal('2.01')
    """
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def round_quantity(value: Number, places: int = 2) -> Decimal:
    """Round a scaled quantity (grams, minutes, multipliers) half-up."""
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def cost_to_string(value: Number) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    This is the standard format for cost values in service DTOs,
    ensuring JSON serialization safety and consistent formatting.

    Args:
        value: Cost value (Decimal, float, int, str, or None)

    Returns:
        String formatted as "12.34" (2 decimal places).
        Returns "0.00" if value is None.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.35'
        >>> cost_to_string(12.3)
        '12.30'
        >>> cost_to_string(None)
        '0.00'
        >>> cost_to_string("15.999")
        '16.00'
    """
    if value is None:
        return "0.00"
    return str(round_currency(value))


def quantity_to_string(value: Number, places: int = 2) -> str:
    """Format a scaled quantity for display, e.g. '1030.00'."""
    if value is None:
        return "0"
    return str(round_quantity(value, places))
