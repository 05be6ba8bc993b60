"""
Input validation for costing snapshots.

Primitive validators return (is_valid, error_message) tuples and prefix
the message with the field name. validate_tier_input and
validate_order_input collect those messages into a list so the caller can
raise one ValidationError carrying every problem.
"""

import math
from typing import Any, List, Optional, Tuple

from src.models.enums import TierShape

from .constants import (
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_INVALID_SHAPE,
    ERROR_INVALID_UNIT,
    ERROR_NO_TIER_SIZE,
    ERROR_REQUIRED_FIELD,
    ALL_UNITS,
    MAX_COST,
    MAX_MARKUP_PERCENT,
    MIN_COST,
)

_VALID_UNITS = {unit.lower() for unit in ALL_UNITS}


def _as_number(value: Any) -> Optional[float]:
    """Float value of an int, float, Decimal or numeric string; None if not a finite number."""
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """Fail on None, empty or whitespace-only strings."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_positive_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """Require a finite number greater than zero (volumes, yields)."""
    number = _as_number(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if number <= 0:
        return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
    return True, ""


def validate_non_negative_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """Require a finite number of zero or more (hours, servings, fees, quantities)."""
    number = _as_number(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if number < 0:
        return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
    return True, ""


def validate_number_range(
    value: Any, min_value: float, max_value: float, field_name: str = "Field"
) -> Tuple[bool, str]:
    """Require min_value <= value <= max_value, bounds inclusive."""
    number = _as_number(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if not min_value <= number <= max_value:
        return False, f"{field_name}: Must be between {min_value} and {max_value}"
    return True, ""


def validate_unit(unit: str, field_name: str = "Unit") -> Tuple[bool, str]:
    """Ingredient units are matched case-insensitively against ALL_UNITS."""
    if not unit:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    if unit.lower() not in _VALID_UNITS:
        return False, f"{field_name}: {ERROR_INVALID_UNIT}"
    return True, ""


def validate_shape(shape: Any, field_name: str = "Shape") -> Tuple[bool, str]:
    """Validate a tier shape string against TierShape."""
    try:
        TierShape(str(shape).strip().lower())
    except ValueError:
        return False, f"{field_name}: {ERROR_INVALID_SHAPE}"
    return True, ""


def _collect(errors: List[str], result: Tuple[bool, str]) -> None:
    is_valid, error = result
    if not is_valid:
        errors.append(error)


def validate_tier_input(tier: Any) -> Tuple[bool, list]:
    """
    Validate one tier before it is priced.

    A tier needs a size: either a stored volume or a diameter. Volume,
    servings, multipliers and assembly minutes may not be negative.

    Args:
        tier: TierInput to validate

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    if tier.volume_ml is None and not tier.diameter_cm:
        errors.append(ERROR_NO_TIER_SIZE)

    if tier.volume_ml is not None:
        _collect(errors, validate_positive_number(tier.volume_ml, "Volume"))

    if tier.diameter_cm is not None:
        _collect(errors, validate_non_negative_number(tier.diameter_cm, "Diameter"))

    _collect(errors, validate_non_negative_number(tier.servings, "Servings"))

    if tier.assembly_minutes is not None:
        _collect(errors, validate_non_negative_number(tier.assembly_minutes, "Assembly minutes"))

    for label, multiplier in (
        ("Batter multiplier", tier.batter_multiplier),
        ("Filling multiplier", tier.filling_multiplier),
        ("Frosting multiplier", tier.frosting_multiplier),
    ):
        if multiplier is not None:
            _collect(errors, validate_non_negative_number(multiplier, label))

    return len(errors) == 0, errors


def validate_order_input(snapshot: Any) -> Tuple[bool, list]:  # noqa: C901
    """
    Validate the order-level fields of a snapshot.

    Tiers are checked separately by validate_tier_input so each error can
    name its tier.

    Args:
        snapshot: OrderSnapshot to validate

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    if snapshot.baker_hours is not None:
        _collect(errors, validate_non_negative_number(snapshot.baker_hours, "Baker hours"))

    if snapshot.assistant_hours is not None:
        _collect(
            errors, validate_non_negative_number(snapshot.assistant_hours, "Assistant hours")
        )

    if snapshot.custom_topper_fee is not None:
        _collect(
            errors,
            validate_number_range(
                snapshot.custom_topper_fee, MIN_COST, MAX_COST, "Custom topper fee"
            ),
        )

    if snapshot.delivery_distance is not None:
        _collect(
            errors, validate_non_negative_number(snapshot.delivery_distance, "Delivery distance")
        )

    if snapshot.markup_percent is not None:
        _collect(
            errors,
            validate_number_range(
                snapshot.markup_percent, 0.0, MAX_MARKUP_PERCENT, "Markup percent"
            ),
        )

    if snapshot.discount is not None:
        _collect(
            errors, validate_non_negative_number(snapshot.discount.value, "Discount value")
        )

    for line in snapshot.decorations:
        _collect(
            errors,
            validate_non_negative_number(
                line.quantity, f"Decoration {line.technique_id} quantity"
            ),
        )

    return len(errors) == 0, errors


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """Strip payload text; blank text becomes None so it reads as "not given"."""
    if value is None:
        return None
    return str(value).strip() or None


def parse_int(value: Any, default: int = 0) -> int:
    """int(value), or default when value is None or not convertible."""
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default
