"""
Costing service - order and quote entry points around the costing engine.

Both entry points normalize a request payload into the same OrderSnapshot
and call the same calculate_cost(). That shared path is what keeps order
and quote prices identical for identical inputs; the only difference is
that an order may carry a manual price_adjustment added to final_price.

Payload keys (snake_case):
    tiers: [{tier_size_id, tier_index, batter_recipe_id, batter_multiplier,
             filling_recipe_id, filling_multiplier, frosting_recipe_id,
             frosting_multiplier, flavor, filling, finish_type}]
    decorations: [{decoration_technique_id, quantity, unit_override, tier_indices}]
    is_delivery, delivery_zone_id, delivery_distance,
    baker_hours, assistant_hours,
    topper_type, topper_text, custom_topper_fee,
    markup_percent, discount_type, discount_value, discount_reason,
    price_adjustment (orders only)
"""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from src.models.enums import DiscountType
from src.services import catalog_service
from src.services.costing import (
    CostingCatalog,
    CostingResult,
    DecorationLine,
    Discount,
    OrderSnapshot,
    TierInput,
    apply_price_adjustment,
    calculate_cost,
)
from src.services.database import session_scope
from src.services.dto_utils import to_decimal
from src.services.exceptions import TierSizeNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import ERROR_REQUIRED_FIELD
from src.utils.validators import parse_int, sanitize_string

logger = get_service_logger(__name__)

KIND_QUOTE = "quote"
KIND_ORDER = "order"


def _optional_decimal(value: Any) -> Optional[Decimal]:
    """Missing, empty and zero values are treated as absent."""
    if value is None or value == "":
        return None
    decimal_value = to_decimal(value)
    return decimal_value if decimal_value != 0 else None


def _optional_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def build_tier(data: Mapping[str, Any], catalog: CostingCatalog, position: int = 1) -> TierInput:
    """
    Build a TierInput from a payload tier and its tier-size row.

    The payload's tier_index is kept as given (0 included); a tier without
    one is numbered by its 1-based position in the payload.

    Raises:
        ValidationError: If tier_size_id is missing
        TierSizeNotFound: If tier_size_id is not in the catalog
    """
    tier_size_id = _optional_id(data.get("tier_size_id"))
    if tier_size_id is None:
        raise ValidationError([f"Tier size: {ERROR_REQUIRED_FIELD}"])
    tier_size = catalog.tier_size(tier_size_id)
    if tier_size is None:
        raise TierSizeNotFound(tier_size_id)

    return TierInput(
        tier_index=parse_int(data.get("tier_index"), position),
        size_name=tier_size.name,
        shape=tier_size.shape,
        diameter_cm=tier_size.diameter_cm,
        length_cm=tier_size.length_cm,
        height_cm=tier_size.height_cm,
        volume_ml=tier_size.volume_ml,
        servings=tier_size.servings,
        batter_recipe_id=_optional_id(data.get("batter_recipe_id")),
        filling_recipe_id=_optional_id(data.get("filling_recipe_id")),
        frosting_recipe_id=_optional_id(data.get("frosting_recipe_id")),
        batter_multiplier=_optional_decimal(data.get("batter_multiplier")),
        filling_multiplier=_optional_decimal(data.get("filling_multiplier")),
        frosting_multiplier=_optional_decimal(data.get("frosting_multiplier")),
        flavor=sanitize_string(data.get("flavor")),
        filling=sanitize_string(data.get("filling")),
        finish_type=sanitize_string(data.get("finish_type")),
        assembly_minutes=tier_size.assembly_minutes,
        assembly_role_id=tier_size.assembly_role_id,
    )


def build_decoration(data: Mapping[str, Any]) -> DecorationLine:
    technique_id = data.get("decoration_technique_id", data.get("technique_id"))
    if technique_id is None:
        raise ValidationError([f"Decoration technique: {ERROR_REQUIRED_FIELD}"])
    quantity = data.get("quantity")
    return DecorationLine(
        technique_id=int(technique_id),
        quantity=to_decimal(quantity) if quantity else Decimal("1"),
        unit_override=sanitize_string(data.get("unit_override")),
        tier_indices=tuple(int(i) for i in (data.get("tier_indices") or ())),
    )


def build_discount(payload: Mapping[str, Any]) -> Optional[Discount]:
    """
    Discount from discount_type / discount_value / discount_reason.

    Raises:
        ValidationError: If discount_type is not PERCENT or FIXED
    """
    discount_type = sanitize_string(payload.get("discount_type"))
    value = _optional_decimal(payload.get("discount_value"))
    if discount_type is None or value is None:
        return None
    try:
        parsed_type = DiscountType(discount_type.upper())
    except ValueError:
        raise ValidationError([f"Discount type: must be PERCENT or FIXED, got {discount_type!r}"])
    return Discount(
        discount_type=parsed_type,
        value=value,
        reason=sanitize_string(payload.get("discount_reason")),
    )


def build_snapshot(payload: Mapping[str, Any], catalog: CostingCatalog) -> OrderSnapshot:
    """
    Normalize an order or quote payload into an OrderSnapshot.

    Transaction boundary: Pure computation (no database access).

    Args:
        payload: Request mapping (see module docstring for keys)
        catalog: Catalog snapshot used to resolve tier sizes

    Returns:
        OrderSnapshot

    Raises:
        TierSizeNotFound: If a tier references an unknown tier size
        ValidationError: If a decoration or discount is malformed
    """
    markup = payload.get("markup_percent")
    return OrderSnapshot(
        tiers=[
            build_tier(tier, catalog, position)
            for position, tier in enumerate(payload.get("tiers") or (), start=1)
        ],
        decorations=[build_decoration(dec) for dec in payload.get("decorations") or ()],
        is_delivery=bool(payload.get("is_delivery")),
        delivery_zone_id=_optional_id(payload.get("delivery_zone_id")),
        delivery_distance=_optional_decimal(payload.get("delivery_distance")),
        baker_hours=_optional_decimal(payload.get("baker_hours")),
        assistant_hours=_optional_decimal(payload.get("assistant_hours")),
        topper_type=sanitize_string(payload.get("topper_type")),
        topper_text=sanitize_string(payload.get("topper_text")),
        custom_topper_fee=_optional_decimal(payload.get("custom_topper_fee")),
        markup_percent=None if markup is None or markup == "" else to_decimal(markup),
        discount=build_discount(payload),
    )


def calculate_quote_cost(payload: Mapping[str, Any], catalog: CostingCatalog) -> CostingResult:
    """
    Price a draft quote.

    Transaction boundary: Pure computation (no database access).

    A quote must have at least one tier. price_adjustment is ignored on
    this path; quotes always report an adjustment of 0.

    Raises:
        ValidationError: If the quote has no tiers
        TierSizeNotFound, DecorationTechniqueNotFound, DeliveryZoneNotFound,
        InvalidTierError: From snapshot building and the engine
    """
    if not payload.get("tiers"):
        raise ValidationError([f"Tiers: {ERROR_REQUIRED_FIELD}"])

    result = calculate_cost(build_snapshot(payload, catalog), catalog)
    log_operation(
        logger,
        operation="calculate_quote_cost",
        outcome="success",
        level=logging.DEBUG,
        final_price=str(result.final_price),
    )
    return result


def calculate_order_cost(payload: Mapping[str, Any], catalog: CostingCatalog) -> CostingResult:
    """
    Price an order, adding the optional price_adjustment to final_price.

    Transaction boundary: Pure computation (no database access).

    With no adjustment the result equals calculate_quote_cost() for the
    same payload.
    """
    result = calculate_cost(build_snapshot(payload, catalog), catalog)
    result = apply_price_adjustment(result, payload.get("price_adjustment"))
    log_operation(
        logger,
        operation="calculate_order_cost",
        outcome="success",
        level=logging.DEBUG,
        final_price=str(result.final_price),
        price_adjustment=str(result.price_adjustment),
    )
    return result


def calculate(
    payload: Mapping[str, Any], catalog: CostingCatalog, kind: str = KIND_QUOTE
) -> CostingResult:
    """Dispatch to the order or quote path by kind."""
    if kind == KIND_ORDER:
        return calculate_order_cost(payload, catalog)
    if kind == KIND_QUOTE:
        return calculate_quote_cost(payload, catalog)
    raise ValidationError([f"Kind: must be '{KIND_ORDER}' or '{KIND_QUOTE}', got {kind!r}"])


def calculate_cost_from_database(
    payload: Mapping[str, Any],
    kind: str = KIND_QUOTE,
    session: Optional[Session] = None,
) -> CostingResult:
    """
    Load the catalog from the database, then price the payload.

    Transaction boundary: Read-only operation.
    Uses the session=None pattern for transactional composition. The
    catalog is read once; pricing runs on the detached snapshot.

    Args:
        payload: Order or quote payload
        kind: "quote" or "order"
        session: Optional database session

    Returns:
        CostingResult

    Raises:
        DatabaseError: If the catalog cannot be loaded
    """
    if session is not None:
        catalog = catalog_service.load_costing_catalog(session=session)
    else:
        with session_scope() as sess:
            catalog = catalog_service.load_costing_catalog(session=sess)
    return calculate(payload, catalog, kind)
