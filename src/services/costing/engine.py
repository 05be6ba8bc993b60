"""
Costing engine: one entry point from an order snapshot to a CostingResult.

Pipeline (each stage reads only the snapshot and the catalog):
    1. validate tiers and order-level inputs, failing before any arithmetic
    2. resolve BATTER / FILLING / FROSTING recipes per tier
    3. aggregate scaled ingredients across the order
    4. accumulate labor by role (recipe, assembly, decoration, manual hours)
    5. price decorations, topper and delivery
    6. assemble suggested price, discount and final price

The engine never touches the database. Callers load a CostingCatalog once
(catalog_service) and pass it in, so the same snapshot and catalog always
yield an equal result.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from src.models.enums import RecipeType
from src.services.dto_utils import ZERO, round_currency, to_decimal
from src.services.exceptions import DeliveryZoneNotFound, InvalidTierError, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import ROLE_BAKER, ROLE_BAKERY_ASSISTANT
from src.utils.validators import validate_order_input, validate_tier_input

from .catalog import CostingCatalog
from .decoration_costing import cost_decorations
from .ingredient_aggregation import aggregate_ingredients
from .labor_aggregation import LaborAggregator
from .pricing import (
    DeliveryDetail,
    TopperDetail,
    assemble_price,
    calculate_delivery,
    calculate_topper_cost,
)
from .recipe_resolver import MultiplierSource, RecipeMatch, resolve_tier_recipes
from .result import CostingResult
from .snapshot import OrderSnapshot

logger = get_service_logger(__name__)


def validate_snapshot(snapshot: OrderSnapshot) -> None:
    """
    Reject a snapshot that cannot be priced.

    Raises:
        InvalidTierError: If a tier has no size or a negative volume/servings
        ValidationError: If hours, fees, markup or discount are negative
    """
    for tier in snapshot.tiers:
        is_valid, errors = validate_tier_input(tier)
        if not is_valid:
            raise InvalidTierError(tier.tier_index, errors)

    is_valid, errors = validate_order_input(snapshot)
    if not is_valid:
        raise ValidationError(errors)


def _resolve_delivery(
    snapshot: OrderSnapshot, catalog: CostingCatalog
) -> Optional[DeliveryDetail]:
    if not snapshot.is_delivery or snapshot.delivery_zone_id is None:
        return None
    zone = catalog.delivery_zone(snapshot.delivery_zone_id)
    if zone is None:
        raise DeliveryZoneNotFound(snapshot.delivery_zone_id)
    return calculate_delivery(zone, snapshot.delivery_distance)


def _resolve_topper(snapshot: OrderSnapshot, catalog: CostingCatalog) -> Optional[TopperDetail]:
    if not snapshot.topper_type:
        return None
    cost = calculate_topper_cost(
        snapshot.topper_type, snapshot.custom_topper_fee, catalog.standard_topper_fee
    )
    return TopperDetail(
        topper_type=snapshot.topper_type, topper_text=snapshot.topper_text, cost=cost
    )


def _match_warnings(snapshot: OrderSnapshot, matches: List[RecipeMatch]) -> List[str]:
    """Low-confidence resolutions worth surfacing to whoever reads the quote."""
    warnings = []
    for tier in snapshot.tiers:
        tier_matches = [m for m in matches if m.tier_index == tier.tier_index]
        if not any(m.recipe_type == RecipeType.BATTER for m in tier_matches):
            warnings.append(f"Tier {tier.tier_index}: no batter recipe in catalog")
    for match in matches:
        if match.multiplier_source == MultiplierSource.DEFAULT:
            warnings.append(
                f"Tier {match.tier_index}: {match.recipe.name} has no yield volume; "
                "multiplier defaulted to 1.00"
            )
    return warnings


def calculate_cost(snapshot: OrderSnapshot, catalog: CostingCatalog) -> CostingResult:
    """
    Compute the full cost breakdown for an order or quote.

    Transaction boundary: Pure computation (no database access).

    Args:
        snapshot: Normalized order or quote
        catalog: Immutable catalog snapshot

    Returns:
        CostingResult with every subtotal, rounded to cents

    Raises:
        InvalidTierError: If a tier cannot be priced
        ValidationError: If order-level inputs are negative or out of range
        DecorationTechniqueNotFound: If a decoration references an unknown technique
        DeliveryZoneNotFound: If a delivery order names an unknown zone
    """
    validate_snapshot(snapshot)
    settings = catalog.production_settings

    # Recipes and ingredients
    matches: List[RecipeMatch] = []
    for tier in snapshot.tiers:
        matches.extend(resolve_tier_recipes(tier, catalog))
    ingredient_lines, ingredient_cost = aggregate_ingredients(matches, catalog)

    # Production labor
    labor = LaborAggregator(catalog)
    for match in matches:
        if match.recipe.labor_minutes:
            labor.add_production(
                match.recipe.labor_minutes * match.multiplier, match.recipe.labor_role_id
            )
    for tier in snapshot.tiers:
        labor.add_production(tier.resolved_assembly_minutes(settings), tier.assembly_role_id)

    # Decorations
    decoration_lines = cost_decorations(
        snapshot.decorations, catalog, [tier.tier_index for tier in snapshot.tiers]
    )
    decoration_material_cost = sum((line.material_cost for line in decoration_lines), ZERO)
    for line in decoration_lines:
        labor.add_decoration(
            line.labor_minutes, line.labor_cost, line.labor_role_name, line.labor_role_id
        )

    # Manual adjustment hours
    labor.add_manual_hours(to_decimal(snapshot.baker_hours), ROLE_BAKER)
    labor.add_manual_hours(to_decimal(snapshot.assistant_hours), ROLE_BAKERY_ASSISTANT)
    labor_summary = labor.summarize()

    # Topper, delivery, price
    topper = _resolve_topper(snapshot, catalog)
    topper_cost = topper.cost if topper else ZERO
    delivery = _resolve_delivery(snapshot, catalog)
    delivery_cost = delivery.cost if delivery else ZERO

    markup_percent = (
        to_decimal(snapshot.markup_percent)
        if snapshot.markup_percent is not None
        else catalog.default_markup_percent
    )
    total_servings = snapshot.total_servings

    price = assemble_price(
        ingredient_cost=ingredient_cost,
        decoration_material_cost=decoration_material_cost,
        topper_cost=topper_cost,
        total_labor_cost=labor_summary.total_labor_cost,
        delivery_cost=delivery_cost,
        markup_percent=markup_percent,
        discount=snapshot.discount,
        total_servings=total_servings,
    )

    result = CostingResult(
        total_servings=total_servings,
        ingredient_cost=round_currency(ingredient_cost),
        decoration_material_cost=round_currency(decoration_material_cost),
        decoration_labor_cost=round_currency(labor_summary.decoration_labor_cost),
        topper_cost=round_currency(topper_cost),
        delivery_cost=round_currency(delivery_cost),
        base_labor_cost=round_currency(labor_summary.base_labor_cost),
        total_labor_cost=round_currency(labor_summary.total_labor_cost),
        total_cost_before_delivery=round_currency(price.total_cost_before_delivery),
        total_cost=round_currency(price.total_cost),
        markup_percent=markup_percent,
        markup_amount=price.markup_amount,
        suggested_price=price.suggested_price,
        discount_amount=price.discount_amount,
        final_price=price.final_price,
        cost_per_serving=price.cost_per_serving,
        suggested_price_per_serving=price.suggested_price_per_serving,
        ingredients=tuple(ingredient_lines),
        decorations=tuple(decoration_lines),
        labor_breakdown=labor_summary.lines,
        recipe_matches=tuple(matches),
        topper=topper,
        delivery=delivery,
        discount=snapshot.discount,
        warnings=tuple(_match_warnings(snapshot, matches)),
    )

    log_operation(
        logger,
        operation="calculate_cost",
        outcome="success",
        level=logging.DEBUG,
        tier_count=len(snapshot.tiers),
        decoration_count=len(decoration_lines),
        total_cost=str(result.total_cost),
        final_price=str(result.final_price),
    )
    return result


def apply_price_adjustment(result: CostingResult, adjustment: Optional[Decimal]) -> CostingResult:
    """
    Add a manual order price adjustment to final_price.

    Only final_price moves; per-serving figures stay as calculated.
    """
    amount = round_currency(to_decimal(adjustment))
    if amount == ZERO:
        return result
    return replace(
        result,
        price_adjustment=amount,
        final_price=round_currency(result.final_price + amount),
    )
