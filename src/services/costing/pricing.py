"""
Pricing calculations.

All markup, discount, delivery and per-serving math lives here so quotes
and orders cannot drift apart. Money is Decimal throughout; amounts are
rounded half-up to cents at the points listed in assemble_price().

Fixed order of operations:
    1. total_cost_before_delivery = ingredients + decoration material
                                    + topper + total labor
    2. suggested_price = round(total_cost_before_delivery × (1 + markup))
    3. total_cost      = total_cost_before_delivery + delivery
    4. discount_amount = against suggested_price only
    5. final_price     = suggested_price − discount_amount + delivery
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from src.models.enums import DiscountType, RecipeType
from src.services.dto_utils import ZERO, Number, round_currency, round_quantity, to_decimal
from src.utils.constants import RECIPE_VOLUME_FACTORS, TOPPER_CUSTOM, TOPPER_NONE

from .catalog import DeliveryZoneEntry
from .snapshot import Discount

ONE = Decimal("1")
HUNDRED = Decimal("100")

__all__ = [
    "round_currency",
    "calculate_markup",
    "calculate_suggested_price",
    "calculate_discount_amount",
    "calculate_pricing",
    "calculate_price_per_serving",
    "adjust_suggested_price",
    "calculate_recipe_multiplier",
    "calculate_topper_cost",
    "calculate_delivery",
    "assemble_price",
    "PricingBreakdown",
    "DeliveryDetail",
    "TopperDetail",
    "PriceAssembly",
]


def calculate_markup(cost: Number, markup_percent: Number) -> Decimal:
    """Markup amount in dollars (markup_percent is a fraction, 0.7 = 70%)."""
    return round_currency(to_decimal(cost) * to_decimal(markup_percent))


def calculate_suggested_price(cost: Number, markup_percent: Number) -> Decimal:
    """Cost plus markup, rounded to cents."""
    return round_currency(to_decimal(cost) * (ONE + to_decimal(markup_percent)))


def calculate_discount_amount(
    price: Number,
    discount_type: Optional[Union[DiscountType, str]],
    discount_value: Number,
) -> Decimal:
    """
    Discount in dollars.

    PERCENT takes value% of price; FIXED is the value itself. No type or a
    zero value means no discount.
    """
    value = to_decimal(discount_value)
    if not discount_type or value == ZERO:
        return round_currency(ZERO)
    if DiscountType(discount_type) == DiscountType.PERCENT:
        return round_currency(to_decimal(price) * value / HUNDRED)
    return round_currency(value)


@dataclass(frozen=True)
class PricingBreakdown:
    suggested_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    markup_amount: Decimal


def calculate_pricing(
    total_cost_before_delivery: Number,
    markup_percent: Number,
    discount_type: Optional[Union[DiscountType, str]] = None,
    discount_value: Number = None,
    delivery_cost: Number = ZERO,
) -> PricingBreakdown:
    """
    Suggested price, discount and final price for a cost.

    Delivery is added after the discount, so it is never discounted and
    never marked up.
    """
    cost = to_decimal(total_cost_before_delivery)
    suggested = calculate_suggested_price(cost, markup_percent)
    discount = calculate_discount_amount(suggested, discount_type, discount_value)
    final = round_currency(suggested - discount + to_decimal(delivery_cost))
    return PricingBreakdown(
        suggested_price=suggested,
        discount_amount=discount,
        final_price=final,
        markup_amount=round_currency(suggested - cost),
    )


def calculate_price_per_serving(total_price: Number, servings: int) -> Decimal:
    """Price per serving; 0 when there are no servings."""
    if not servings or servings <= 0:
        return round_currency(ZERO)
    return round_currency(to_decimal(total_price) / Decimal(servings))


def adjust_suggested_price(
    current_suggested_price: Number, cost_difference: Number, markup_percent: Number
) -> Decimal:
    """New suggested price after a cost change, marking up only the difference."""
    return round_currency(
        to_decimal(current_suggested_price)
        + to_decimal(cost_difference) * (ONE + to_decimal(markup_percent))
    )


def calculate_recipe_multiplier(
    recipe_yield_volume_ml: Optional[float],
    tier_volume_ml: Optional[float],
    recipe_type: Union[RecipeType, str],
) -> Decimal:
    """
    Scale factor for a recipe so it fills its share of the tier.

    needed = tier volume × volume factor (BATTER 1.0, FROSTING 0.36,
    FILLING 0.12); multiplier = needed / recipe yield, rounded to 2 places.
    Without a yield or a tier volume the multiplier is 1.0.
    """
    if not recipe_yield_volume_ml or not tier_volume_ml:
        return Decimal("1.00")
    factor = Decimal(RECIPE_VOLUME_FACTORS.get(RecipeType(recipe_type).value, "1.0"))
    needed = to_decimal(tier_volume_ml) * factor
    return round_quantity(needed / to_decimal(recipe_yield_volume_ml), 2)


@dataclass(frozen=True)
class TopperDetail:
    topper_type: str
    topper_text: Optional[str]
    cost: Decimal


def calculate_topper_cost(
    topper_type: Optional[str],
    custom_topper_fee: Number,
    standard_topper_fee: Number,
) -> Decimal:
    """
    Topper cost: nothing for no topper, the stored fee verbatim for a
    custom topper, the standard fee for anything else.
    """
    if not topper_type or topper_type.strip().lower() in ("", TOPPER_NONE):
        return ZERO
    if topper_type.strip().lower() == TOPPER_CUSTOM:
        return to_decimal(custom_topper_fee)
    return to_decimal(standard_topper_fee)


@dataclass(frozen=True)
class DeliveryDetail:
    zone_id: int
    zone_name: str
    base_fee: Decimal
    per_mile_fee: Decimal
    distance_miles: Decimal
    cost: Decimal


def calculate_delivery(zone: DeliveryZoneEntry, distance_miles: Number = None) -> DeliveryDetail:
    """base_fee + per_mile_fee × distance; distance defaults to the zone's own."""
    if distance_miles is None:
        distance_miles = zone.distance_miles
    distance = to_decimal(distance_miles)
    per_mile = zone.per_mile_fee if zone.per_mile_fee is not None else ZERO
    return DeliveryDetail(
        zone_id=zone.id,
        zone_name=zone.name,
        base_fee=zone.base_fee,
        per_mile_fee=per_mile,
        distance_miles=distance,
        cost=zone.base_fee + per_mile * distance,
    )


@dataclass(frozen=True)
class PriceAssembly:
    total_cost_before_delivery: Decimal
    total_cost: Decimal
    markup_percent: Decimal
    markup_amount: Decimal
    suggested_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    cost_per_serving: Decimal
    suggested_price_per_serving: Decimal


def assemble_price(
    ingredient_cost: Decimal,
    decoration_material_cost: Decimal,
    topper_cost: Decimal,
    total_labor_cost: Decimal,
    delivery_cost: Decimal,
    markup_percent: Decimal,
    discount: Optional[Discount],
    total_servings: int,
) -> PriceAssembly:
    """
    Combine subtotals into the price.

    Transaction boundary: Pure computation (no database access).

    total_labor_cost already includes decoration labor. Subtotals come in
    unrounded; suggested, discount and final price are rounded to cents as
    they are produced, everything else at the result boundary.
    """
    cost_before_delivery = (
        ingredient_cost + decoration_material_cost + topper_cost + total_labor_cost
    )
    pricing = calculate_pricing(
        cost_before_delivery,
        markup_percent,
        discount.discount_type if discount else None,
        discount.value if discount else None,
        delivery_cost,
    )
    total_cost = cost_before_delivery + delivery_cost
    return PriceAssembly(
        total_cost_before_delivery=cost_before_delivery,
        total_cost=total_cost,
        markup_percent=markup_percent,
        markup_amount=pricing.markup_amount,
        suggested_price=pricing.suggested_price,
        discount_amount=pricing.discount_amount,
        final_price=pricing.final_price,
        cost_per_serving=calculate_price_per_serving(total_cost, total_servings),
        suggested_price_per_serving=calculate_price_per_serving(
            pricing.final_price, total_servings
        ),
    )
