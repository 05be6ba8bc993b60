"""
CostingResult: the single output of a calculation.

Built once by the engine and never mutated. Money fields are rounded to
cents here, at the boundary; the itemized lists keep their unrounded
Decimal values and are rounded only by to_dict().
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from src.services.dto_utils import cost_to_string, quantity_to_string

from .decoration_costing import DecorationCostLine
from .ingredient_aggregation import IngredientCostLine
from .labor_aggregation import LaborLine
from .pricing import DeliveryDetail, TopperDetail
from .recipe_resolver import RecipeMatch
from .snapshot import Discount


@dataclass(frozen=True)
class CostingResult:
    total_servings: int
    ingredient_cost: Decimal
    decoration_material_cost: Decimal
    decoration_labor_cost: Decimal
    topper_cost: Decimal
    delivery_cost: Decimal
    base_labor_cost: Decimal
    total_labor_cost: Decimal
    total_cost_before_delivery: Decimal
    total_cost: Decimal
    markup_percent: Decimal
    markup_amount: Decimal
    suggested_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    cost_per_serving: Decimal
    suggested_price_per_serving: Decimal
    price_adjustment: Decimal = Decimal("0.00")
    ingredients: Tuple[IngredientCostLine, ...] = ()
    decorations: Tuple[DecorationCostLine, ...] = ()
    labor_breakdown: Tuple[LaborLine, ...] = ()
    recipe_matches: Tuple[RecipeMatch, ...] = ()
    topper: Optional[TopperDetail] = None
    delivery: Optional[DeliveryDetail] = None
    discount: Optional[Discount] = None
    warnings: Tuple[str, ...] = field(default=())

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe dictionary; money as 2-decimal strings."""
        return {
            "total_servings": self.total_servings,
            "ingredient_cost": cost_to_string(self.ingredient_cost),
            "decoration_material_cost": cost_to_string(self.decoration_material_cost),
            "decoration_labor_cost": cost_to_string(self.decoration_labor_cost),
            "topper_cost": cost_to_string(self.topper_cost),
            "delivery_cost": cost_to_string(self.delivery_cost),
            "base_labor_cost": cost_to_string(self.base_labor_cost),
            "total_labor_cost": cost_to_string(self.total_labor_cost),
            "total_cost_before_delivery": cost_to_string(self.total_cost_before_delivery),
            "total_cost": cost_to_string(self.total_cost),
            "markup_percent": str(self.markup_percent),
            "markup_amount": cost_to_string(self.markup_amount),
            "suggested_price": cost_to_string(self.suggested_price),
            "discount_amount": cost_to_string(self.discount_amount),
            "final_price": cost_to_string(self.final_price),
            "price_adjustment": cost_to_string(self.price_adjustment),
            "cost_per_serving": cost_to_string(self.cost_per_serving),
            "suggested_price_per_serving": cost_to_string(self.suggested_price_per_serving),
            "ingredients": [
                {
                    "ingredient_id": line.ingredient_id,
                    "name": line.name,
                    "unit": line.unit,
                    "quantity": quantity_to_string(line.quantity),
                    "cost_per_unit": str(line.cost_per_unit),
                    "cost": cost_to_string(line.total_cost),
                }
                for line in self.ingredients
            ],
            "decorations": [
                {
                    "technique_id": line.technique_id,
                    "sku": line.sku,
                    "name": line.name,
                    "category": line.category,
                    "unit": line.unit.value,
                    "quantity": quantity_to_string(line.quantity_multiplier),
                    "material_cost": cost_to_string(line.material_cost),
                    "labor_minutes": quantity_to_string(line.labor_minutes),
                    "labor_role": line.labor_role_name,
                    "labor_cost": cost_to_string(line.labor_cost),
                    "total_cost": cost_to_string(line.total_cost),
                }
                for line in self.decorations
            ],
            "labor_breakdown": [
                {
                    "role": line.role_name,
                    "hourly_rate": cost_to_string(line.hourly_rate),
                    "production_minutes": quantity_to_string(line.production_minutes),
                    "decoration_minutes": quantity_to_string(line.decoration_minutes),
                    "minutes": quantity_to_string(line.total_minutes),
                    "hours": quantity_to_string(line.total_minutes / Decimal("60")),
                    "cost": cost_to_string(line.total_cost),
                    "fallback_rate": line.used_fallback_rate,
                }
                for line in self.labor_breakdown
            ],
            "recipe_matches": [
                {
                    "tier_index": match.tier_index,
                    "recipe_type": match.recipe_type.value,
                    "recipe_id": match.recipe.id,
                    "recipe_name": match.recipe.name,
                    "multiplier": str(match.multiplier),
                    "match_source": match.source.value,
                    "multiplier_source": match.multiplier_source.value,
                }
                for match in self.recipe_matches
            ],
            "topper": (
                {
                    "type": self.topper.topper_type,
                    "text": self.topper.topper_text,
                    "cost": cost_to_string(self.topper.cost),
                }
                if self.topper
                else None
            ),
            "delivery": (
                {
                    "zone_id": self.delivery.zone_id,
                    "zone_name": self.delivery.zone_name,
                    "base_fee": cost_to_string(self.delivery.base_fee),
                    "per_mile_fee": cost_to_string(self.delivery.per_mile_fee),
                    "distance_miles": str(self.delivery.distance_miles),
                    "cost": cost_to_string(self.delivery.cost),
                }
                if self.delivery
                else None
            ),
            "discount": (
                {
                    "type": self.discount.discount_type.value,
                    "value": str(self.discount.value),
                    "reason": self.discount.reason,
                    "amount": cost_to_string(self.discount_amount),
                }
                if self.discount
                else None
            ),
            "warnings": list(self.warnings),
        }
