"""
Ingredient aggregation across an order.

Scales every resolved recipe's ingredient lines by its multiplier and merges
quantities per ingredient, across tiers and across recipe types. Cost is
quantity × unit cost in Decimal and is not rounded here.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from src.services.logging_utils import get_service_logger, log_operation

from .catalog import CostingCatalog, IngredientEntry
from .recipe_resolver import RecipeMatch

logger = get_service_logger(__name__)


@dataclass(frozen=True)
class IngredientCostLine:
    """One distinct ingredient of the order."""

    ingredient_id: int
    name: str
    unit: str
    quantity: Decimal
    cost_per_unit: Decimal
    total_cost: Decimal


def _scale_recipe_ingredients(
    match: RecipeMatch, catalog: CostingCatalog
) -> List[Tuple[IngredientEntry, Decimal]]:
    """
    Scale a matched recipe's ingredient lines by its multiplier.

    Returns:
        List of (ingredient, scaled_quantity) tuples
    """
    results = []
    for line in match.recipe.ingredient_lines:
        ingredient = catalog.ingredient(line.ingredient_id)
        if ingredient is None:
            # Orphaned line: the ingredient is not in the catalog snapshot
            log_operation(
                logger,
                operation="aggregate_ingredients",
                outcome="ingredient_missing",
                level=logging.WARNING,
                recipe_id=match.recipe.id,
                ingredient_id=line.ingredient_id,
            )
            continue
        results.append((ingredient, line.quantity * match.multiplier))
    return results


def aggregate_ingredients(
    matches: Iterable[RecipeMatch], catalog: CostingCatalog
) -> Tuple[List[IngredientCostLine], Decimal]:
    """
    Merge scaled ingredient quantities by ingredient id.

    Transaction boundary: Pure computation (no database access).

    Args:
        matches: Resolved recipes of every tier
        catalog: Catalog snapshot holding ingredient costs

    Returns:
        (lines in first-seen order, unrounded total ingredient cost)
    """
    totals: Dict[int, Decimal] = {}
    entries: Dict[int, IngredientEntry] = {}

    for match in matches:
        for ingredient, quantity in _scale_recipe_ingredients(match, catalog):
            if ingredient.id not in totals:
                totals[ingredient.id] = Decimal("0")
                entries[ingredient.id] = ingredient
            totals[ingredient.id] += quantity

    lines = []
    total_cost = Decimal("0")
    for ingredient_id, quantity in totals.items():
        ingredient = entries[ingredient_id]
        cost = quantity * ingredient.cost_per_unit
        total_cost += cost
        lines.append(
            IngredientCostLine(
                ingredient_id=ingredient_id,
                name=ingredient.name,
                unit=ingredient.unit,
                quantity=quantity,
                cost_per_unit=ingredient.cost_per_unit,
                total_cost=cost,
            )
        )
    return lines, total_cost
