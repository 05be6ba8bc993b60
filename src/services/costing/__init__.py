"""
Costing engine module for cake orders and quotes.

This module provides:
- Tier geometry (volume, surface area, batter and buttercream mass)
- Recipe resolution and volume-based scaling per tier
- Ingredient aggregation across tiers and recipe types
- Labor aggregation by role
- Decoration costing by unit type
- Price assembly (markup, discount, delivery, per-serving)
- The calculate_cost() entry point tying these together

Usage:
    from src.services.costing import (
        # Entry point
        calculate_cost,
        apply_price_adjustment,
        # Inputs
        CostingCatalog,
        OrderSnapshot,
        TierInput,
        DecorationLine,
        Discount,
        # Output
        CostingResult,
        # Geometry
        tier_volume_ml,
        get_assembly_minutes,
        batter_for_tier,
        buttercream_for_tier,
    )
"""

from .catalog import (
    CostingCatalog,
    DecorationTechniqueEntry,
    DeliveryZoneEntry,
    IngredientEntry,
    LaborRoleEntry,
    RecipeEntry,
    RecipeIngredientLine,
    TierSizeEntry,
)
from .decoration_costing import DecorationCostLine, cost_decorations
from .engine import apply_price_adjustment, calculate_cost, validate_snapshot
from .geometry import (
    batter_for_tier,
    buttercream_for_tier,
    calculate_batch_totals,
    decoration_scale_factor,
    estimate_buttercream_ounces,
    get_assembly_minutes,
    parse_tier_size,
    surface_area_cm,
    tier_surface_area,
    tier_volume_ml,
)
from .ingredient_aggregation import IngredientCostLine, aggregate_ingredients
from .labor_aggregation import LaborAggregator, LaborLine, fallback_rate
from .pricing import (
    adjust_suggested_price,
    calculate_discount_amount,
    calculate_markup,
    calculate_price_per_serving,
    calculate_pricing,
    calculate_recipe_multiplier,
    calculate_suggested_price,
    round_currency,
)
from .production_settings import PRODUCTION_DEFAULTS, ProductionSettings
from .recipe_resolver import MatchSource, MultiplierSource, RecipeMatch, resolve_tier_recipes
from .result import CostingResult
from .snapshot import DecorationLine, Discount, OrderSnapshot, TierInput

__all__ = [
    # Entry point
    "calculate_cost",
    "apply_price_adjustment",
    "validate_snapshot",
    # Catalog
    "CostingCatalog",
    "RecipeEntry",
    "RecipeIngredientLine",
    "IngredientEntry",
    "LaborRoleEntry",
    "DecorationTechniqueEntry",
    "DeliveryZoneEntry",
    "TierSizeEntry",
    # Snapshot
    "OrderSnapshot",
    "TierInput",
    "DecorationLine",
    "Discount",
    # Result
    "CostingResult",
    "IngredientCostLine",
    "DecorationCostLine",
    "LaborLine",
    "RecipeMatch",
    "MatchSource",
    "MultiplierSource",
    # Stages
    "resolve_tier_recipes",
    "aggregate_ingredients",
    "LaborAggregator",
    "fallback_rate",
    "cost_decorations",
    # Pricing
    "round_currency",
    "calculate_markup",
    "calculate_suggested_price",
    "calculate_discount_amount",
    "calculate_pricing",
    "calculate_price_per_serving",
    "adjust_suggested_price",
    "calculate_recipe_multiplier",
    # Geometry
    "ProductionSettings",
    "PRODUCTION_DEFAULTS",
    "tier_volume_ml",
    "get_assembly_minutes",
    "tier_surface_area",
    "surface_area_cm",
    "batter_for_tier",
    "buttercream_for_tier",
    "estimate_buttercream_ounces",
    "calculate_batch_totals",
    "decoration_scale_factor",
    "parse_tier_size",
]
