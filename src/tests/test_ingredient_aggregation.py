"""Tests for ingredient aggregation across tiers and recipe types."""

import logging
from dataclasses import replace
from decimal import Decimal

from src.models.enums import RecipeType
from src.services.costing import (
    CostingCatalog,
    RecipeEntry,
    RecipeIngredientLine,
    aggregate_ingredients,
    resolve_tier_recipes,
)


def _resolve_all(tiers, catalog):
    matches = []
    for tier in tiers:
        matches.extend(resolve_tier_recipes(tier, catalog))
    return matches


class TestAggregateIngredients:
    """Tests for aggregate_ingredients()."""

    def test_single_recipe(self, single_recipe_catalog, eight_inch_tier):
        """1000 g flour scaled by 1.03 at $0.02/g."""
        matches = resolve_tier_recipes(eight_inch_tier, single_recipe_catalog)
        lines, total = aggregate_ingredients(matches, single_recipe_catalog)

        assert len(lines) == 1
        assert lines[0].name == "Flour"
        assert lines[0].quantity == Decimal("1030.00")
        assert total == Decimal("20.6000")

    def test_same_ingredient_merges_across_tiers(self, single_recipe_catalog, eight_inch_tier):
        """Two tiers of the same batter give one flour line."""
        six_inch = replace(eight_inch_tier, tier_index=2, volume_ml=3475, diameter_cm=15.24)
        matches = _resolve_all([eight_inch_tier, six_inch], single_recipe_catalog)
        lines, total = aggregate_ingredients(matches, single_recipe_catalog)

        # 1000 × 1.03 + 1000 × 0.58
        assert len(lines) == 1
        assert lines[0].quantity == Decimal("1610.00")
        assert total == Decimal("32.2000")

    def test_merges_across_recipe_types(self, full_catalog, eight_inch_tier):
        """Sugar from batter and frosting is summed, in first-seen order."""
        tier = replace(eight_inch_tier, flavor="Chocolate", finish_type="Vanilla Buttercream")
        lines, total = aggregate_ingredients(
            resolve_tier_recipes(tier, full_catalog), full_catalog
        )

        by_name = {line.name: line for line in lines}
        assert [line.name for line in lines] == ["Flour", "Sugar", "Butter"]
        # Chocolate batter ×1.03: 800 flour, 200 sugar
        # Buttercream ×1.11: 1000 butter, 500 sugar
        assert by_name["Flour"].quantity == Decimal("824")
        assert by_name["Sugar"].quantity == Decimal("761")
        assert by_name["Butter"].quantity == Decimal("1110")
        assert total == sum((line.total_cost for line in lines), Decimal("0"))

    def test_orphan_line_is_skipped(self, eight_inch_tier, caplog):
        """A recipe line naming an unknown ingredient is dropped with a warning."""
        catalog = CostingCatalog(
            recipes=(
                RecipeEntry(
                    id=1,
                    name="Mystery Batter",
                    recipe_type=RecipeType.BATTER,
                    yield_volume_ml=6000,
                    ingredient_lines=(RecipeIngredientLine(42, Decimal("100")),),
                ),
            )
        )
        with caplog.at_level(logging.WARNING):
            lines, total = aggregate_ingredients(
                resolve_tier_recipes(eight_inch_tier, catalog), catalog
            )

        assert lines == []
        assert total == Decimal("0")
        assert "aggregate_ingredients: ingredient_missing" in caplog.text

    def test_no_matches(self, full_catalog):
        """Nothing resolved means no ingredients and zero cost."""
        assert aggregate_ingredients([], full_catalog) == ([], Decimal("0"))
