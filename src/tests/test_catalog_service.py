"""Tests for catalog loading and seeding against the database."""

from decimal import Decimal

import pytest

from src.models import (
    DecorationTechnique,
    DeliveryZone,
    Ingredient,
    LaborRole,
    Recipe,
    RecipeIngredient,
    Setting,
    TierSize,
)
from src.models.enums import DecorationUnit, RecipeType, TierShape
from src.services import catalog_service, costing_service
from src.services.database import session_scope


@pytest.fixture
def seeded_db(test_db):
    """Seeded roles and tier sizes plus a Vanilla batter and a flour row."""
    catalog_service.seed_costing_defaults()
    with session_scope() as session:
        baker = session.query(LaborRole).filter(LaborRole.name == "Baker").one()
        flour = Ingredient(name="Flour", unit="g", cost_per_unit=Decimal("0.02"))
        session.add(flour)
        session.flush()
        recipe = Recipe(
            name="Vanilla Batter",
            recipe_type="BATTER",
            yield_volume_ml=6000,
            labor_minutes=30,
            labor_role_id=baker.id,
        )
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient_id=flour.id, quantity=1000))
        session.add(recipe)
    return test_db


def _tier_size_id(name):
    with session_scope() as session:
        return session.query(TierSize).filter(TierSize.name == name).one().id


class TestSeedCostingDefaults:
    """Tests for seed_costing_defaults()."""

    def test_creates_roles_and_tier_sizes(self, test_db):
        """First run creates three roles and five tier sizes."""
        counts = catalog_service.seed_costing_defaults()

        assert counts == {
            "roles_created": 3,
            "roles_updated": 0,
            "tier_sizes_created": 5,
            "tier_sizes_updated": 0,
        }

    def test_seed_is_idempotent(self, test_db):
        """Running the seed twice changes nothing."""
        catalog_service.seed_costing_defaults()
        counts = catalog_service.seed_costing_defaults()
        assert sum(counts.values()) == 0

    def test_seed_restores_rates(self, test_db):
        """A drifted role rate is reset to the fallback rate."""
        catalog_service.seed_costing_defaults()
        with session_scope() as session:
            baker = session.query(LaborRole).filter(LaborRole.name == "Baker").one()
            baker.hourly_rate = Decimal("25")

        counts = catalog_service.seed_costing_defaults()

        assert counts["roles_updated"] == 1
        with session_scope() as session:
            baker = session.query(LaborRole).filter(LaborRole.name == "Baker").one()
            assert Decimal(baker.hourly_rate) == Decimal("21")

    def test_seeded_tier_geometry(self, test_db):
        """Seeded tier sizes carry geometry volumes and assembly minutes."""
        catalog_service.seed_costing_defaults()
        with session_scope() as session:
            eight = session.query(TierSize).filter(TierSize.name == "8 inch round").one()
            square = session.query(TierSize).filter(TierSize.name == "10 inch square").one()

            assert eight.diameter_cm == pytest.approx(20.32)
            assert eight.volume_ml == 6178
            assert eight.assembly_minutes == 20
            assert eight.assembly_role.name == "Baker"
            assert square.shape == "square"
            assert square.volume_ml == 12290


class TestLoadCostingCatalog:
    """Tests for load_costing_catalog()."""

    def test_load_seeded_catalog(self, seeded_db):
        """Rows become typed catalog entries."""
        catalog = catalog_service.load_costing_catalog()

        assert len(catalog.labor_roles) == 3
        assert len(catalog.tier_sizes) == 5
        assert catalog.labor_role_by_name("decorator").hourly_rate == Decimal("30")

        (recipe,) = catalog.recipes
        assert recipe.recipe_type == RecipeType.BATTER
        assert recipe.ingredient_lines[0].quantity == Decimal("1000.0")
        assert catalog.tier_size(_tier_size_id("10 inch square")).shape == TierShape.SQUARE

    def test_inactive_rows_are_excluded(self, seeded_db):
        """Inactive techniques and zones are not in the snapshot."""
        with session_scope() as session:
            session.add(DeliveryZone(name="Retired", base_fee=Decimal("9"), is_active=False))
            session.add(DeliveryZone(name="Local", base_fee=Decimal("15")))
            session.add(
                DecorationTechnique(
                    sku="OLD-1",
                    name="Old Piping",
                    unit="TIER",
                    default_cost_per_unit=Decimal("1"),
                    is_active=False,
                )
            )
            session.add(
                DecorationTechnique(
                    sku="DEC-1",
                    name="Sugar Flowers",
                    unit="CAKE",
                    default_cost_per_unit=Decimal("12"),
                    labor_minutes=30,
                )
            )

        catalog = catalog_service.load_costing_catalog()

        assert [z.name for z in catalog.delivery_zones] == ["Local"]
        (technique,) = catalog.decoration_techniques
        assert technique.unit == DecorationUnit.CAKE
        assert technique.category == "General"

    def test_settings_override_defaults(self, seeded_db):
        """MarkupPercent and production keys come from the settings table."""
        with session_scope() as session:
            session.add(Setting(key="MarkupPercent", value="1.0"))
            session.add(Setting(key="ProductionLayersPerTier", value="2"))

        catalog = catalog_service.load_costing_catalog()

        assert catalog.default_markup_percent == Decimal("1.0")
        assert catalog.production_settings.layers_per_tier == 2

    def test_invalid_markup_setting(self, seeded_db):
        """An unparseable markup setting falls back to the configured default."""
        with session_scope() as session:
            session.add(Setting(key="MarkupPercent", value="lots"))

        catalog = catalog_service.load_costing_catalog()
        assert catalog.default_markup_percent == Decimal("0.70")

    def test_empty_database(self, test_db):
        """An empty database gives an empty catalog."""
        assert catalog_service.load_costing_catalog().is_empty


class TestCalculateFromDatabase:
    """Tests for costing_service.calculate_cost_from_database()."""

    def test_scenario_from_database(self, seeded_db):
        """The seeded catalog prices the hand-checked scenario."""
        payload = {"tiers": [{"tier_size_id": _tier_size_id("8 inch round"), "flavor": "Vanilla"}]}

        result = costing_service.calculate_cost_from_database(payload)

        assert result.ingredient_cost == Decimal("20.60")
        assert result.base_labor_cost == Decimal("17.82")
        assert result.suggested_price == Decimal("65.31")

    def test_order_path_from_database(self, seeded_db):
        """The order path applies the price adjustment."""
        payload = {
            "tiers": [{"tier_size_id": _tier_size_id("8 inch round")}],
            "price_adjustment": "4.69",
        }
        result = costing_service.calculate_cost_from_database(payload, kind="order")
        assert result.final_price == Decimal("70.00")

    def test_with_explicit_session(self, seeded_db):
        """Callers may pass their own session."""
        payload = {"tiers": [{"tier_size_id": _tier_size_id("6 inch round")}]}
        with session_scope() as session:
            result = costing_service.calculate_cost_from_database(payload, session=session)
        assert result.total_servings == 12
