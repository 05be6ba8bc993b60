"""Pytest configuration and fixtures for service layer tests."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from src.models.base import Base
from src.models.enums import DecorationUnit, RecipeType, TierShape
from src.services.costing import (
    CostingCatalog,
    DecorationTechniqueEntry,
    DeliveryZoneEntry,
    IngredientEntry,
    LaborRoleEntry,
    RecipeEntry,
    RecipeIngredientLine,
    TierInput,
    TierSizeEntry,
)

# Catalog ids used throughout the costing tests
BAKER_ID, DECORATOR_ID, ASSISTANT_ID = 1, 2, 3
FLOUR_ID, BUTTER_ID, JAM_ID, SUGAR_ID = 1, 2, 3, 4
VANILLA_BATTER_ID, CHOCOLATE_BATTER_ID, STRAWBERRY_FILLING_ID, BUTTERCREAM_ID = 1, 2, 3, 4
SIX_INCH_ID, EIGHT_INCH_ID = 1, 2
SUGAR_FLOWERS_ID, PIPED_BORDER_ID, MACARONS_ID = 1, 2, 3
LOCAL_ZONE_ID, EXTENDED_ZONE_ID = 1, 2


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)

    # Restore original session factory
    db_module.get_session_factory = original_get_session


def make_roles():
    return (
        LaborRoleEntry(id=BAKER_ID, name="Baker", hourly_rate=Decimal("21")),
        LaborRoleEntry(id=DECORATOR_ID, name="Decorator", hourly_rate=Decimal("30")),
        LaborRoleEntry(id=ASSISTANT_ID, name="Bakery Assistant", hourly_rate=Decimal("18")),
    )


def make_ingredients():
    return (
        IngredientEntry(id=FLOUR_ID, name="Flour", unit="g", cost_per_unit=Decimal("0.02")),
        IngredientEntry(id=BUTTER_ID, name="Butter", unit="g", cost_per_unit=Decimal("0.01")),
        IngredientEntry(
            id=JAM_ID, name="Strawberry Jam", unit="g", cost_per_unit=Decimal("0.015")
        ),
        IngredientEntry(id=SUGAR_ID, name="Sugar", unit="g", cost_per_unit=Decimal("0.005")),
    )


def vanilla_batter():
    return RecipeEntry(
        id=VANILLA_BATTER_ID,
        name="Vanilla Batter",
        recipe_type=RecipeType.BATTER,
        yield_volume_ml=6000,
        labor_minutes=Decimal("30"),
        labor_role_id=BAKER_ID,
        ingredient_lines=(RecipeIngredientLine(FLOUR_ID, Decimal("1000")),),
    )


def make_recipes():
    return (
        vanilla_batter(),
        RecipeEntry(
            id=CHOCOLATE_BATTER_ID,
            name="Chocolate Batter",
            recipe_type=RecipeType.BATTER,
            yield_volume_ml=6000,
            labor_minutes=Decimal("30"),
            labor_role_id=BAKER_ID,
            ingredient_lines=(
                RecipeIngredientLine(FLOUR_ID, Decimal("800")),
                RecipeIngredientLine(SUGAR_ID, Decimal("200")),
            ),
        ),
        RecipeEntry(
            id=STRAWBERRY_FILLING_ID,
            name="Strawberry Filling",
            recipe_type=RecipeType.FILLING,
            yield_volume_ml=1000,
            labor_minutes=Decimal("10"),
            labor_role_id=BAKER_ID,
            ingredient_lines=(RecipeIngredientLine(JAM_ID, Decimal("500")),),
        ),
        RecipeEntry(
            id=BUTTERCREAM_ID,
            name="Vanilla Buttercream",
            recipe_type=RecipeType.FROSTING,
            yield_volume_ml=2000,
            labor_minutes=Decimal("20"),
            labor_role_id=BAKER_ID,
            ingredient_lines=(
                RecipeIngredientLine(BUTTER_ID, Decimal("1000")),
                RecipeIngredientLine(SUGAR_ID, Decimal("500")),
            ),
        ),
    )


def make_tier_sizes():
    return (
        TierSizeEntry(
            id=SIX_INCH_ID,
            name="6 inch round",
            diameter_cm=15.24,
            servings=12,
            shape=TierShape.ROUND,
            height_cm=10.16,
            volume_ml=3475,
            assembly_minutes=Decimal("15"),
            assembly_role_id=BAKER_ID,
        ),
        TierSizeEntry(
            id=EIGHT_INCH_ID,
            name="8 inch round",
            diameter_cm=20.32,
            servings=24,
            shape=TierShape.ROUND,
            height_cm=10.16,
            volume_ml=6178,
            assembly_minutes=Decimal("20"),
            assembly_role_id=BAKER_ID,
        ),
    )


def make_techniques():
    return (
        DecorationTechniqueEntry(
            id=SUGAR_FLOWERS_ID,
            name="Sugar Flowers",
            unit=DecorationUnit.CAKE,
            default_cost_per_unit=Decimal("12.00"),
            labor_minutes=Decimal("30"),
            labor_role_id=DECORATOR_ID,
            sku="DEC-FLOWERS",
            category="Sugar Work",
        ),
        DecorationTechniqueEntry(
            id=PIPED_BORDER_ID,
            name="Piped Border",
            unit=DecorationUnit.TIER,
            default_cost_per_unit=Decimal("1.50"),
            labor_minutes=Decimal("10"),
            labor_role_id=DECORATOR_ID,
            sku="DEC-BORDER",
            category="Piping",
        ),
        DecorationTechniqueEntry(
            id=MACARONS_ID,
            name="Macarons",
            unit=DecorationUnit.SINGLE,
            default_cost_per_unit=Decimal("0.75"),
            labor_minutes=Decimal("2"),
            sku="DEC-MACARON",
        ),
    )


def make_zones():
    return (
        DeliveryZoneEntry(id=LOCAL_ZONE_ID, name="Local", base_fee=Decimal("15")),
        DeliveryZoneEntry(
            id=EXTENDED_ZONE_ID,
            name="Extended",
            base_fee=Decimal("20"),
            per_mile_fee=Decimal("1.50"),
            distance_miles=Decimal("10"),
        ),
    )


@pytest.fixture
def single_recipe_catalog():
    """Vanilla batter only, 8" round at 6178 ml; the hand-checked pricing scenario."""
    return CostingCatalog(
        recipes=(vanilla_batter(),),
        ingredients=make_ingredients(),
        labor_roles=make_roles(),
        delivery_zones=make_zones(),
        tier_sizes=make_tier_sizes(),
    )


@pytest.fixture
def full_catalog():
    """Batter, filling and frosting recipes with decorations and delivery zones."""
    return CostingCatalog(
        recipes=make_recipes(),
        ingredients=make_ingredients(),
        labor_roles=make_roles(),
        decoration_techniques=make_techniques(),
        delivery_zones=make_zones(),
        tier_sizes=make_tier_sizes(),
    )


@pytest.fixture
def eight_inch_tier():
    """8" round tier as costing_service would build it from tier size 2."""
    return TierInput(
        tier_index=1,
        size_name="8 inch round",
        shape=TierShape.ROUND,
        diameter_cm=20.32,
        height_cm=10.16,
        volume_ml=6178,
        servings=24,
        assembly_minutes=Decimal("20"),
        assembly_role_id=BAKER_ID,
    )


@pytest.fixture
def catalog_dict():
    """JSON-style catalog, as read by CostingCatalog.from_dict and the CLI."""
    return {
        "recipes": [
            {
                "id": 1,
                "name": "Vanilla Batter",
                "recipe_type": "batter",
                "yield_volume_ml": 6000,
                "labor_minutes": 30,
                "labor_role_id": 1,
                "ingredient_lines": [{"ingredient_id": 1, "quantity": 1000}],
            }
        ],
        "ingredients": [{"id": 1, "name": "Flour", "unit": "g", "cost_per_unit": "0.02"}],
        "labor_roles": [
            {"id": 1, "name": "Baker", "hourly_rate": "21"},
            {"id": 2, "name": "Decorator", "hourly_rate": "30"},
        ],
        "decoration_techniques": [],
        "delivery_zones": [{"id": 1, "name": "Local", "base_fee": "15"}],
        "tier_sizes": [
            {
                "id": 2,
                "name": "8 inch round",
                "diameter_cm": 20.32,
                "servings": 24,
                "shape": "round",
                "volume_ml": 6178,
                "assembly_minutes": 20,
                "assembly_role_id": 1,
            }
        ],
        "settings": {"MarkupPercent": "0.70"},
    }
