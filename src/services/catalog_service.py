"""
Catalog service - load the costing catalog snapshot and seed defaults.

The costing engine reads an immutable CostingCatalog. This module is the
only place that turns database rows into that snapshot, so a calculation
performs its catalog reads once, up front, and never again.

Seeding writes the labor roles at the engine's fallback rates and the
standard tier sizes with volumes and assembly times computed by the
geometry calculator.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import (
    DecorationTechnique,
    DeliveryZone,
    Ingredient,
    LaborRole,
    Recipe,
    Setting,
    TierSize,
)
from src.models.enums import DecorationUnit, RecipeType, TierShape
from src.services.costing import geometry
from src.services.costing.catalog import (
    CostingCatalog,
    DecorationTechniqueEntry,
    DeliveryZoneEntry,
    IngredientEntry,
    LaborRoleEntry,
    RecipeEntry,
    RecipeIngredientLine,
    TierSizeEntry,
    parse_money_setting,
)
from src.services.costing.production_settings import parse_production_settings
from src.services.database import session_scope
from src.services.dto_utils import to_decimal
from src.services.exceptions import DatabaseError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.config import get_config
from src.utils.constants import (
    CM_PER_INCH,
    FALLBACK_LABOR_RATES,
    ROLE_BAKER,
    ROLE_BAKERY_ASSISTANT,
    ROLE_DECORATOR,
    SETTING_MARKUP_PERCENT,
    SETTING_STANDARD_TOPPER_FEE,
    STANDARD_TIER_HEIGHT_CM,
    STANDARD_TIER_SIZES,
    STANDARD_TOPPER_FEE,
)

logger = get_service_logger(__name__)

ROLE_DESCRIPTIONS = {
    ROLE_BAKER: "Mixing, baking and assembling tiers",
    ROLE_DECORATOR: "Piping, fondant and finishing work",
    ROLE_BAKERY_ASSISTANT: "Prep, cleanup and packing",
}


# ============================================================================
# Row to entry conversion
# ============================================================================


def _optional_decimal(value) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def recipe_to_entry(recipe: Recipe) -> RecipeEntry:
    """Convert a Recipe row (with its ingredient lines) to a catalog entry."""
    return RecipeEntry(
        id=recipe.id,
        name=recipe.name,
        recipe_type=RecipeType(str(recipe.recipe_type).upper()),
        yield_volume_ml=recipe.yield_volume_ml,
        labor_minutes=_optional_decimal(recipe.labor_minutes),
        labor_role_id=recipe.labor_role_id,
        ingredient_lines=tuple(
            RecipeIngredientLine(line.ingredient_id, to_decimal(line.quantity))
            for line in recipe.recipe_ingredients
        ),
    )


def ingredient_to_entry(ingredient: Ingredient) -> IngredientEntry:
    return IngredientEntry(
        id=ingredient.id,
        name=ingredient.name,
        unit=ingredient.unit,
        cost_per_unit=to_decimal(ingredient.cost_per_unit),
    )


def labor_role_to_entry(role: LaborRole) -> LaborRoleEntry:
    return LaborRoleEntry(id=role.id, name=role.name, hourly_rate=to_decimal(role.hourly_rate))


def technique_to_entry(technique: DecorationTechnique) -> DecorationTechniqueEntry:
    return DecorationTechniqueEntry(
        id=technique.id,
        name=technique.name,
        unit=DecorationUnit(str(technique.unit).upper()),
        default_cost_per_unit=to_decimal(technique.default_cost_per_unit),
        labor_minutes=to_decimal(technique.labor_minutes),
        labor_role_id=technique.labor_role_id,
        sku=technique.sku,
        category=technique.category or "General",
    )


def delivery_zone_to_entry(zone: DeliveryZone) -> DeliveryZoneEntry:
    return DeliveryZoneEntry(
        id=zone.id,
        name=zone.name,
        base_fee=to_decimal(zone.base_fee),
        per_mile_fee=_optional_decimal(zone.per_mile_fee),
        distance_miles=_optional_decimal(zone.distance_miles),
    )


def tier_size_to_entry(tier_size: TierSize) -> TierSizeEntry:
    return TierSizeEntry(
        id=tier_size.id,
        name=tier_size.name,
        diameter_cm=tier_size.diameter_cm,
        servings=tier_size.servings or 0,
        shape=TierShape.parse(tier_size.shape),
        length_cm=tier_size.length_cm,
        height_cm=tier_size.height_cm,
        volume_ml=tier_size.volume_ml,
        assembly_minutes=_optional_decimal(tier_size.assembly_minutes),
        assembly_role_id=tier_size.assembly_role_id,
    )


# ============================================================================
# Catalog loading
# ============================================================================


def load_costing_catalog(session: Optional[Session] = None) -> CostingCatalog:
    """
    Load every costing catalog table into an immutable snapshot.

    Transaction boundary: Read-only operation.
    Uses the session=None pattern for transactional composition.

    Inactive labor roles, techniques and zones are excluded. Recipes keep
    their id order, which is the tie-break order for free-text matching.

    Args:
        session: Optional database session

    Returns:
        CostingCatalog

    Raises:
        DatabaseError: If database operation fails
    """
    try:
        if session is not None:
            return _load_costing_catalog_impl(session)
        with session_scope() as session:
            return _load_costing_catalog_impl(session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to load costing catalog", e)


def _load_costing_catalog_impl(session: Session) -> CostingCatalog:
    """Implementation of load_costing_catalog.

    Transaction boundary: Inherits session from caller.
    """
    settings: Dict[str, str] = {
        row.key: row.value for row in session.query(Setting).order_by(Setting.id).all()
    }

    markup_setting = settings.get(SETTING_MARKUP_PERCENT)
    default_markup = parse_money_setting(markup_setting, get_config().default_markup_percent)

    catalog = CostingCatalog(
        recipes=tuple(
            recipe_to_entry(r) for r in session.query(Recipe).order_by(Recipe.id).all()
        ),
        ingredients=tuple(
            ingredient_to_entry(i) for i in session.query(Ingredient).order_by(Ingredient.id).all()
        ),
        labor_roles=tuple(
            labor_role_to_entry(r)
            for r in session.query(LaborRole)
            .filter(LaborRole.is_active.is_(True))
            .order_by(LaborRole.id)
            .all()
        ),
        decoration_techniques=tuple(
            technique_to_entry(t)
            for t in session.query(DecorationTechnique)
            .filter(DecorationTechnique.is_active.is_(True))
            .order_by(DecorationTechnique.id)
            .all()
        ),
        delivery_zones=tuple(
            delivery_zone_to_entry(z)
            for z in session.query(DeliveryZone)
            .filter(DeliveryZone.is_active.is_(True))
            .order_by(DeliveryZone.id)
            .all()
        ),
        tier_sizes=tuple(
            tier_size_to_entry(t) for t in session.query(TierSize).order_by(TierSize.id).all()
        ),
        production_settings=parse_production_settings(settings),
        default_markup_percent=default_markup,
        standard_topper_fee=parse_money_setting(
            settings.get(SETTING_STANDARD_TOPPER_FEE), Decimal(STANDARD_TOPPER_FEE)
        ),
    )

    log_operation(
        logger,
        operation="load_costing_catalog",
        outcome="success",
        level=logging.DEBUG,
        recipe_count=len(catalog.recipes),
        role_count=len(catalog.labor_roles),
        tier_size_count=len(catalog.tier_sizes),
    )
    return catalog


# ============================================================================
# Seeding
# ============================================================================


def seed_costing_defaults(session: Optional[Session] = None) -> Dict[str, int]:
    """
    Insert or update the default labor roles and standard tier sizes.

    Transaction boundary: Single write transaction.
    Uses the session=None pattern for transactional composition.

    Labor roles are written at the fallback rates (Baker $21, Decorator $30,
    Bakery Assistant $18) so catalog and fallback pricing agree. Existing
    rows are updated in place; running the seed twice changes nothing.

    Args:
        session: Optional database session

    Returns:
        Dict with counts: roles_created, roles_updated, tier_sizes_created,
        tier_sizes_updated

    Raises:
        DatabaseError: If database operation fails
    """
    try:
        if session is not None:
            return _seed_costing_defaults_impl(session)
        with session_scope() as session:
            return _seed_costing_defaults_impl(session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to seed costing defaults", e)


def _seed_costing_defaults_impl(session: Session) -> Dict[str, int]:
    counts = {
        "roles_created": 0,
        "roles_updated": 0,
        "tier_sizes_created": 0,
        "tier_sizes_updated": 0,
    }

    for name, rate in FALLBACK_LABOR_RATES.items():
        role = session.query(LaborRole).filter(LaborRole.name == name).first()
        if role is None:
            session.add(
                LaborRole(
                    name=name,
                    hourly_rate=Decimal(rate),
                    description=ROLE_DESCRIPTIONS.get(name),
                    is_active=True,
                )
            )
            counts["roles_created"] += 1
        elif to_decimal(role.hourly_rate) != Decimal(rate):
            role.hourly_rate = Decimal(rate)
            counts["roles_updated"] += 1
    session.flush()

    baker = session.query(LaborRole).filter(LaborRole.name == ROLE_BAKER).first()

    for name, diameter_inches, shape, servings in STANDARD_TIER_SIZES:
        volume = geometry.tier_volume_ml(diameter_inches, shape)
        minutes = geometry.get_assembly_minutes(diameter_inches)
        tier_size = session.query(TierSize).filter(TierSize.name == name).first()
        if tier_size is None:
            session.add(
                TierSize(
                    name=name,
                    shape=shape,
                    diameter_cm=round(diameter_inches * CM_PER_INCH, 2),
                    height_cm=STANDARD_TIER_HEIGHT_CM,
                    volume_ml=volume,
                    servings=servings,
                    assembly_minutes=minutes,
                    assembly_role_id=baker.id if baker else None,
                )
            )
            counts["tier_sizes_created"] += 1
        elif tier_size.volume_ml != volume or tier_size.assembly_minutes != minutes:
            tier_size.volume_ml = volume
            tier_size.assembly_minutes = minutes
            counts["tier_sizes_updated"] += 1
    session.flush()

    log_operation(
        logger,
        operation="seed_costing_defaults",
        outcome="success",
        **counts,
    )
    return counts
