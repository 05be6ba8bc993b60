"""
Production settings for yield calculations.

Physical constants the geometry calculator works from. Defaults can be
overridden per bakery through the settings table; every key is optional and
any value that is missing or does not parse falls back to its default.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from src.services.logging_utils import get_service_logger
from src.utils.constants import (
    COMPLEXITY_MULTIPLIERS,
    GRAMS_PER_OUNCE,
    ML_PER_CUBIC_INCH,
    ML_PER_CUP,
    SETTING_ASSEMBLY_MINUTES_BY_SIZE,
    SETTING_BATTER_GRAMS_PER_CUBIC_INCH,
    SETTING_BATTER_SHRINKAGE_FACTOR,
    SETTING_BUTTERCREAM_CRUMB_COAT_GRAMS_PER_SQ_INCH,
    SETTING_BUTTERCREAM_FINAL_COAT_GRAMS_PER_SQ_INCH,
    SETTING_BUTTERCREAM_INTERNAL_GRAMS_PER_LAYER,
    SETTING_DEFAULT_ASSEMBLY_MINUTES,
    SETTING_DEFAULT_SURPLUS_PERCENT,
    SETTING_DEFAULT_UNITS,
    SETTING_LAYER_HEIGHT_INCHES,
    SETTING_LAYERS_PER_TIER,
    SETTING_STANDARD_TIER_HEIGHT_INCHES,
)

logger = get_service_logger(__name__)

DEFAULT_ASSEMBLY_MINUTES_BY_SIZE: Dict[int, int] = {6: 15, 8: 20, 10: 25, 12: 30, 14: 35}


@dataclass(frozen=True)
class ProductionSettings:
    """Physical constants for tier geometry, batter and buttercream.

    Attributes:
        layers_per_tier: Cake layers stacked in one tier
        layer_height_inches: Height of one baked layer
        standard_tier_height_inches: Finished tier height including frosting
        assembly_minutes_by_size: Diameter (inches) -> assembly minutes
        default_assembly_minutes: Used for sizes missing from the table
        batter_grams_per_cubic_inch: Batter density
        batter_shrinkage_factor: Baked volume / batter volume
        buttercream_internal_grams_per_layer: Between layers, 6" reference
        buttercream_crumb_coat_grams_per_sq_inch: Outer crumb coat
        buttercream_final_coat_grams_per_sq_inch: Outer final coat
        default_surplus_percent: Waste allowance for batch totals
        default_units: 'grams' or 'ounces' for display
    """

    layers_per_tier: int = 3
    layer_height_inches: float = 2.5
    standard_tier_height_inches: float = 6.0
    assembly_minutes_by_size: Mapping[int, int] = field(
        default_factory=lambda: dict(DEFAULT_ASSEMBLY_MINUTES_BY_SIZE)
    )
    default_assembly_minutes: int = 20
    batter_grams_per_cubic_inch: float = 14.0
    batter_shrinkage_factor: float = 0.85
    buttercream_internal_grams_per_layer: float = 100.0
    buttercream_crumb_coat_grams_per_sq_inch: float = 2.0
    buttercream_final_coat_grams_per_sq_inch: float = 3.0
    default_surplus_percent: float = 5.0
    default_units: str = "grams"
    complexity_multipliers: Mapping[int, float] = field(
        default_factory=lambda: dict(COMPLEXITY_MULTIPLIERS)
    )
    grams_per_ounce: float = GRAMS_PER_OUNCE
    ml_per_cubic_inch: float = ML_PER_CUBIC_INCH
    ml_per_cup: float = ML_PER_CUP

    @property
    def total_cake_height_inches(self) -> float:
        """Baked cake height of a full tier (layers × layer height)."""
        return self.layers_per_tier * self.layer_height_inches

    def with_overrides(self, **overrides) -> "ProductionSettings":
        return replace(self, **overrides)


PRODUCTION_DEFAULTS = ProductionSettings()


def _positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(float(str(raw).strip()))
    except ValueError:
        return default
    return value if value > 0 else default


def _positive_float(raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    # NaN compares false, so it falls through to the default as well
    return value if value > 0 else default


def _parse_assembly_table(raw: Optional[str]) -> Dict[int, int]:
    if not raw:
        return dict(DEFAULT_ASSEMBLY_MINUTES_BY_SIZE)
    try:
        parsed = json.loads(raw)
        return {int(size): int(minutes) for size, minutes in parsed.items()}
    except (ValueError, TypeError, AttributeError):
        logger.warning(f"Invalid {SETTING_ASSEMBLY_MINUTES_BY_SIZE} JSON, using defaults")
        return dict(DEFAULT_ASSEMBLY_MINUTES_BY_SIZE)


def parse_production_settings(db_settings: Mapping[str, str]) -> ProductionSettings:
    """Build ProductionSettings from raw settings-table strings.

    Transaction boundary: Pure computation (no database access).

    Args:
        db_settings: Setting key -> raw string value (keys may be missing)

    Returns:
        ProductionSettings with every unparseable or non-positive value
        replaced by its default.
    """
    d = PRODUCTION_DEFAULTS
    units = db_settings.get(SETTING_DEFAULT_UNITS)
    return ProductionSettings(
        layers_per_tier=_positive_int(db_settings.get(SETTING_LAYERS_PER_TIER), d.layers_per_tier),
        layer_height_inches=_positive_float(
            db_settings.get(SETTING_LAYER_HEIGHT_INCHES), d.layer_height_inches
        ),
        standard_tier_height_inches=_positive_float(
            db_settings.get(SETTING_STANDARD_TIER_HEIGHT_INCHES), d.standard_tier_height_inches
        ),
        assembly_minutes_by_size=_parse_assembly_table(
            db_settings.get(SETTING_ASSEMBLY_MINUTES_BY_SIZE)
        ),
        default_assembly_minutes=_positive_int(
            db_settings.get(SETTING_DEFAULT_ASSEMBLY_MINUTES), d.default_assembly_minutes
        ),
        batter_grams_per_cubic_inch=_positive_float(
            db_settings.get(SETTING_BATTER_GRAMS_PER_CUBIC_INCH), d.batter_grams_per_cubic_inch
        ),
        batter_shrinkage_factor=_positive_float(
            db_settings.get(SETTING_BATTER_SHRINKAGE_FACTOR), d.batter_shrinkage_factor
        ),
        buttercream_internal_grams_per_layer=_positive_float(
            db_settings.get(SETTING_BUTTERCREAM_INTERNAL_GRAMS_PER_LAYER),
            d.buttercream_internal_grams_per_layer,
        ),
        buttercream_crumb_coat_grams_per_sq_inch=_positive_float(
            db_settings.get(SETTING_BUTTERCREAM_CRUMB_COAT_GRAMS_PER_SQ_INCH),
            d.buttercream_crumb_coat_grams_per_sq_inch,
        ),
        buttercream_final_coat_grams_per_sq_inch=_positive_float(
            db_settings.get(SETTING_BUTTERCREAM_FINAL_COAT_GRAMS_PER_SQ_INCH),
            d.buttercream_final_coat_grams_per_sq_inch,
        ),
        default_surplus_percent=_positive_float(
            db_settings.get(SETTING_DEFAULT_SURPLUS_PERCENT), d.default_surplus_percent
        ),
        default_units=units if units in ("grams", "ounces") else d.default_units,
    )
