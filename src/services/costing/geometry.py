"""
Tier geometry and production yield calculations.

Converts a tier's physical dimensions into volume, surface area, batter mass,
buttercream mass and assembly time. All functions are pure: dimensions in,
rounded numbers out.

Dimensions are inches unless the name says otherwise. ``diameter`` is the
width for rectangle and oval pans; ``length`` defaults to the diameter.

Heart and hexagon shapes are approximations:
- heart footprint = 0.8 · d², perimeter = π · d
- hexagon is regular with side = d / √3
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple, Union

from src.models.enums import TierShape
from src.utils.constants import (
    CM_PER_INCH,
    DEFAULT_COMPLEXITY_MULTIPLIER,
    DEFAULT_TIER_DIAMETER_INCHES,
)

from .production_settings import PRODUCTION_DEFAULTS, ProductionSettings

ShapeLike = Union[TierShape, str, None]

_SIZE_PATTERN = re.compile(r"(\d+)\s*(?:inch|in|\")?", re.IGNORECASE)

# Heart footprint relative to a d × d square
HEART_AREA_FACTOR = 0.8


def round_half_up(value: float, places: int = 0) -> Union[int, float]:
    """Round half away from zero (2.5 -> 3, 0.125 -> 0.13 at 2 places)."""
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def cm_to_inches(value_cm: Optional[float]) -> Optional[float]:
    """Centimeters to inches, rounded to 2 places so 20.32 cm is exactly 8.0."""
    if value_cm is None:
        return None
    return round_half_up(value_cm / CM_PER_INCH, 2)


def parse_tier_size(size_name: Optional[str]) -> Tuple[int, TierShape]:
    """
    Parse a tier size name like "8 inch round" or '10" square'.

    Never raises: anything without a number is an 8" tier, and anything
    without a recognised shape word is round.

    Returns:
        (diameter_inches, shape)
    """
    text = size_name or ""
    match = _SIZE_PATTERN.search(text)
    diameter = int(match.group(1)) if match else DEFAULT_TIER_DIAMETER_INCHES

    lowered = text.lower()
    for candidate in TierShape:
        if candidate != TierShape.ROUND and candidate.value in lowered:
            return diameter, candidate
    return diameter, TierShape.ROUND


def footprint_area(diameter: float, shape: ShapeLike = TierShape.ROUND,
                   length: Optional[float] = None) -> float:
    """Top area of the pan in square inches."""
    shape = TierShape.parse(shape)
    length = length or diameter
    if shape == TierShape.SQUARE:
        return diameter * diameter
    if shape == TierShape.RECTANGLE:
        return diameter * length
    if shape == TierShape.OVAL:
        return math.pi * (diameter / 2) * (length / 2)
    if shape == TierShape.HEART:
        return HEART_AREA_FACTOR * diameter * diameter
    if shape == TierShape.HEXAGON:
        side = diameter / math.sqrt(3)
        return (3 * math.sqrt(3) / 2) * side * side
    radius = diameter / 2
    return math.pi * radius * radius


def perimeter(diameter: float, shape: ShapeLike = TierShape.ROUND,
              length: Optional[float] = None) -> float:
    """Pan perimeter in inches (oval uses Ramanujan's approximation)."""
    shape = TierShape.parse(shape)
    length = length or diameter
    if shape == TierShape.SQUARE:
        return 4 * diameter
    if shape == TierShape.RECTANGLE:
        return 2 * (diameter + length)
    if shape == TierShape.OVAL:
        a, b = diameter / 2, length / 2
        return math.pi * (3 * (a + b) - math.sqrt((3 * a + b) * (a + 3 * b)))
    if shape == TierShape.HEXAGON:
        return 6 * (diameter / math.sqrt(3))
    # Round and heart
    return math.pi * diameter


def layer_volume_cubic_inches(diameter: float, layer_height: float,
                              shape: ShapeLike = TierShape.ROUND,
                              length: Optional[float] = None) -> float:
    """Volume of one layer (or any prism of the pan's footprint) in cubic inches."""
    return footprint_area(diameter, shape, length) * layer_height


def tier_volume_ml(diameter: float, shape: ShapeLike = TierShape.ROUND,
                   settings: ProductionSettings = PRODUCTION_DEFAULTS,
                   length: Optional[float] = None) -> int:
    """
    Total cake volume of a tier in milliliters, used for recipe scaling.

    Cake height is layers_per_tier × layer_height_inches (3 × 2.5" by
    default). Regression points with default settings: 6" round 3475,
    8" round 6178, 10" round 9653, 12" round 13900, 10" square 12290.
    """
    cubic_inches = layer_volume_cubic_inches(
        diameter, settings.total_cake_height_inches, shape, length
    )
    return round_half_up(cubic_inches * settings.ml_per_cubic_inch)


def get_assembly_minutes(diameter_inches: float,
                         settings: ProductionSettings = PRODUCTION_DEFAULTS) -> int:
    """Assembly minutes for a tier size; sizes missing from the table get the default."""
    if diameter_inches is not None and float(diameter_inches).is_integer():
        minutes = settings.assembly_minutes_by_size.get(int(diameter_inches))
        if minutes is not None:
            return minutes
    return settings.default_assembly_minutes


@dataclass(frozen=True)
class SurfaceArea:
    top_area: float
    side_area: float
    total_area: float


def tier_surface_area(diameter: float, height: float, shape: ShapeLike = TierShape.ROUND,
                      length: Optional[float] = None) -> SurfaceArea:
    """Top plus side area (perimeter × height) in square inches."""
    top = footprint_area(diameter, shape, length)
    side = perimeter(diameter, shape, length) * height
    return SurfaceArea(top_area=top, side_area=side, total_area=top + side)


def surface_area_cm(diameter_cm: Optional[float], height_cm: Optional[float],
                    length_cm: Optional[float] = None,
                    width_cm: Optional[float] = None) -> float:
    """
    Top plus side area in square centimeters, for decoration scaling.

    A diameter means a round cake; otherwise length and width describe a
    rectangle. Missing height or dimensions give 0.
    """
    if not height_cm:
        return 0.0
    if diameter_cm:
        radius = diameter_cm / 2
        return math.pi * radius * radius + math.pi * diameter_cm * height_cm
    if length_cm and width_cm:
        return length_cm * width_cm + 2 * (length_cm + width_cm) * height_cm
    return 0.0


@dataclass(frozen=True)
class BatterEstimate:
    grams: int
    ounces: float
    layers: int


def batter_for_tier(diameter: float, shape: ShapeLike = TierShape.ROUND,
                    settings: ProductionSettings = PRODUCTION_DEFAULTS,
                    length: Optional[float] = None) -> BatterEstimate:
    """Batter for all layers of a tier, allowing for bake shrinkage."""
    layer_volume = layer_volume_cubic_inches(diameter, settings.layer_height_inches, shape, length)
    batter_volume = layer_volume / settings.batter_shrinkage_factor * settings.layers_per_tier
    grams = batter_volume * settings.batter_grams_per_cubic_inch
    return BatterEstimate(
        grams=round_half_up(grams),
        ounces=round_half_up(grams / settings.grams_per_ounce, 1),
        layers=settings.layers_per_tier,
    )


@dataclass(frozen=True)
class ButtercreamEstimate:
    internal_grams: int
    crumb_coat_grams: int
    total_grams: int
    total_ounces: float


def complexity_multiplier(complexity: Optional[int],
                          settings: ProductionSettings = PRODUCTION_DEFAULTS) -> float:
    """Crumb-coat multiplier for complexity 1/2/3; anything else is medium."""
    return settings.complexity_multipliers.get(complexity, DEFAULT_COMPLEXITY_MULTIPLIER)


def buttercream_for_tier(diameter: float, shape: ShapeLike = TierShape.ROUND,
                         complexity: int = 2,
                         settings: ProductionSettings = PRODUCTION_DEFAULTS,
                         length: Optional[float] = None) -> ButtercreamEstimate:
    """
    Buttercream between layers plus the crumb coat.

    Internal buttercream scales with (diameter / 6)², referenced to a 6"
    tier. The crumb coat covers the surface at the standard finished tier
    height and is thicker for more complex finishes. The final coat is
    order-level and not included.
    """
    size_multiplier = (diameter / 6) ** 2
    internal = (
        settings.buttercream_internal_grams_per_layer
        * (settings.layers_per_tier - 1)
        * size_multiplier
    )
    area = tier_surface_area(diameter, settings.standard_tier_height_inches, shape, length)
    crumb_coat = (
        area.total_area
        * settings.buttercream_crumb_coat_grams_per_sq_inch
        * complexity_multiplier(complexity, settings)
    )
    total = internal + crumb_coat
    return ButtercreamEstimate(
        internal_grams=round_half_up(internal),
        crumb_coat_grams=round_half_up(crumb_coat),
        total_grams=round_half_up(total),
        total_ounces=round_half_up(total / settings.grams_per_ounce, 1),
    )


@dataclass(frozen=True)
class FrostableArea:
    top_area: float
    side_area: float
    internal_area: float
    external_area: float
    total_frostable_area: int


def frostable_surface_area(diameter: float, tier_height: float,
                           shape: ShapeLike = TierShape.ROUND,
                           cake_layers: int = PRODUCTION_DEFAULTS.layers_per_tier) -> FrostableArea:
    """External surface plus the (cake_layers - 1) filling layers inside."""
    area = tier_surface_area(diameter, tier_height, shape)
    internal = (cake_layers - 1) * area.top_area
    return FrostableArea(
        top_area=area.top_area,
        side_area=area.side_area,
        internal_area=internal,
        external_area=area.total_area,
        total_frostable_area=round_half_up(area.total_area + internal),
    )


def estimate_buttercream_ounces(diameter: float, height: float = 4, complexity: int = 2,
                                cake_layers: int = PRODUCTION_DEFAULTS.layers_per_tier) -> float:
    """
    Quick buttercream estimate for batch planning, in ounces.

    Outside: 1 oz per 8 sq in × complexity. Inside: 0.5 oz per 8 sq in.
    """
    area = frostable_surface_area(diameter, height, TierShape.ROUND, cake_layers)
    outside = (area.top_area + area.side_area) * (1 / 8) * complexity
    filling = area.internal_area * (0.5 / 8)
    return round_half_up(outside + filling, 1)


@dataclass(frozen=True)
class BatchTierSpec:
    diameter_inches: float
    shape: TierShape = TierShape.ROUND
    complexity: int = 2
    count: int = 1


@dataclass(frozen=True)
class MassTotals:
    grams: int
    ounces: int
    kg: float
    lbs: float


@dataclass(frozen=True)
class BatchTotals:
    batter: MassTotals
    buttercream: MassTotals
    tier_count: int
    layer_count: int


def _mass_totals(grams: float, settings: ProductionSettings) -> MassTotals:
    ounces = grams / settings.grams_per_ounce
    return MassTotals(
        grams=round_half_up(grams),
        ounces=round_half_up(ounces),
        kg=round_half_up(grams / 1000, 2),
        lbs=round_half_up(ounces / 16, 1),
    )


def calculate_batch_totals(tiers: Iterable[BatchTierSpec],
                           settings: ProductionSettings = PRODUCTION_DEFAULTS,
                           surplus_percent: Optional[float] = None) -> BatchTotals:
    """
    Batter and buttercream for a production batch, with a waste surplus.

    Transaction boundary: Pure computation (no database access).

    Args:
        tiers: Tier specs; count repeats the same tier
        settings: Production constants
        surplus_percent: Extra allowance; defaults to settings.default_surplus_percent
    """
    if surplus_percent is None:
        surplus_percent = settings.default_surplus_percent
    surplus = 1 + surplus_percent / 100

    batter_grams = 0.0
    buttercream_grams = 0.0
    tier_count = 0
    layer_count = 0
    for tier in tiers:
        count = tier.count or 1
        batter = batter_for_tier(tier.diameter_inches, tier.shape, settings)
        buttercream = buttercream_for_tier(
            tier.diameter_inches, tier.shape, tier.complexity or 2, settings
        )
        batter_grams += batter.grams * count
        buttercream_grams += buttercream.total_grams * count
        tier_count += count
        layer_count += batter.layers * count

    return BatchTotals(
        batter=_mass_totals(batter_grams * surplus, settings),
        buttercream=_mass_totals(buttercream_grams * surplus, settings),
        tier_count=tier_count,
        layer_count=layer_count,
    )


def decoration_scale_factor(tier_diameter_cm: Optional[float], base_size_inches: float,
                            shape: ShapeLike = TierShape.ROUND) -> float:
    """
    Ratio of a tier's top area to a base cake's, rounded to 2 places.

    Used to scale decorations priced for a base size (e.g. 6") to the
    actual tier. Missing diameter or a non-positive base size give 1.0.
    """
    if not tier_diameter_cm or base_size_inches <= 0:
        return 1.0
    base_cm = base_size_inches * CM_PER_INCH
    shape = TierShape.parse(shape)
    if shape == TierShape.SQUARE:
        ratio = (tier_diameter_cm * tier_diameter_cm) / (base_cm * base_cm)
    else:
        ratio = (math.pi * (tier_diameter_cm / 2) ** 2) / (math.pi * (base_cm / 2) ** 2)
    return round_half_up(ratio, 2)
