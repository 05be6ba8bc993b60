"""
Order and quote input snapshot.

An OrderSnapshot is everything one calculation reads about the cake being
priced. Orders and quotes are normalized into the same shape by
costing_service, so both paths reach calculate_cost() with equal inputs.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from src.models.enums import DiscountType, TierShape

from . import geometry
from .production_settings import ProductionSettings


@dataclass(frozen=True)
class TierInput:
    """One tier of the cake.

    Volume is the stored volume_ml when present, otherwise derived from the
    shape and dimensions. Assembly minutes likewise fall back to the
    assembly-time table keyed by diameter.
    """

    tier_index: int
    size_name: str = ""
    shape: TierShape = TierShape.ROUND
    diameter_cm: Optional[float] = None
    length_cm: Optional[float] = None
    height_cm: Optional[float] = None
    volume_ml: Optional[float] = None
    servings: int = 0
    batter_recipe_id: Optional[int] = None
    filling_recipe_id: Optional[int] = None
    frosting_recipe_id: Optional[int] = None
    batter_multiplier: Optional[Decimal] = None
    filling_multiplier: Optional[Decimal] = None
    frosting_multiplier: Optional[Decimal] = None
    flavor: Optional[str] = None
    filling: Optional[str] = None
    finish_type: Optional[str] = None
    assembly_minutes: Optional[Decimal] = None
    assembly_role_id: Optional[int] = None

    @property
    def diameter_inches(self) -> Optional[float]:
        return geometry.cm_to_inches(self.diameter_cm)

    def resolved_volume_ml(self, settings: ProductionSettings) -> Optional[float]:
        """Stored volume, else geometry volume, else None when there is no size at all."""
        if self.volume_ml is not None:
            return float(self.volume_ml)
        if self.diameter_cm:
            return float(
                geometry.tier_volume_ml(
                    self.diameter_inches,
                    self.shape,
                    settings,
                    geometry.cm_to_inches(self.length_cm),
                )
            )
        return None

    def resolved_assembly_minutes(self, settings: ProductionSettings) -> Decimal:
        if self.assembly_minutes is not None:
            return Decimal(str(self.assembly_minutes))
        if self.diameter_cm:
            return Decimal(geometry.get_assembly_minutes(self.diameter_inches, settings))
        if self.size_name:
            diameter, _shape = geometry.parse_tier_size(self.size_name)
            return Decimal(geometry.get_assembly_minutes(diameter, settings))
        return Decimal(settings.default_assembly_minutes)


@dataclass(frozen=True)
class DecorationLine:
    """A decoration on the order.

    tier_indices limits a TIER-unit decoration to the named tiers; when
    empty the decoration applies to every tier.
    """

    technique_id: int
    quantity: Decimal = Decimal("1")
    unit_override: Optional[str] = None
    tier_indices: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tier_indices", tuple(self.tier_indices or ()))


@dataclass(frozen=True)
class Discount:
    discount_type: DiscountType
    value: Decimal
    reason: Optional[str] = None


@dataclass(frozen=True)
class OrderSnapshot:
    """Normalized order or quote.

    markup_percent of None means "use the catalog default".
    """

    tiers: Tuple[TierInput, ...] = ()
    decorations: Tuple[DecorationLine, ...] = ()
    is_delivery: bool = False
    delivery_zone_id: Optional[int] = None
    delivery_distance: Optional[Decimal] = None
    baker_hours: Optional[Decimal] = None
    assistant_hours: Optional[Decimal] = None
    topper_type: Optional[str] = None
    topper_text: Optional[str] = None
    custom_topper_fee: Optional[Decimal] = None
    markup_percent: Optional[Decimal] = None
    discount: Optional[Discount] = None

    def __post_init__(self):
        object.__setattr__(self, "tiers", tuple(self.tiers))
        object.__setattr__(self, "decorations", tuple(self.decorations))

    @property
    def total_servings(self) -> int:
        return sum(tier.servings for tier in self.tiers)
