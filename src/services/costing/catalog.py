"""
Immutable catalog snapshot consumed by the costing engine.

The engine never queries the database. Callers build a CostingCatalog once
(from the database via catalog_service, or from a JSON mapping via
CostingCatalog.from_dict) and pass it to calculate_cost().
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from src.models.enums import DecorationUnit, RecipeType, TierShape
from src.services.dto_utils import to_decimal
from src.utils.constants import (
    DEFAULT_MARKUP_PERCENT,
    SETTING_MARKUP_PERCENT,
    SETTING_STANDARD_TOPPER_FEE,
    STANDARD_TOPPER_FEE,
)

from .production_settings import PRODUCTION_DEFAULTS, ProductionSettings, parse_production_settings


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True)
class RecipeIngredientLine:
    ingredient_id: int
    quantity: Decimal


@dataclass(frozen=True)
class RecipeEntry:
    """A batter, filling or frosting recipe.

    yield_volume_ml of None means the recipe cannot be volume-scaled.
    """

    id: int
    name: str
    recipe_type: RecipeType
    yield_volume_ml: Optional[float] = None
    labor_minutes: Optional[Decimal] = None
    labor_role_id: Optional[int] = None
    ingredient_lines: Tuple[RecipeIngredientLine, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecipeEntry":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            recipe_type=RecipeType(str(data["recipe_type"]).upper()),
            yield_volume_ml=_optional_float(data.get("yield_volume_ml")),
            labor_minutes=_optional_decimal(data.get("labor_minutes")),
            labor_role_id=_optional_int(data.get("labor_role_id")),
            ingredient_lines=tuple(
                RecipeIngredientLine(int(line["ingredient_id"]), to_decimal(line["quantity"]))
                for line in data.get("ingredient_lines", ())
            ),
        )


@dataclass(frozen=True)
class IngredientEntry:
    id: int
    name: str
    unit: str
    cost_per_unit: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IngredientEntry":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            unit=data.get("unit", "g"),
            cost_per_unit=to_decimal(data.get("cost_per_unit")),
        )


@dataclass(frozen=True)
class LaborRoleEntry:
    id: int
    name: str
    hourly_rate: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LaborRoleEntry":
        return cls(
            id=int(data["id"]), name=data["name"], hourly_rate=to_decimal(data["hourly_rate"])
        )


@dataclass(frozen=True)
class DecorationTechniqueEntry:
    id: int
    name: str
    unit: DecorationUnit
    default_cost_per_unit: Decimal
    labor_minutes: Decimal = Decimal("0")
    labor_role_id: Optional[int] = None
    sku: str = ""
    category: str = "General"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecorationTechniqueEntry":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            unit=DecorationUnit(str(data.get("unit", "SINGLE")).upper()),
            default_cost_per_unit=to_decimal(data.get("default_cost_per_unit")),
            labor_minutes=to_decimal(data.get("labor_minutes")),
            labor_role_id=_optional_int(data.get("labor_role_id")),
            sku=data.get("sku", ""),
            category=data.get("category", "General"),
        )


@dataclass(frozen=True)
class DeliveryZoneEntry:
    id: int
    name: str
    base_fee: Decimal
    per_mile_fee: Optional[Decimal] = None
    distance_miles: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeliveryZoneEntry":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            base_fee=to_decimal(data.get("base_fee")),
            per_mile_fee=_optional_decimal(data.get("per_mile_fee")),
            distance_miles=_optional_decimal(data.get("distance_miles")),
        )


@dataclass(frozen=True)
class TierSizeEntry:
    """A row of the tier-size table that order and quote payloads reference."""

    id: int
    name: str
    diameter_cm: float
    servings: int
    shape: TierShape = TierShape.ROUND
    length_cm: Optional[float] = None
    height_cm: Optional[float] = None
    volume_ml: Optional[float] = None
    assembly_minutes: Optional[Decimal] = None
    assembly_role_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TierSizeEntry":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            diameter_cm=float(data["diameter_cm"]),
            servings=int(data.get("servings") or 0),
            shape=TierShape.parse(data.get("shape")),
            length_cm=_optional_float(data.get("length_cm")),
            height_cm=_optional_float(data.get("height_cm")),
            volume_ml=_optional_float(data.get("volume_ml")),
            assembly_minutes=_optional_decimal(data.get("assembly_minutes")),
            assembly_role_id=_optional_int(data.get("assembly_role_id")),
        )


def parse_money_setting(raw: Any, default: Decimal) -> Decimal:
    """Parse a non-negative decimal setting; missing or invalid values give the default."""
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = to_decimal(str(raw).strip())
    except InvalidOperation:
        return default
    return value if value.is_finite() and value >= 0 else default


def _index(entries: Iterable) -> Dict[int, Any]:
    return {entry.id: entry for entry in entries}


@dataclass(frozen=True)
class CostingCatalog:
    """Read-only catalog for one or more calculations.

    Recipes keep their declared order; the first recipe of a type is the
    fallback when free-text matching finds nothing better.
    """

    recipes: Tuple[RecipeEntry, ...] = ()
    ingredients: Tuple[IngredientEntry, ...] = ()
    labor_roles: Tuple[LaborRoleEntry, ...] = ()
    decoration_techniques: Tuple[DecorationTechniqueEntry, ...] = ()
    delivery_zones: Tuple[DeliveryZoneEntry, ...] = ()
    tier_sizes: Tuple[TierSizeEntry, ...] = ()
    production_settings: ProductionSettings = PRODUCTION_DEFAULTS
    default_markup_percent: Decimal = Decimal(DEFAULT_MARKUP_PERCENT)
    standard_topper_fee: Decimal = Decimal(STANDARD_TOPPER_FEE)

    _recipes_by_id: Dict[int, RecipeEntry] = field(init=False, repr=False, compare=False)
    _ingredients_by_id: Dict[int, IngredientEntry] = field(init=False, repr=False, compare=False)
    _roles_by_id: Dict[int, LaborRoleEntry] = field(init=False, repr=False, compare=False)
    _roles_by_name: Dict[str, LaborRoleEntry] = field(init=False, repr=False, compare=False)
    _techniques_by_id: Dict[int, DecorationTechniqueEntry] = field(
        init=False, repr=False, compare=False
    )
    _zones_by_id: Dict[int, DeliveryZoneEntry] = field(init=False, repr=False, compare=False)
    _tier_sizes_by_id: Dict[int, TierSizeEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Frozen dataclass: indexes are set once, through object.__setattr__
        for name, value in (
            ("recipes", tuple(self.recipes)),
            ("ingredients", tuple(self.ingredients)),
            ("labor_roles", tuple(self.labor_roles)),
            ("decoration_techniques", tuple(self.decoration_techniques)),
            ("delivery_zones", tuple(self.delivery_zones)),
            ("tier_sizes", tuple(self.tier_sizes)),
        ):
            object.__setattr__(self, name, value)
        object.__setattr__(self, "_recipes_by_id", _index(self.recipes))
        object.__setattr__(self, "_ingredients_by_id", _index(self.ingredients))
        object.__setattr__(self, "_roles_by_id", _index(self.labor_roles))
        object.__setattr__(
            self, "_roles_by_name", {role.name.lower(): role for role in self.labor_roles}
        )
        object.__setattr__(self, "_techniques_by_id", _index(self.decoration_techniques))
        object.__setattr__(self, "_zones_by_id", _index(self.delivery_zones))
        object.__setattr__(self, "_tier_sizes_by_id", _index(self.tier_sizes))

    def recipe(self, recipe_id: Optional[int]) -> Optional[RecipeEntry]:
        return self._recipes_by_id.get(recipe_id)

    def recipes_of_type(self, recipe_type: RecipeType) -> Tuple[RecipeEntry, ...]:
        return tuple(r for r in self.recipes if r.recipe_type == recipe_type)

    def ingredient(self, ingredient_id: int) -> Optional[IngredientEntry]:
        return self._ingredients_by_id.get(ingredient_id)

    def labor_role(self, role_id: Optional[int]) -> Optional[LaborRoleEntry]:
        return self._roles_by_id.get(role_id)

    def labor_role_by_name(self, name: str) -> Optional[LaborRoleEntry]:
        return self._roles_by_name.get(name.lower())

    def decoration_technique(self, technique_id: int) -> Optional[DecorationTechniqueEntry]:
        return self._techniques_by_id.get(technique_id)

    def delivery_zone(self, zone_id: Optional[int]) -> Optional[DeliveryZoneEntry]:
        return self._zones_by_id.get(zone_id)

    def tier_size(self, tier_size_id: Optional[int]) -> Optional[TierSizeEntry]:
        return self._tier_sizes_by_id.get(tier_size_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CostingCatalog":
        """
        Build a catalog from a JSON-style mapping.

        Keys mirror the dataclass fields (recipes, ingredients, labor_roles,
        decoration_techniques, delivery_zones, tier_sizes). An optional
        "settings" mapping is read like the settings table: production keys,
        MarkupPercent and StandardTopperFee.
        """
        settings = {str(k): str(v) for k, v in (data.get("settings") or {}).items()}
        markup = settings.get(SETTING_MARKUP_PERCENT, data.get("default_markup_percent"))
        topper_fee = settings.get(SETTING_STANDARD_TOPPER_FEE, data.get("standard_topper_fee"))
        return cls(
            recipes=tuple(RecipeEntry.from_dict(r) for r in data.get("recipes", ())),
            ingredients=tuple(IngredientEntry.from_dict(i) for i in data.get("ingredients", ())),
            labor_roles=tuple(LaborRoleEntry.from_dict(r) for r in data.get("labor_roles", ())),
            decoration_techniques=tuple(
                DecorationTechniqueEntry.from_dict(t)
                for t in data.get("decoration_techniques", ())
            ),
            delivery_zones=tuple(
                DeliveryZoneEntry.from_dict(z) for z in data.get("delivery_zones", ())
            ),
            tier_sizes=tuple(TierSizeEntry.from_dict(t) for t in data.get("tier_sizes", ())),
            production_settings=parse_production_settings(settings),
            default_markup_percent=parse_money_setting(markup, Decimal(DEFAULT_MARKUP_PERCENT)),
            standard_topper_fee=parse_money_setting(topper_fee, Decimal(STANDARD_TOPPER_FEE)),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.recipes or self.ingredients or self.labor_roles or self.tier_sizes)
