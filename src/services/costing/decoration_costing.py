"""
Decoration costing.

Each decoration line is priced from its technique:
    quantity multiplier = quantity × tier count   (TIER unit; only tiers the order has)
                        = quantity                (CAKE, SET, SINGLE)
    material cost       = default_cost_per_unit × quantity multiplier
    labor minutes       = technique labor_minutes × quantity multiplier
    labor cost          = labor minutes × role rate / 60
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from src.models.enums import DecorationUnit
from src.services.exceptions import DecorationTechniqueNotFound
from src.utils.constants import ROLE_DECORATOR

from .catalog import CostingCatalog
from .labor_aggregation import labor_cost, resolve_role
from .snapshot import DecorationLine


@dataclass(frozen=True)
class DecorationCostLine:
    technique_id: int
    sku: str
    name: str
    category: str
    unit: DecorationUnit
    quantity: Decimal
    quantity_multiplier: Decimal
    unit_cost: Decimal
    material_cost: Decimal
    labor_minutes: Decimal
    labor_role_name: str
    labor_role_id: Optional[int]
    labor_rate: Decimal
    labor_cost: Decimal

    @property
    def total_cost(self) -> Decimal:
        return self.material_cost + self.labor_cost


def effective_unit(line: DecorationLine, default_unit: DecorationUnit) -> DecorationUnit:
    """Unit override when given, else the technique's unit."""
    if line.unit_override:
        return DecorationUnit(str(line.unit_override).upper())
    return default_unit


def quantity_multiplier(
    unit: DecorationUnit,
    quantity: Decimal,
    order_tiers: Sequence[int],
    tier_indices: Sequence[int] = (),
) -> Decimal:
    """
    Units to price for a line.

    order_tiers holds the tier_index of every tier on the order. TIER lines
    count each of those tiers; when the line names specific tiers, only
    named tiers present on the order are counted, never more than the
    order has. CAKE, SET and SINGLE lines are not scaled.
    """
    if unit != DecorationUnit.TIER:
        return quantity
    tier_count = len(order_tiers)
    if tier_indices:
        tier_count = min(len(set(tier_indices) & set(order_tiers)), tier_count)
    return quantity * Decimal(tier_count)


def cost_decoration(
    line: DecorationLine, catalog: CostingCatalog, order_tiers: Sequence[int]
) -> DecorationCostLine:
    """Price one decoration line.

    Raises:
        DecorationTechniqueNotFound: If the technique is not in the catalog
    """
    technique = catalog.decoration_technique(line.technique_id)
    if technique is None:
        raise DecorationTechniqueNotFound(line.technique_id)

    unit = effective_unit(line, technique.unit)
    qty = quantity_multiplier(unit, line.quantity, order_tiers, line.tier_indices)
    minutes = technique.labor_minutes * qty
    role_name, rate, _fallback = resolve_role(catalog, technique.labor_role_id, ROLE_DECORATOR)

    return DecorationCostLine(
        technique_id=technique.id,
        sku=technique.sku,
        name=technique.name,
        category=technique.category,
        unit=unit,
        quantity=line.quantity,
        quantity_multiplier=qty,
        unit_cost=technique.default_cost_per_unit,
        material_cost=technique.default_cost_per_unit * qty,
        labor_minutes=minutes,
        labor_role_name=role_name,
        labor_role_id=technique.labor_role_id,
        labor_rate=rate,
        labor_cost=labor_cost(minutes, rate),
    )


def cost_decorations(
    lines: Iterable[DecorationLine], catalog: CostingCatalog, order_tiers: Sequence[int]
) -> List[DecorationCostLine]:
    """
    Price every decoration line of an order.

    Transaction boundary: Pure computation (no database access).
    """
    return [cost_decoration(line, catalog, order_tiers) for line in lines]
