"""
Labor aggregation by role.

Minutes are accumulated per role name and split into production minutes
(recipe labor, tier assembly, manual hours) and decoration minutes. The
split is what separates base labor cost from total labor cost.

Role lookup: the referenced role id, else the default role by name from the
catalog, else the hard-coded fallback rate (Baker $21, Decorator $30,
Bakery Assistant $18; any other unknown role is priced as Baker).
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import FALLBACK_LABOR_RATES, ROLE_BAKER

from .catalog import CostingCatalog

logger = get_service_logger(__name__)

MINUTES_PER_HOUR = Decimal("60")


def fallback_rate(role_name: str) -> Decimal:
    """Hard-coded hourly rate for a role missing from the catalog."""
    return Decimal(FALLBACK_LABOR_RATES.get(role_name, FALLBACK_LABOR_RATES[ROLE_BAKER]))


def labor_cost(minutes: Decimal, hourly_rate: Decimal) -> Decimal:
    """minutes × rate / 60 (multiplied first so whole-cent rates stay exact)."""
    return minutes * hourly_rate / MINUTES_PER_HOUR


def resolve_role(
    catalog: CostingCatalog, role_id: Optional[int], default_role_name: str
) -> Tuple[str, Decimal, bool]:
    """
    Find the role that does a piece of work.

    Returns:
        (role_name, hourly_rate, used_fallback_rate)
    """
    role = catalog.labor_role(role_id) if role_id is not None else None
    if role is None:
        role = catalog.labor_role_by_name(default_role_name)
    if role is not None:
        return role.name, role.hourly_rate, False

    log_operation(
        logger,
        operation="resolve_labor_role",
        outcome="fallback_rate",
        level=logging.DEBUG,
        role_id=role_id,
        role_name=default_role_name,
    )
    return default_role_name, fallback_rate(default_role_name), True


@dataclass
class _RoleBucket:
    role_name: str
    hourly_rate: Decimal
    used_fallback_rate: bool
    production_minutes: Decimal = field(default_factory=lambda: Decimal("0"))
    decoration_minutes: Decimal = field(default_factory=lambda: Decimal("0"))
    decoration_cost: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass(frozen=True)
class LaborLine:
    """Per-role labor for display and audit."""

    role_name: str
    hourly_rate: Decimal
    production_minutes: Decimal
    decoration_minutes: Decimal
    production_cost: Decimal
    decoration_cost: Decimal
    used_fallback_rate: bool

    @property
    def total_minutes(self) -> Decimal:
        return self.production_minutes + self.decoration_minutes

    @property
    def total_cost(self) -> Decimal:
        return self.production_cost + self.decoration_cost


@dataclass(frozen=True)
class LaborSummary:
    lines: Tuple[LaborLine, ...]
    base_labor_cost: Decimal
    decoration_labor_cost: Decimal

    @property
    def total_labor_cost(self) -> Decimal:
        return self.base_labor_cost + self.decoration_labor_cost


class LaborAggregator:
    """Accumulates labor minutes for one calculation.

    Each calculate_cost() call builds its own aggregator; nothing is shared.
    """

    def __init__(self, catalog: CostingCatalog):
        self._catalog = catalog
        self._buckets: Dict[str, _RoleBucket] = {}

    def _bucket(self, role_id: Optional[int], default_role_name: str) -> _RoleBucket:
        name, rate, used_fallback = resolve_role(self._catalog, role_id, default_role_name)
        bucket = self._buckets.get(name)
        if bucket is None:
            bucket = _RoleBucket(role_name=name, hourly_rate=rate, used_fallback_rate=used_fallback)
            self._buckets[name] = bucket
        return bucket

    def add_production(
        self, minutes: Decimal, role_id: Optional[int], default_role_name: str = ROLE_BAKER
    ) -> None:
        """Recipe or assembly minutes."""
        if not minutes:
            return
        self._bucket(role_id, default_role_name).production_minutes += minutes

    def add_decoration(
        self, minutes: Decimal, cost: Decimal, role_name: str, role_id: Optional[int] = None
    ) -> None:
        """Decoration minutes with the cost DecorationCoster already priced."""
        if not minutes and not cost:
            return
        bucket = self._bucket(role_id, role_name)
        bucket.decoration_minutes += minutes
        bucket.decoration_cost += cost

    def add_manual_hours(self, hours: Optional[Decimal], role_name: str) -> None:
        """Manual adjustment hours, attributed straight to a named role."""
        if not hours:
            return
        self._bucket(None, role_name).production_minutes += hours * MINUTES_PER_HOUR

    def summarize(self) -> LaborSummary:
        lines = []
        base = Decimal("0")
        decoration = Decimal("0")
        for bucket in self._buckets.values():
            production_cost = labor_cost(bucket.production_minutes, bucket.hourly_rate)
            base += production_cost
            decoration += bucket.decoration_cost
            lines.append(
                LaborLine(
                    role_name=bucket.role_name,
                    hourly_rate=bucket.hourly_rate,
                    production_minutes=bucket.production_minutes,
                    decoration_minutes=bucket.decoration_minutes,
                    production_cost=production_cost,
                    decoration_cost=bucket.decoration_cost,
                    used_fallback_rate=bucket.used_fallback_rate,
                )
            )
        return LaborSummary(
            lines=tuple(lines), base_labor_cost=base, decoration_labor_cost=decoration
        )
