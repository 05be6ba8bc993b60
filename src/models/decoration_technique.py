"""
DecorationTechnique model for priced decoration work.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class DecorationTechnique(BaseModel):
    """
    Decoration technique with material cost and labor time per unit.

    Attributes:
        sku: Short catalog code (unique)
        name: Display name (e.g., "Sugar Flowers")
        category: Grouping (e.g., "Fondant", "Piping")
        unit: SINGLE, CAKE, TIER or SET (see DecorationUnit)
        default_cost_per_unit: Material cost per unit
        labor_minutes: Labor minutes per unit
        labor_role_id: Role doing the work (Decorator when NULL)
        is_active: Inactive techniques are left out of the costing catalog
    """

    __tablename__ = "decoration_techniques"

    sku = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False, default="General")
    unit = Column(String(10), nullable=False, default="SINGLE")
    default_cost_per_unit = Column(Numeric(10, 4), nullable=False, default=0)
    labor_minutes = Column(Float, nullable=False, default=0)
    labor_role_id = Column(
        Integer, ForeignKey("labor_roles.id", ondelete="SET NULL"), nullable=True
    )
    is_active = Column(Boolean, nullable=False, default=True)

    labor_role = relationship("LaborRole", lazy="joined")

    __table_args__ = (
        CheckConstraint("unit IN ('SINGLE', 'CAKE', 'TIER', 'SET')", name="ck_decoration_unit"),
        CheckConstraint("labor_minutes >= 0", name="ck_decoration_labor_non_negative"),
    )
