"""
LaborRole model: a named role with an hourly rate.
"""

from sqlalchemy import Boolean, Column, Numeric, String, Text

from .base import BaseModel


class LaborRole(BaseModel):
    """
    Labor role used to price recipe, assembly and decoration time.

    Attributes:
        name: Role name (e.g., "Baker", "Decorator", "Bakery Assistant")
        hourly_rate: Dollars per hour
        description: What the role does
        is_active: Inactive roles are left out of the costing catalog
    """

    __tablename__ = "labor_roles"

    name = Column(String(100), nullable=False, unique=True, index=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
