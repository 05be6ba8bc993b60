"""
TierSize model: the admin table of pan sizes orders and quotes pick from.
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class TierSize(BaseModel):
    """
    Tier size.

    Attributes:
        name: Display name (e.g., "8 inch round")
        shape: round, square, rectangle, oval, heart or hexagon
        diameter_cm: Diameter (or width) in centimeters
        length_cm: Length for rectangle and oval pans
        height_cm: Finished tier height
        volume_ml: Stored volume; derived from the geometry when NULL
        servings: Servings the tier yields
        assembly_minutes: Stack/fill/crumb-coat time; derived from the
            diameter when NULL
        assembly_role_id: Role doing the assembly (Baker when NULL)
    """

    __tablename__ = "tier_sizes"

    name = Column(String(100), nullable=False, unique=True)
    shape = Column(String(20), nullable=False, default="round")
    diameter_cm = Column(Float, nullable=False)
    length_cm = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)
    volume_ml = Column(Integer, nullable=True)
    servings = Column(Integer, nullable=False, default=0)
    assembly_minutes = Column(Integer, nullable=True)
    assembly_role_id = Column(
        Integer, ForeignKey("labor_roles.id", ondelete="SET NULL"), nullable=True
    )

    assembly_role = relationship("LaborRole", lazy="joined")

    __table_args__ = (
        CheckConstraint("diameter_cm > 0", name="ck_tier_size_diameter_positive"),
        CheckConstraint("servings >= 0", name="ck_tier_size_servings_non_negative"),
    )
