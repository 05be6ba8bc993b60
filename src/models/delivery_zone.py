"""
DeliveryZone model: flat fee plus optional per-mile fee.
"""

from sqlalchemy import Boolean, Column, Float, Numeric, String

from .base import BaseModel


class DeliveryZone(BaseModel):
    """
    Delivery zone.

    Attributes:
        name: Zone name (e.g., "Local", "Metro")
        base_fee: Flat delivery fee
        per_mile_fee: Optional fee per mile
        distance_miles: Typical distance, used when the order has none
        is_active: Inactive zones are left out of the costing catalog
    """

    __tablename__ = "delivery_zones"

    name = Column(String(100), nullable=False, unique=True)
    base_fee = Column(Numeric(10, 2), nullable=False, default=0)
    per_mile_fee = Column(Numeric(10, 2), nullable=True)
    distance_miles = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
