"""
Database models package.

This package contains all SQLAlchemy ORM models for the costing catalog.
"""

from .base import Base, BaseModel
from .enums import DecorationUnit, DiscountType, RecipeType, TierShape
from .ingredient import Ingredient
from .labor_role import LaborRole
from .recipe import Recipe, RecipeIngredient
from .decoration_technique import DecorationTechnique
from .delivery_zone import DeliveryZone
from .tier_size import TierSize
from .setting import Setting

__all__ = [
    "Base",
    "BaseModel",
    "DecorationUnit",
    "DiscountType",
    "RecipeType",
    "TierShape",
    "Ingredient",
    "LaborRole",
    "Recipe",
    "RecipeIngredient",
    "DecorationTechnique",
    "DeliveryZone",
    "TierSize",
    "Setting",
]
