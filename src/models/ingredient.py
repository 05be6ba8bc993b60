"""
Ingredient model for the costing catalog.

An ingredient is priced per unit (the same unit recipe lines are written in),
e.g. "All-Purpose Flour" at $0.0020 per g.
"""

from sqlalchemy import Column, String, Text, Numeric, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Ingredient(BaseModel):
    """
    Ingredient model representing a priced catalog ingredient.

    Attributes:
        name: Ingredient name (unique)
        category: Optional grouping (e.g., "Flour", "Dairy")
        unit: Unit that recipe quantities and cost_per_unit refer to
        cost_per_unit: Cost of one unit, stored as fixed-point decimal
        notes: Additional notes
    """

    __tablename__ = "ingredients"

    name = Column(String(200), nullable=False, unique=True, index=True)
    category = Column(String(100), nullable=True, index=True)
    unit = Column(String(50), nullable=False)
    cost_per_unit = Column(Numeric(10, 4), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    recipe_ingredients = relationship("RecipeIngredient", back_populates="ingredient")

    __table_args__ = (Index("idx_ingredient_category", "category"),)
