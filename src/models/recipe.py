"""
Recipe models for cake components.

This module contains:
- Recipe: A batter, filling or frosting recipe with its base yield and labor
- RecipeIngredient: Junction table linking recipes to ingredients
"""

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Text,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model for tier components.

    Attributes:
        name: Recipe name (e.g., "Vanilla Batter", "Chocolate Buttercream")
        recipe_type: BATTER, FILLING or FROSTING (see RecipeType)
        yield_volume_ml: Volume one batch produces; NULL means the recipe
            cannot be volume-scaled and is used at multiplier 1.0
        labor_minutes: Labor for one batch
        labor_role_id: Role doing that labor (Baker when NULL)
        notes: Additional notes

    Catalog order (by id) is the tie-break for first-of-type fallback.
    """

    __tablename__ = "recipes"

    name = Column(String(200), nullable=False, index=True)
    recipe_type = Column(String(20), nullable=False, index=True)
    yield_volume_ml = Column(Float, nullable=True)
    labor_minutes = Column(Float, nullable=True)
    labor_role_id = Column(
        Integer, ForeignKey("labor_roles.id", ondelete="SET NULL"), nullable=True
    )
    notes = Column(Text, nullable=True)

    labor_role = relationship("LaborRole", lazy="joined")
    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
        lazy="joined",
    )

    __table_args__ = (
        CheckConstraint(
            "recipe_type IN ('BATTER', 'FILLING', 'FROSTING')", name="ck_recipe_type_valid"
        ),
        CheckConstraint(
            "yield_volume_ml IS NULL OR yield_volume_ml > 0", name="ck_recipe_yield_positive"
        ),
        CheckConstraint(
            "labor_minutes IS NULL OR labor_minutes >= 0", name="ck_recipe_labor_non_negative"
        ),
    )


class RecipeIngredient(BaseModel):
    """
    Ingredient line of a recipe.

    Attributes:
        recipe_id: Foreign key to Recipe
        ingredient_id: Foreign key to Ingredient
        quantity: Amount for one batch, in the ingredient's unit
    """

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False
    )
    quantity = Column(Float, nullable=False)

    recipe = relationship("Recipe", back_populates="recipe_ingredients")
    ingredient = relationship("Ingredient", back_populates="recipe_ingredients", lazy="joined")

    __table_args__ = (
        Index("idx_recipe_ingredient_recipe", "recipe_id"),
        Index("idx_recipe_ingredient_ingredient", "ingredient_id"),
        CheckConstraint("quantity >= 0", name="ck_recipe_ingredient_quantity_non_negative"),
    )
