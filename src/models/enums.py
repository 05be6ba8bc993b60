"""
Enumerations for cake costing.

This module contains enums shared by the catalog models and the costing
engine:
- RecipeType: Which part of a tier a recipe produces
- TierShape: Pan shape used by the geometry calculator
- DecorationUnit: How a decoration's quantity scales with the cake
- DiscountType: How a discount value is interpreted
"""

from enum import Enum


class RecipeType(str, Enum):
    """
    Recipe role within a tier.

    Values:
        BATTER: Cake layers; fills the whole tier volume
        FILLING: Thin interior layer between cake layers
        FROSTING: Outer coat and crumb coat
    """

    BATTER = "BATTER"
    FILLING = "FILLING"
    FROSTING = "FROSTING"


class TierShape(str, Enum):
    """
    Pan shape of a tier.

    Heart and hexagon volumes are approximations (0.8·d² footprint and a
    regular hexagon whose side is d/√3 respectively).
    """

    ROUND = "round"
    SQUARE = "square"
    RECTANGLE = "rectangle"
    OVAL = "oval"
    HEART = "heart"
    HEXAGON = "hexagon"

    @classmethod
    def parse(cls, value, default: "TierShape" = None) -> "TierShape":
        """Case-insensitive lookup; returns default (round) for unknown values."""
        if isinstance(value, cls):
            return value
        if value:
            lowered = str(value).strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return default if default is not None else cls.ROUND


class DecorationUnit(str, Enum):
    """
    Quantity scaling rule for a decoration technique.

    Values:
        SINGLE: One cost per named item regardless of cake size
        CAKE: One per whole cake
        TIER: Multiplied by the number of tiers
        SET: One per set of items
    """

    SINGLE = "SINGLE"
    CAKE = "CAKE"
    TIER = "TIER"
    SET = "SET"


class DiscountType(str, Enum):
    """
    Discount interpretation.

    Values:
        PERCENT: Value is a percentage of the suggested price
        FIXED: Value is a money amount
    """

    PERCENT = "PERCENT"
    FIXED = "FIXED"
