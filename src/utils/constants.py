"""
Constants for the Cake Costing application.

This module defines all system-wide constants including:
- Application metadata
- Unit types for catalog ingredients
- Costing defaults (markup, topper fee, fallback labor rates)
- Physical conversion factors used by the geometry calculator
- Setting keys read from the settings table
- Validation limits and error messages
"""

from typing import Dict, List

# ============================================================================
# Database
# ============================================================================

DATABASE_FILENAME = "cake_costing.db"

# ============================================================================
# Unit Types
# ============================================================================

WEIGHT_UNITS: List[str] = [
    "g",  # Gram
    "kg",  # Kilogram
    "oz",  # Ounce
    "lb",  # Pound
]

VOLUME_UNITS: List[str] = [
    "ml",  # Milliliter
    "l",  # Liter
    "tsp",  # Teaspoon
    "tbsp",  # Tablespoon
    "cup",  # Cup
    "fl oz",  # Fluid ounce
]

COUNT_UNITS: List[str] = [
    "each",
    "piece",
    "dozen",
]

ALL_UNITS: List[str] = WEIGHT_UNITS + VOLUME_UNITS + COUNT_UNITS

# ============================================================================
# Costing Defaults
# ============================================================================

# Markup applied to cost before delivery when neither the request nor the
# settings table supply one (0.70 = 70%)
DEFAULT_MARKUP_PERCENT = "0.70"

# Flat fee for any non-custom topper
STANDARD_TOPPER_FEE = "5.00"

ROLE_BAKER = "Baker"
ROLE_DECORATOR = "Decorator"
ROLE_BAKERY_ASSISTANT = "Bakery Assistant"

# Hourly rates used when a labor role is missing from the catalog
FALLBACK_LABOR_RATES: Dict[str, str] = {
    ROLE_BAKER: "21",
    ROLE_DECORATOR: "30",
    ROLE_BAKERY_ASSISTANT: "18",
}

# Fraction of a tier's volume each recipe type has to fill
RECIPE_VOLUME_FACTORS: Dict[str, str] = {
    "BATTER": "1.0",
    "FROSTING": "0.36",
    "FILLING": "0.12",
}

# Words dropped from free text and recipe names before matching
RECIPE_NAME_SUFFIXES: List[str] = ["batter", "filling", "frosting", "buttercream"]

TOPPER_NONE = "none"

# Free text meaning "no recipe requested" (e.g. filling: "None")
NO_SELECTION_TEXT = "none"
TOPPER_CUSTOM = "custom"

# ============================================================================
# Physical Constants
# ============================================================================

ML_PER_CUBIC_INCH = 16.387
CM_PER_INCH = 2.54
GRAMS_PER_OUNCE = 28.3495
ML_PER_CUP = 236.588

# Unparseable tier size strings fall back to an 8" round
DEFAULT_TIER_DIAMETER_INCHES = 8

# Complexity 1/2/3 scale the crumb coat; anything else counts as medium
COMPLEXITY_MULTIPLIERS: Dict[int, float] = {1: 1.0, 2: 1.5, 3: 2.0}
DEFAULT_COMPLEXITY_MULTIPLIER = 1.5

# ============================================================================
# Setting Keys
# ============================================================================

SETTING_MARKUP_PERCENT = "MarkupPercent"
SETTING_STANDARD_TOPPER_FEE = "StandardTopperFee"

SETTING_LAYERS_PER_TIER = "ProductionLayersPerTier"
SETTING_LAYER_HEIGHT_INCHES = "ProductionLayerHeightInches"
SETTING_STANDARD_TIER_HEIGHT_INCHES = "ProductionStandardTierHeightInches"
SETTING_BATTER_GRAMS_PER_CUBIC_INCH = "ProductionBatterGramsPerCubicInch"
SETTING_BATTER_SHRINKAGE_FACTOR = "ProductionBatterShrinkageFactor"
SETTING_BUTTERCREAM_INTERNAL_GRAMS_PER_LAYER = "ProductionButtercreamInternalGramsPerLayer"
SETTING_BUTTERCREAM_CRUMB_COAT_GRAMS_PER_SQ_INCH = "ProductionButtercreamCrumbCoatGramsPerSqInch"
SETTING_BUTTERCREAM_FINAL_COAT_GRAMS_PER_SQ_INCH = "ProductionButtercreamFinalCoatGramsPerSqInch"
SETTING_DEFAULT_SURPLUS_PERCENT = "ProductionDefaultSurplusPercent"
SETTING_DEFAULT_UNITS = "ProductionDefaultUnits"
SETTING_DEFAULT_ASSEMBLY_MINUTES = "ProductionDefaultAssemblyMinutes"
SETTING_ASSEMBLY_MINUTES_BY_SIZE = "ProductionAssemblyMinutesBySize"

# ============================================================================
# Seed Data
# ============================================================================

# Standard tier sizes: (name, diameter inches, shape, servings)
STANDARD_TIER_SIZES = [
    ("6 inch round", 6, "round", 12),
    ("8 inch round", 8, "round", 24),
    ("10 inch round", 10, "round", 38),
    ("12 inch round", 12, "round", 56),
    ("10 inch square", 10, "square", 50),
]

STANDARD_TIER_HEIGHT_CM = 10.16

# ============================================================================
# Validation Limits
# ============================================================================

MAX_NAME_LENGTH = 200
MAX_UNIT_LENGTH = 50
MIN_COST = 0.0
MAX_COST = 999999.99
MAX_MARKUP_PERCENT = 10.0

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_POSITIVE = "Value must be greater than zero"
ERROR_INVALID_NON_NEGATIVE = "Value must be zero or greater"
ERROR_INVALID_UNIT = "Invalid unit type"
ERROR_INVALID_SHAPE = "Invalid tier shape"
ERROR_NO_TIER_SIZE = "Tier needs a volume or a diameter"
