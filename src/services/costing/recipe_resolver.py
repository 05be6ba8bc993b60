"""
Recipe resolution for tiers.

For each component (BATTER, FILLING, FROSTING) a tier is matched to a
catalog recipe and a scaling multiplier:

1. An explicit recipe id on the tier wins when the catalog has it.
2. Otherwise the tier's free text (flavor, filling, finish type) is tried
   against the recipes of that type through MATCH_STRATEGIES, in order:
   name substring, first word, first recipe of the type.
3. BATTER always falls back to the first batter recipe, even with no text.
   FILLING and FROSTING with neither id nor text resolve to nothing.
4. No recipe of the type in the catalog means the component is omitted.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from src.models.enums import RecipeType
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import NO_SELECTION_TEXT, RECIPE_NAME_SUFFIXES

from .catalog import CostingCatalog, RecipeEntry
from .pricing import calculate_recipe_multiplier
from .snapshot import TierInput

logger = get_service_logger(__name__)

_SUFFIX_PATTERN = re.compile(r"\b(?:%s)\b" % "|".join(RECIPE_NAME_SUFFIXES), re.IGNORECASE)


class MatchSource(str, Enum):
    EXPLICIT = "explicit"
    NAME = "name"
    FIRST_WORD = "first_word"
    FIRST_OF_TYPE = "first_of_type"


class MultiplierSource(str, Enum):
    EXPLICIT = "explicit"
    VOLUME = "volume"
    DEFAULT = "default"


@dataclass(frozen=True)
class RecipeMatch:
    """A resolved recipe for one component of one tier."""

    tier_index: int
    recipe_type: RecipeType
    recipe: RecipeEntry
    multiplier: Decimal
    source: MatchSource
    multiplier_source: MultiplierSource
    tier_volume_ml: Optional[float] = None


def normalize_recipe_text(text: Optional[str]) -> str:
    """Lower-case, drop batter/filling/frosting/buttercream, collapse spaces."""
    if not text:
        return ""
    return " ".join(_SUFFIX_PATTERN.sub(" ", text.lower()).split())


def match_by_name(text: str, candidates: Sequence[RecipeEntry]) -> Optional[RecipeEntry]:
    """Recipe whose normalized name contains the text, or is contained in it."""
    needle = normalize_recipe_text(text)
    if not needle:
        return None
    for recipe in candidates:
        name = normalize_recipe_text(recipe.name)
        if name and (needle in name or name in needle):
            return recipe
    return None


def match_by_first_word(text: str, candidates: Sequence[RecipeEntry]) -> Optional[RecipeEntry]:
    """Recipe whose first name word equals the text's first word."""
    words = normalize_recipe_text(text).split()
    if not words:
        return None
    for recipe in candidates:
        name_words = normalize_recipe_text(recipe.name).split()
        if name_words and name_words[0] == words[0]:
            return recipe
    return None


def match_first_of_type(text: str, candidates: Sequence[RecipeEntry]) -> Optional[RecipeEntry]:
    """Catalog order tie-break: the first recipe declared for the type."""
    return candidates[0] if candidates else None


MatchStrategy = Callable[[str, Sequence[RecipeEntry]], Optional[RecipeEntry]]

MATCH_STRATEGIES: Tuple[Tuple[MatchSource, MatchStrategy], ...] = (
    (MatchSource.NAME, match_by_name),
    (MatchSource.FIRST_WORD, match_by_first_word),
    (MatchSource.FIRST_OF_TYPE, match_first_of_type),
)


def _component_inputs(
    tier: TierInput, recipe_type: RecipeType
) -> Tuple[Optional[int], Optional[Decimal], Optional[str]]:
    if recipe_type == RecipeType.BATTER:
        return tier.batter_recipe_id, tier.batter_multiplier, tier.flavor
    if recipe_type == RecipeType.FILLING:
        return tier.filling_recipe_id, tier.filling_multiplier, tier.filling
    return tier.frosting_recipe_id, tier.frosting_multiplier, tier.finish_type


def _free_text(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    stripped = text.strip()
    if not stripped or stripped.lower() == NO_SELECTION_TEXT:
        return None
    return stripped


def select_recipe(
    tier: TierInput, recipe_type: RecipeType, catalog: CostingCatalog
) -> Optional[Tuple[RecipeEntry, MatchSource]]:
    """Pick the recipe for one component, or None when it is omitted."""
    explicit_id, _multiplier, text = _component_inputs(tier, recipe_type)

    if explicit_id is not None:
        recipe = catalog.recipe(explicit_id)
        if recipe is not None and recipe.recipe_type == recipe_type:
            return recipe, MatchSource.EXPLICIT
        log_operation(
            logger,
            operation="resolve_recipe",
            outcome="explicit_recipe_missing",
            level=logging.WARNING,
            tier_index=tier.tier_index,
            recipe_type=recipe_type.value,
            recipe_id=explicit_id,
        )

    candidates = catalog.recipes_of_type(recipe_type)
    text = _free_text(text)

    if text is None and recipe_type != RecipeType.BATTER and explicit_id is None:
        return None

    if not candidates:
        log_operation(
            logger,
            operation="resolve_recipe",
            outcome="no_recipe_of_type",
            level=logging.WARNING,
            tier_index=tier.tier_index,
            recipe_type=recipe_type.value,
        )
        return None

    if text is None:
        return candidates[0], MatchSource.FIRST_OF_TYPE

    for source, strategy in MATCH_STRATEGIES:
        recipe = strategy(text, candidates)
        if recipe is not None:
            return recipe, source
    return None


def resolve_recipe(
    tier: TierInput,
    recipe_type: RecipeType,
    catalog: CostingCatalog,
    tier_volume_ml: Optional[float],
) -> Optional[RecipeMatch]:
    """Resolve one component of a tier to a recipe and multiplier."""
    selected = select_recipe(tier, recipe_type, catalog)
    if selected is None:
        return None
    recipe, source = selected

    _explicit_id, explicit_multiplier, _text = _component_inputs(tier, recipe_type)
    if explicit_multiplier is not None and explicit_multiplier > 0:
        multiplier = Decimal(str(explicit_multiplier))
        multiplier_source = MultiplierSource.EXPLICIT
    elif recipe.yield_volume_ml and tier_volume_ml:
        multiplier = calculate_recipe_multiplier(
            recipe.yield_volume_ml, tier_volume_ml, recipe_type
        )
        multiplier_source = MultiplierSource.VOLUME
    else:
        multiplier = Decimal("1.00")
        multiplier_source = MultiplierSource.DEFAULT
        log_operation(
            logger,
            operation="resolve_recipe",
            outcome="default_multiplier",
            level=logging.WARNING,
            tier_index=tier.tier_index,
            recipe_type=recipe_type.value,
            recipe_id=recipe.id,
        )

    return RecipeMatch(
        tier_index=tier.tier_index,
        recipe_type=recipe_type,
        recipe=recipe,
        multiplier=multiplier,
        source=source,
        multiplier_source=multiplier_source,
        tier_volume_ml=tier_volume_ml,
    )


def resolve_tier_recipes(tier: TierInput, catalog: CostingCatalog) -> List[RecipeMatch]:
    """
    Resolve BATTER, FILLING and FROSTING for a tier, in that order.

    Transaction boundary: Pure computation (no database access).
    """
    volume = tier.resolved_volume_ml(catalog.production_settings)
    matches = []
    for recipe_type in (RecipeType.BATTER, RecipeType.FILLING, RecipeType.FROSTING):
        match = resolve_recipe(tier, recipe_type, catalog, volume)
        if match is not None:
            matches.append(match)
    return matches
