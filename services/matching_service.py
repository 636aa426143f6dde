"""
Recipe readiness scoring and ranking for Pantrify application.

Compares a recipe's canonical ingredient keys with the keys of a user's pantry
to decide whether the recipe can be cooked now, what is missing, and how
recipes should be ordered ("what can I make" first).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Set

from utils.ingredient_names import join_names

MISSING_SUMMARY_LIMIT = 6
ALL_AVAILABLE_TEXT = "All ingredients available."
READY_BADGE = "Ready to Cook"


@dataclass
class ReadinessScore:
    """How much of a recipe the pantry covers"""
    have: int
    total: int
    missing_display_names: List[str] = field(default_factory=list)
    
    @property
    def ready(self) -> bool:
        # vacuously ready with zero ingredients
        return self.have == self.total
    
    @property
    def missing_count(self) -> int:
        return self.total - self.have
    
    @property
    def badge(self) -> str:
        """Short status chip text"""
        return READY_BADGE if self.missing_count == 0 else f"Missing {self.missing_count}"
    
    @property
    def summary(self) -> str:
        """One line listing up to six missing ingredients"""
        return missing_summary(self.missing_display_names)


@dataclass
class RecipeMatch:
    """
    A recipe (saved Recipe or WebRecipeResult) paired with its readiness.
    """
    recipe: Any
    score: ReadinessScore
    
    @property
    def title(self) -> str:
        return self.recipe.title
    
    @property
    def can_make(self) -> bool:
        return self.score.ready


class TieBreak(Enum):
    """Ordering among recipes with equal readiness and have-count"""
    TITLE = "title"  # saved library: alphabetical browsing
    ORIGINAL_ORDER = "original_order"  # search results: keep source relevance


def score_recipe(recipe_keys: Sequence[str], pantry_keys: Set[str],
                 display_names: Optional[Sequence[str]] = None) -> ReadinessScore:
    """
    Score recipe keys against pantry keys.
    
    Args:
        recipe_keys: Canonical ingredient keys in recipe order (duplicates count)
        pantry_keys: Canonical keys present in the pantry
        display_names: Display forms parallel to recipe_keys; the keys
            themselves are reported as missing names when omitted
    """
    if display_names is None:
        display_names = recipe_keys
    elif len(display_names) != len(recipe_keys):
        raise ValueError("display_names must be parallel to recipe_keys")
    
    have = 0
    missing = []
    for key, display in zip(recipe_keys, display_names):
        if key in pantry_keys:
            have += 1
        else:
            missing.append(display)
    
    return ReadinessScore(have=have, total=len(recipe_keys), missing_display_names=missing)


def score_match(recipe: Any, pantry_keys: Set[str]) -> RecipeMatch:
    """Score anything exposing ingredient_keys and display_ingredients"""
    score = score_recipe(recipe.ingredient_keys, pantry_keys, recipe.display_ingredients)
    return RecipeMatch(recipe=recipe, score=score)


def missing_summary(missing_display_names: Sequence[str]) -> str:
    """
    'Missing a, b, and c' for up to six names, with a trailing ellipsis
    when more are missing, or the all-available phrase when none are.
    """
    if not missing_display_names:
        return ALL_AVAILABLE_TEXT
    
    shown = join_names(missing_display_names[:MISSING_SUMMARY_LIMIT])
    suffix = " …" if len(missing_display_names) > MISSING_SUMMARY_LIMIT else ""
    return f"Missing {shown}{suffix}"


def rank_matches(matches: Iterable[RecipeMatch], tie_break: TieBreak = TieBreak.TITLE) -> List[RecipeMatch]:
    """
    Order matches: ready first, then more available ingredients, then tie_break.
    Sorting is stable, so ORIGINAL_ORDER keeps the incoming order of ties.
    """
    if tie_break == TieBreak.TITLE:
        key = lambda m: (not m.score.ready, -m.score.have, m.title)
    else:
        key = lambda m: (not m.score.ready, -m.score.have)
    return sorted(matches, key=key)


def rank_library(recipes: Iterable[Any], pantry_keys: Set[str]) -> List[RecipeMatch]:
    """Rank a user's saved recipes, alphabetically among ties"""
    return rank_matches((score_match(r, pantry_keys) for r in recipes), TieBreak.TITLE)


def rank_search_results(results: Iterable[Any], pantry_keys: Set[str],
                        prioritize_ready: bool = True) -> List[RecipeMatch]:
    """
    Rank freshly fetched search hits.
    
    With prioritize_ready off the fetch order is returned unchanged; with it on,
    ties keep their fetch order.
    """
    matches = [score_match(r, pantry_keys) for r in results]
    if not prioritize_ready:
        return matches
    return rank_matches(matches, TieBreak.ORIGINAL_ORDER)


def count_ready(recipes: Iterable[Any], pantry_keys: Set[str]) -> int:
    """Number of recipes fully covered by the pantry"""
    return sum(1 for r in recipes if score_match(r, pantry_keys).can_make)
