"""
Recipe management service for Pantrify application.

Creates recipes from raw text, imports search results into a user's library,
and builds the ranked library view against the user's pantry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from models import Recipe, WebRecipeResult
from services.database_service import DatabaseService, get_database_service
from services.matching_service import RecipeMatch, count_ready, rank_library, score_recipe, ReadinessScore
from services.pantry_service import PantryService
from utils import get_logger

logger = get_logger(__name__)


class RecipeCategory(Enum):
    """Library filter chips; each matches a recipe tag case-insensitively"""
    ALL = "All"
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    QUICK = "Quick & Easy"

    @property
    def tag_key(self) -> Optional[str]:
        return None if self is RecipeCategory.ALL else self.value


@dataclass
class IngredientAvailability:
    """One ingredient line of a recipe and whether the pantry has it"""
    key: str
    display: str
    available: bool


@dataclass
class LibraryView:
    """Ranked library plus the header counts"""
    matches: List[RecipeMatch]
    ready_count: int
    total_count: int

    @property
    def subtitle(self) -> str:
        return f"{self.ready_count} Ready • {self.total_count} Total"


def import_from_search_result(result: WebRecipeResult, user_id: Optional[int]) -> Recipe:
    """
    Map a search hit into an (unsaved) Recipe owned by user_id.

    Every ingredient line is normalized into the parallel key/display lists,
    blank instruction lines are dropped, and cook time, servings and
    difficulty stay empty since the source does not provide them.
    Importing the same hit twice yields two independent recipes.
    """
    return Recipe.from_raw_ingredients(
        title=result.title,
        ingredients=result.ingredients,
        instructions=result.instructions,
        tags=result.tags,
        source_url=result.link,
        user_id=user_id,
        cook_time_minutes=None,
        servings=None,
        difficulty=None,
        is_planned=False
    )


class RecipeService:
    """
    Recipe library operations for a single user.
    """

    def __init__(self, database_service: Optional[DatabaseService] = None,
                 pantry_service: Optional[PantryService] = None):
        self.db = database_service or get_database_service()
        self.pantry_service = pantry_service or PantryService(self.db)

    def create_recipe(self, user_id: int, title: str, ingredients: Iterable[str], instructions: Iterable[str],
                      tags: Iterable[str] = (), source_url: Optional[str] = None,
                      cook_time_minutes: Optional[int] = None, servings: Optional[int] = None,
                      difficulty: Optional[str] = None,
                      is_planned: bool = False) -> Tuple[Optional[Recipe], Optional[str]]:
        """
        Create a recipe from raw ingredient lines and instruction steps.

        Returns:
            (recipe, None) on success, (None, error message) otherwise
        """
        if not (title or "").strip():
            return None, "Please enter a title."

        recipe = Recipe.from_raw_ingredients(
            title=title,
            ingredients=ingredients,
            instructions=instructions,
            tags=tags,
            source_url=(source_url or "").strip() or None,
            user_id=user_id,
            cook_time_minutes=cook_time_minutes,
            servings=servings,
            difficulty=difficulty,
            is_planned=is_planned
        )
        if not recipe.instructions:
            return None, "Please enter at least one instruction step."

        return self._save(recipe)

    def import_recipe(self, result: WebRecipeResult, user_id: int) -> Tuple[Optional[Recipe], Optional[str]]:
        """Import a search hit into the user's library (no de-duplication)"""
        recipe = import_from_search_result(result, user_id)
        saved, error = self._save(recipe)
        if saved:
            logger.info(f"Imported search result {result.id} as recipe {saved.id} for user {user_id}")
        return saved, error

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        return self.db.get_recipe_by_id(recipe_id)

    def get_user_recipes(self, user_id: int, category: RecipeCategory = RecipeCategory.ALL) -> List[Recipe]:
        """User's recipes (newest first), optionally filtered by category tag"""
        recipes = self.db.get_user_recipes(user_id)
        tag = category.tag_key
        if tag is None:
            return recipes
        return [r for r in recipes if r.has_tag(tag)]

    def get_library_view(self, user_id: int, category: RecipeCategory = RecipeCategory.ALL) -> LibraryView:
        """Recipes ranked ready-first against the current pantry"""
        pantry_keys = self.pantry_service.get_pantry_keys(user_id)
        all_recipes = self.db.get_user_recipes(user_id)
        filtered = self.get_user_recipes(user_id, category)
        return LibraryView(
            matches=rank_library(filtered, pantry_keys),
            ready_count=count_ready(all_recipes, pantry_keys),
            total_count=len(all_recipes)
        )

    def get_readiness(self, recipe: Recipe, user_id: int) -> ReadinessScore:
        pantry_keys = self.pantry_service.get_pantry_keys(user_id)
        return score_recipe(recipe.ingredient_keys, pantry_keys, recipe.display_ingredients)

    def get_ingredient_availability(self, recipe: Recipe, user_id: int) -> List[IngredientAvailability]:
        """Per-line availability for the recipe detail view"""
        pantry_keys = self.pantry_service.get_pantry_keys(user_id)
        return [
            IngredientAvailability(key=key, display=display, available=key in pantry_keys)
            for key, display in recipe.ingredient_pairs()
        ]

    def set_planned(self, recipe_id: int, is_planned: bool) -> bool:
        return self.db.update_recipe_flags(recipe_id, is_planned=is_planned)

    def set_cooked(self, recipe_id: int, is_cooked: bool) -> bool:
        updated = self.db.update_recipe_flags(recipe_id, is_cooked=is_cooked)
        if updated:
            logger.info(f"Recipe {recipe_id} marked {'cooked' if is_cooked else 'not cooked'}")
        return updated

    def delete_recipe(self, recipe_id: int) -> bool:
        deleted = self.db.delete_recipe(recipe_id)
        if not deleted:
            logger.warning(f"Recipe {recipe_id} could not be deleted")
        return deleted

    def get_cooked_count(self, user_id: int) -> int:
        return self.db.count_cooked_recipes(user_id)

    def _save(self, recipe: Recipe) -> Tuple[Optional[Recipe], Optional[str]]:
        saved = self.db.create_recipe(recipe)
        if saved is None:
            return None, f"Failed to save {recipe.title}. Please try again."
        return saved, None


# Global service instance
_recipe_service: Optional[RecipeService] = None


def get_recipe_service(database_service: Optional[DatabaseService] = None) -> RecipeService:
    """Get singleton recipe service instance"""
    global _recipe_service
    if _recipe_service is None:
        _recipe_service = RecipeService(database_service)
    return _recipe_service
