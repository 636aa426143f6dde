"""
Pantry management service for Pantrify application.

Manages a user's ingredient inventory: adding items with a unit, adjusting
quantities with the +/- controls, and removing items. Supplies the pantry key
set used for recipe readiness.
"""

from typing import List, Optional, Set, Tuple

from models import Ingredient
from services.database_service import DatabaseService, get_database_service
from services.unit_service import default_unit, is_valid_unit, parse_category
from utils import get_logger

logger = get_logger(__name__)

QUANTITY_STEP = 1.0


class PantryService:
    """
    Service for managing user pantry items.

    Validation problems and save failures are returned as user-facing
    messages alongside a None ingredient.
    """

    def __init__(self, database_service: Optional[DatabaseService] = None):
        self.db = database_service or get_database_service()

    def add_ingredient(self, user_id: int, raw_name: str, unit_category: Optional[str],
                       unit: Optional[str] = None, quantity: float = 0) -> Tuple[Optional[Ingredient], Optional[str]]:
        """
        Add an ingredient to a user's pantry.

        Args:
            user_id: Owner
            raw_name: Name as typed; normalized before storing
            unit_category: grams, liters or pieces (None while still undetected)
            unit: Sub-unit within the category; falls back to the category default
            quantity: Non-negative amount in `unit`

        Returns:
            (ingredient, None) on success, (None, error message) otherwise
        """
        trimmed = (raw_name or "").strip()
        if not trimmed:
            return None, "Please enter a name."

        category = parse_category(unit_category)
        if category is None:
            return None, "Please enter a valid ingredient."

        if quantity is None or quantity < 0:
            return None, "Quantity cannot be negative."

        if not unit or not is_valid_unit(category, unit):
            unit = default_unit(category)

        ingredient = Ingredient.from_raw_name(trimmed, user_id, category.value, unit, float(quantity))
        saved = self.db.create_ingredient(ingredient)
        if saved is None:
            return None, f"Failed to save {ingredient.name}. Please try again."

        logger.info(f"Added {saved.name} ({saved.get_display_quantity()}) to pantry of user {user_id}")
        return saved, None

    def get_user_pantry(self, user_id: int) -> List[Ingredient]:
        """Get user's pantry in the order items were added"""
        return self.db.get_user_ingredients(user_id)

    def get_pantry_keys(self, user_id: int) -> Set[str]:
        """Canonical keys of everything in the user's pantry"""
        return {item.normalized for item in self.get_user_pantry(user_id)}

    def increment(self, ingredient_id: int, step: float = QUANTITY_STEP) -> Optional[Ingredient]:
        """Raise quantity by step; None if the item is gone or the save failed"""
        ingredient = self.db.get_ingredient_by_id(ingredient_id)
        if ingredient is None:
            logger.warning(f"Ingredient {ingredient_id} not found for increment")
            return None

        new_quantity = ingredient.quantity + step
        if not self.db.update_ingredient_quantity(ingredient_id, new_quantity):
            return None

        ingredient.quantity = new_quantity
        return ingredient

    def decrement(self, ingredient_id: int, step: float = QUANTITY_STEP) -> Tuple[Optional[Ingredient], bool]:
        """
        Lower quantity by step, deleting the item once it reaches zero.

        Returns:
            (updated ingredient or None, True if the item was removed)
        """
        ingredient = self.db.get_ingredient_by_id(ingredient_id)
        if ingredient is None:
            logger.warning(f"Ingredient {ingredient_id} not found for decrement")
            return None, False

        new_quantity = ingredient.quantity - step
        if new_quantity <= 0:
            removed = self.db.delete_ingredient(ingredient_id)
            if removed:
                logger.info(f"Removed {ingredient.name} from pantry (quantity reached zero)")
            return None, removed

        if not self.db.update_ingredient_quantity(ingredient_id, new_quantity):
            return None, False

        ingredient.quantity = new_quantity
        return ingredient, False

    def remove_ingredient(self, ingredient_id: int) -> bool:
        """Explicitly remove a pantry item"""
        removed = self.db.delete_ingredient(ingredient_id)
        if removed:
            logger.info(f"Removed ingredient {ingredient_id} from pantry")
        else:
            logger.warning(f"Ingredient {ingredient_id} could not be removed")
        return removed

    def get_pantry_summary(self, user_id: int) -> str:
        """'No ingredients yet' or 'N ingredient(s)'"""
        count = len(self.get_user_pantry(user_id))
        if count == 0:
            return "No ingredients yet"
        return f"{count} ingredient{'' if count == 1 else 's'}"


# Global service instance
_pantry_service: Optional[PantryService] = None


def get_pantry_service(database_service: Optional[DatabaseService] = None) -> PantryService:
    """Get singleton pantry service instance"""
    global _pantry_service
    if _pantry_service is None:
        _pantry_service = PantryService(database_service)
    return _pantry_service
