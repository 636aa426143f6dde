"""
Pantry and recipe data models for the Pantrify application.

All models use dataclasses that map to SQLite tables. Ingredient names and
recipe ingredient lines are normalized once, at construction time, so the
canonical key always agrees with the display form it was derived from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Iterable, Tuple

from utils.ingredient_names import normalize_ingredient_name


@dataclass
class Ingredient:
    """
    Pantry item owned by exactly one user.
    `name` is the display form and `normalized` the canonical key.
    """
    id: int
    user_id: int
    name: str
    normalized: str
    unit_category: str  # grams, liters, pieces
    unit: str  # mg, g, kg, ml, L, kL, pcs
    quantity: float
    created_at: datetime = field(default_factory=datetime.now)
    
    @classmethod
    def from_raw_name(cls, raw_name: str, user_id: int, unit_category: str, unit: str,
                      quantity: float, id: int = 0) -> 'Ingredient':
        """Build an ingredient, deriving display name and key together"""
        display, key = normalize_ingredient_name(raw_name)
        return cls(
            id=id,
            user_id=user_id,
            name=display,
            normalized=key,
            unit_category=unit_category,
            unit=unit,
            quantity=quantity
        )
    
    def get_display_quantity(self) -> str:
        """Format quantity for display, e.g. '2.50 kg'"""
        return f"{self.quantity:.2f} {self.unit}"


@dataclass
class Recipe:
    """
    Recipe owned by the user who added it.
    
    `ingredient_keys` and `display_ingredients` are parallel lists: entry i of
    each comes from the same raw ingredient line.
    """
    id: int
    title: str
    ingredient_keys: List[str] = field(default_factory=list)
    display_ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    user_id: Optional[int] = None
    source_url: Optional[str] = None
    cook_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    is_planned: bool = False
    is_cooked: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    
    def __post_init__(self):
        if len(self.ingredient_keys) != len(self.display_ingredients):
            raise ValueError(
                f"Recipe '{self.title}' has {len(self.ingredient_keys)} ingredient keys "
                f"but {len(self.display_ingredients)} display ingredients"
            )
    
    @classmethod
    def from_raw_ingredients(cls, title: str, ingredients: Iterable[str], instructions: Iterable[str],
                             tags: Iterable[str] = (), source_url: Optional[str] = None,
                             user_id: Optional[int] = None, cook_time_minutes: Optional[int] = None,
                             servings: Optional[int] = None, difficulty: Optional[str] = None,
                             is_planned: bool = False, id: int = 0) -> 'Recipe':
        """Create a recipe from raw ingredient lines and instruction text"""
        keys, displays = split_ingredient_lines(ingredients)
        return cls(
            id=id,
            title=title.strip(),
            ingredient_keys=keys,
            display_ingredients=displays,
            instructions=clean_steps(instructions),
            tags=clean_tags(tags),
            user_id=user_id,
            source_url=source_url,
            cook_time_minutes=cook_time_minutes,
            servings=servings,
            difficulty=difficulty,
            is_planned=is_planned,
            is_cooked=False
        )
    
    def ingredient_pairs(self) -> List[Tuple[str, str]]:
        """(key, display) pairs in recipe order"""
        return list(zip(self.ingredient_keys, self.display_ingredients))
    
    def has_tag(self, tag: str) -> bool:
        """Check if recipe has a specific tag (case-insensitive)"""
        wanted = tag.lower()
        return any(t.lower() == wanted for t in self.tags)


def split_ingredient_lines(lines: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Normalize raw ingredient lines into parallel (keys, displays) lists"""
    keys = []
    displays = []
    for line in lines:
        display, key = normalize_ingredient_name(line)
        keys.append(key)
        displays.append(display)
    return keys, displays


def clean_steps(steps: Iterable[str]) -> List[str]:
    """Trim instruction steps, dropping blank ones"""
    return [step.strip() for step in steps if step and step.strip()]


def clean_tags(tags: Iterable[str]) -> List[str]:
    """Trim tags and drop blanks and repeats, keeping first-seen order"""
    seen = []
    for tag in tags:
        tag = (tag or "").strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen
