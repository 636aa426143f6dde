"""
Models for recipes fetched from the public recipe database.

WebRecipeResult lives only for the duration of a search session; it becomes a
persisted Recipe only when the user imports it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from utils.ingredient_names import normalize_ingredient_name


@dataclass
class WebRecipeResult:
    """
    External search hit with raw, unnormalized ingredient lines.
    """
    id: str
    title: str
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    source_url: Optional[str] = None
    video_url: Optional[str] = None
    
    @property
    def link(self) -> Optional[str]:
        """Web source if present, otherwise the video link"""
        return self.source_url or self.video_url or None
    
    @property
    def ingredient_keys(self) -> List[str]:
        return [normalize_ingredient_name(line)[1] for line in self.ingredients]
    
    @property
    def display_ingredients(self) -> List[str]:
        return [normalize_ingredient_name(line)[0] for line in self.ingredients]


@dataclass
class SearchResult:
    """
    Outcome of one recipe search.
    A failed search carries an error message and no results; it never raises.
    """
    query: str
    results: List[WebRecipeResult] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None
    searched_at: datetime = field(default_factory=datetime.now)
    
    @property
    def is_empty(self) -> bool:
        return not self.results
    
    def get_status_summary(self) -> str:
        """Human readable status line"""
        if not self.success:
            return self.error or "Search failed"
        if self.is_empty:
            return f"No recipes found for '{self.query}'"
        count = len(self.results)
        return f"Found {count} recipe{'' if count == 1 else 's'}"
