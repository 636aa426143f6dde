"""
Online recipe search service for Pantrify application.

Queries a TheMealDB-compatible API (GET search.php?s=<query>) and maps each
meal into a WebRecipeResult. Network and decoding failures never escape: they
become a failed SearchResult with a message the UI can show.
"""

from concurrent.futures import Future
from typing import Any, Dict, List, Optional

import requests

from models import SearchResult, WebRecipeResult
from utils import get_config, get_logger, log_remote_call, LatestTaskRunner

logger = get_logger(__name__)

SEARCH_ERROR_MESSAGE = "Couldn't fetch recipes. Please try again."
DEFAULT_QUERY = "a"  # a blank search still lists something
MAX_INGREDIENT_FIELDS = 20

UA = {"User-Agent": "Pantrify/0.1"}


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def parse_ingredients(meal: Dict[str, Any]) -> List[str]:
    """Compact strIngredient1..20 into an ordered list, dropping empties"""
    ingredients = []
    for index in range(1, MAX_INGREDIENT_FIELDS + 1):
        value = _clean(meal.get(f"strIngredient{index}"))
        if value:
            ingredients.append(value)
    return ingredients


def parse_instructions(text: Optional[str]) -> List[str]:
    """Split the instructions blob into trimmed, non-empty steps"""
    text = (text or "").replace("\r", "")
    return [line.strip() for line in text.split("\n") if line.strip()]


def parse_tags(text: Optional[str]) -> List[str]:
    """Split a comma separated tags string"""
    return [tag.strip() for tag in (text or "").split(",") if tag.strip()]


def parse_meal(meal: Dict[str, Any]) -> WebRecipeResult:
    """Map one API meal object onto a WebRecipeResult"""
    return WebRecipeResult(
        id=str(meal.get("idMeal", "")),
        title=(meal.get("strMeal") or "").strip(),
        ingredients=parse_ingredients(meal),
        instructions=parse_instructions(meal.get("strInstructions")),
        tags=parse_tags(meal.get("strTags")),
        source_url=_clean(meal.get("strSource")),
        video_url=_clean(meal.get("strYoutube"))
    )


class SearchService:
    """
    Recipe search client.

    search() is synchronous; search_async() runs it in the background where a
    newer search supersedes an older one.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        config = get_config()
        self.base_url = (base_url or config.search_base_url).rstrip("/")
        self.timeout = timeout or config.search_timeout_seconds
        self.session = session or requests.Session()
        self._runner = LatestTaskRunner("recipe-search")

    def fetch_meals(self, query: str) -> List[Dict[str, Any]]:
        """
        Raw meal objects for a query. Raises requests.RequestException or
        ValueError on transport/decoding problems.
        """
        q = (query or "").strip() or DEFAULT_QUERY
        response = self.session.get(
            f"{self.base_url}/search.php",
            params={"s": q},
            headers=UA,
            timeout=self.timeout
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected search response shape")
        return payload.get("meals") or []

    def search(self, query: str) -> SearchResult:
        """Search recipes; failures are returned, not raised"""
        query = (query or "").strip()
        try:
            with log_remote_call(logger, "recipe search", query=query) as call:
                meals = self.fetch_meals(query)
                call.note(meals=len(meals))
        except (requests.RequestException, ValueError):
            return SearchResult(query=query, success=False, error=SEARCH_ERROR_MESSAGE)

        results = [parse_meal(meal) for meal in meals if isinstance(meal, dict)]
        return SearchResult(query=query, results=results)

    def search_async(self, query: str) -> Future:
        """Start a background search; resolves to a SearchResult"""
        return self._runner.submit(self.search, query)

    def is_current(self, future: Future) -> bool:
        """False once a newer search has been submitted"""
        return self._runner.is_current(future)

    def close(self):
        self._runner.shutdown()
        self.session.close()


# Global service instance
_search_service: Optional[SearchService] = None


def get_search_service() -> SearchService:
    """Get singleton search service instance"""
    global _search_service
    if _search_service is None:
        _search_service = SearchService()
    return _search_service
