"""
Services package for Pantrify application.

Contains the business logic: database operations, accounts, pantry and recipe
management, readiness matching, online recipe search and unit classification.
"""

from .database_service import DatabaseService, get_database_service
from .unit_service import UnitCategory, unit_options, default_unit, convert_quantity, parse_category
from .matching_service import (
    ReadinessScore, RecipeMatch, score_recipe, score_match, missing_summary,
    rank_library, rank_search_results, count_ready
)
from .auth_service import AuthService, LoginMethod, get_auth_service
from .pantry_service import PantryService, get_pantry_service
from .recipe_service import RecipeService, RecipeCategory, LibraryView, get_recipe_service, import_from_search_result
from .search_service import SearchService, get_search_service
from .ai_service import UnitClassifier, get_unit_classifier

__all__ = [
    'DatabaseService',
    'get_database_service',
    'UnitCategory',
    'unit_options',
    'default_unit',
    'convert_quantity',
    'parse_category',
    'ReadinessScore',
    'RecipeMatch',
    'score_recipe',
    'score_match',
    'missing_summary',
    'rank_library',
    'rank_search_results',
    'count_ready',
    'AuthService',
    'LoginMethod',
    'get_auth_service',
    'PantryService',
    'get_pantry_service',
    'RecipeService',
    'RecipeCategory',
    'LibraryView',
    'get_recipe_service',
    'import_from_search_result',
    'SearchService',
    'get_search_service',
    'UnitClassifier',
    'get_unit_classifier'
]
