"""
Data models for Pantrify application.

This module contains all data model classes including Ingredient, Recipe, User,
and the transient web search models. Persisted models map directly to the
SQLite schema with explicit owner ids.
"""

from .recipe_models import Ingredient, Recipe
from .user_models import User, AccountResult
from .web_models import WebRecipeResult, SearchResult

__all__ = [
    'Ingredient',
    'Recipe',
    'User',
    'AccountResult',
    'WebRecipeResult',
    'SearchResult'
]
