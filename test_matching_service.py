#!/usr/bin/env python3
"""
Test script for recipe readiness scoring and ranking.
Tests scoring, missing-ingredient summaries, badges, and the library and
search result orderings.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from models import Recipe, WebRecipeResult
from services.matching_service import (
    ALL_AVAILABLE_TEXT, count_ready, missing_summary, rank_library,
    rank_search_results, score_recipe
)

PANTRY = {"salt", "flour", "egg", "milk", "butter"}


def make_recipe(title, ingredients):
    return Recipe.from_raw_ingredients(title=title, ingredients=ingredients, instructions=["Cook."])


def make_hit(meal_id, ingredients):
    return WebRecipeResult(id=meal_id, title=f"Meal {meal_id}", ingredients=ingredients)


def test_score_recipe():
    print("Testing readiness scoring...")

    score = score_recipe(["salt", "flour", "egg"], {"salt", "flour"}, ["Salt", "Flour", "Egg"])
    assert (score.ready, score.have, score.total) == (False, 2, 3)
    assert score.missing_count == 1
    assert score.missing_display_names == ["Egg"]
    assert score.summary == "Missing Egg"
    assert score.badge == "Missing 1"

    print("[OK] Partial recipe scored")


def test_duplicates_and_empty_recipes():
    score = score_recipe(["salt", "salt", "sugar"], {"salt"})
    assert score.have == 2
    assert score.total == 3

    empty = score_recipe([], set())
    assert empty.ready
    assert empty.badge == "Ready to Cook"
    assert empty.summary == ALL_AVAILABLE_TEXT

    print("[OK] Duplicates counted, empty recipe is ready")


def test_score_requires_parallel_names():
    with pytest.raises(ValueError):
        score_recipe(["salt", "egg"], set(), ["Salt"])


def test_missing_summary_joining():
    print("Testing missing summaries...")

    assert missing_summary([]) == "All ingredients available."
    assert missing_summary(["Egg"]) == "Missing Egg"
    assert missing_summary(["Egg", "Milk"]) == "Missing Egg and Milk"
    assert missing_summary(["Egg", "Milk", "Flour"]) == "Missing Egg, Milk, and Flour"

    six = ["A", "B", "C", "D", "E", "F"]
    assert missing_summary(six) == "Missing A, B, C, D, E, and F"
    assert missing_summary(six + ["G", "H"]) == "Missing A, B, C, D, E, and F …"

    print("[OK] Summaries joined")


def test_library_ranking():
    print("Testing library ranking...")

    recipe_a = make_recipe("A", ["Salt", "Flour", "Egg"])  # ready, have 3
    recipe_b = make_recipe("B", ["Salt", "Flour", "Egg", "Milk", "Butter", "Sugar"])  # not ready, have 5
    recipe_c = make_recipe("C", ["Milk"])  # ready, have 1

    ranked = rank_library([recipe_b, recipe_c, recipe_a], PANTRY)
    assert [m.title for m in ranked] == ["A", "C", "B"]
    assert ranked[-1].score.have == 5
    assert not ranked[-1].can_make

    print("[OK] Ready recipes first, unready last")


def test_library_ties_sort_by_title():
    pancakes = make_recipe("Pancakes", ["Egg", "Milk"])
    crepes = make_recipe("Crepes", ["Flour", "Egg"])
    waffles = make_recipe("Waffles", ["Butter", "Sugar"])
    cake = make_recipe("Cake", ["Sugar", "Egg"])

    ranked = rank_library([pancakes, waffles, crepes, cake], PANTRY)
    assert [m.title for m in ranked] == ["Crepes", "Pancakes", "Cake", "Waffles"]
    print("[OK] Ties broken alphabetically")


def test_search_ranking_keeps_fetch_order_among_ties():
    print("Testing search result ranking...")

    hits = [
        make_hit("1", ["Salt", "Chocolate"]),  # have 1
        make_hit("2", ["Egg"]),  # ready
        make_hit("3", ["Milk", "Vanilla"]),  # have 1
        make_hit("4", ["Sea Salt"]),  # ready via synonym
    ]

    prioritized = rank_search_results(hits, PANTRY, prioritize_ready=True)
    assert [m.recipe.id for m in prioritized] == ["2", "4", "1", "3"]

    unchanged = rank_search_results(hits, PANTRY, prioritize_ready=False)
    assert [m.recipe.id for m in unchanged] == ["1", "2", "3", "4"]
    assert unchanged[1].score.badge == "Ready to Cook"

    print("[OK] Search ordering stable")


def test_count_ready():
    recipes = [make_recipe("A", ["Egg"]), make_recipe("B", ["Caviar"]), make_recipe("C", [])]
    assert count_ready(recipes, PANTRY) == 2
    print("[OK] Ready count")


if __name__ == "__main__":
    test_score_recipe()
    test_duplicates_and_empty_recipes()
    test_score_requires_parallel_names()
    test_missing_summary_joining()
    test_library_ranking()
    test_library_ties_sort_by_title()
    test_search_ranking_keeps_fetch_order_among_ties()
    test_count_ready()
    print("\n[SUCCESS] All matching tests passed!")
