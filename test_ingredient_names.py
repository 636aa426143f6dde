#!/usr/bin/env python3
"""
Test script for ingredient name normalization.
Tests synonym resolution, display casing, idempotence (and where non-ASCII
case mapping breaks it) and name joining.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from utils.ingredient_names import SYNONYMS, normalize_ingredient_name, join_names


def test_synonyms_resolve_to_canonical_names():
    """Every table entry maps onto its canonical phrase"""
    print("Testing synonym table...")

    assert normalize_ingredient_name("Scallion") == ("Green Onion", "green onion")
    assert normalize_ingredient_name("spring   onion") == ("Green Onion", "green onion")
    assert normalize_ingredient_name("CILANTRO") == ("Coriander", "coriander")
    assert normalize_ingredient_name("All-Purpose Flour")[1] == "flour"
    assert normalize_ingredient_name(" Bell Pepper ")[1] == "capsicum"

    for variant, canonical in SYNONYMS.items():
        assert normalize_ingredient_name(variant)[1] == canonical

    print("[OK] Synonyms resolved")


def test_unknown_names_pass_through():
    print("Testing names outside the synonym table...")

    assert normalize_ingredient_name("Tomato") == ("Tomato", "tomato")
    assert normalize_ingredient_name("  olive \t oil\n") == ("Olive Oil", "olive oil")
    assert normalize_ingredient_name("McIntosh APPLE") == ("Mcintosh Apple", "mcintosh apple")

    print("[OK] Unknown names kept")


def test_empty_input():
    assert normalize_ingredient_name("") == ("", "")
    assert normalize_ingredient_name("   ") == ("", "")
    print("[OK] Empty input normalizes to empty strings")


def test_normalization_is_idempotent():
    print("Testing idempotence...")

    samples = ["Scallion", "ICING SUGAR", "  sea  salt ", "Ground Beef", "chicken thighs", ""]
    for raw in samples:
        display, key = normalize_ingredient_name(raw)
        assert normalize_ingredient_name(display)[1] == key
        assert normalize_ingredient_name(key) == (display, key)

    print("[OK] Normalizing twice changes nothing")


def test_non_ascii_case_mapping_changes_key_on_second_pass():
    """Display casing is not reversible for every letter"""
    display, key = normalize_ingredient_name("ıspanak")
    assert (display, key) == ("Ispanak", "ıspanak")
    assert normalize_ingredient_name(display)[1] == "ispanak"

    display, key = normalize_ingredient_name("ßalz")
    assert display == "SSalz"
    assert normalize_ingredient_name(display)[1] == "ssalz"

    # letters with a one-to-one case mapping still round-trip
    assert normalize_ingredient_name(normalize_ingredient_name("Crème Fraîche")[0])[1] == "crème fraîche"
    print("[OK] Non-ASCII case mapping documented")


def test_join_names():
    print("Testing name joining...")

    assert join_names([]) == ""
    assert join_names(["Egg"]) == "Egg"
    assert join_names(["Egg", "Milk"]) == "Egg and Milk"
    assert join_names(["Egg", "Milk", "Flour"]) == "Egg, Milk, and Flour"

    print("[OK] Names joined")


if __name__ == "__main__":
    try:
        test_synonyms_resolve_to_canonical_names()
        test_unknown_names_pass_through()
        test_empty_input()
        test_normalization_is_idempotent()
        test_non_ascii_case_mapping_changes_key_on_second_pass()
        test_join_names()
        print("\n[SUCCESS] All ingredient name tests passed!")
    except AssertionError as e:
        print(f"[FAIL] {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
