"""
Unit handling for pantry quantities.

Each unit category (as returned by the unit classifier) has a family of
sub-units with linear factors relative to a base unit. Conversion is
quantity * factor[from] / factor[to]. Unknown categories or sub-units leave
the quantity unchanged, which the add-ingredient form relies on while the
category is still being detected.
"""

from enum import Enum
from typing import Dict, List, Optional, Union


class UnitCategory(Enum):
    """Unit categories returned by the unit classifier"""
    GRAMS = "grams"
    LITERS = "liters"
    PIECES = "pieces"


DEFAULT_CATEGORY = UnitCategory.PIECES
DEFAULT_UNIT = "pcs"

UNIT_OPTIONS: Dict[str, List[str]] = {
    UnitCategory.GRAMS.value: ["mg", "g", "kg"],
    UnitCategory.LITERS.value: ["ml", "L", "kL"],
    UnitCategory.PIECES.value: ["pcs"],
}

UNIT_FACTORS: Dict[str, Dict[str, float]] = {
    UnitCategory.GRAMS.value: {"mg": 0.001, "g": 1.0, "kg": 1000.0},
    UnitCategory.LITERS.value: {"ml": 0.001, "L": 1.0, "kL": 1000.0},
    UnitCategory.PIECES.value: {"pcs": 1.0},
}


def _category_name(category: Union[UnitCategory, str, None]) -> Optional[str]:
    if isinstance(category, UnitCategory):
        return category.value
    return category


def parse_category(value: Optional[str]) -> Optional[UnitCategory]:
    """Map a raw category string onto UnitCategory, None if unrecognized"""
    try:
        return UnitCategory((value or "").strip().lower())
    except ValueError:
        return None


def unit_options(category: Union[UnitCategory, str, None]) -> List[str]:
    """Sub-units offered for a category; pieces for anything unknown"""
    return list(UNIT_OPTIONS.get(_category_name(category), [DEFAULT_UNIT]))


def default_unit(category: Union[UnitCategory, str, None]) -> str:
    """First sub-unit of the category"""
    return unit_options(category)[0]


def is_valid_unit(category: Union[UnitCategory, str, None], unit: str) -> bool:
    return unit in UNIT_OPTIONS.get(_category_name(category), [])


def convert_quantity(quantity: float, from_unit: str, to_unit: str,
                     category: Union[UnitCategory, str, None]) -> float:
    """
    Convert a quantity between sub-units of one category.
    
    No clamping is applied. Unrecognized categories or sub-units return the
    quantity unchanged.
    
    >>> convert_quantity(1000, "mg", "g", UnitCategory.GRAMS)
    1.0
    """
    factors = UNIT_FACTORS.get(_category_name(category))
    if not factors or from_unit not in factors or to_unit not in factors:
        return quantity
    return quantity * factors[from_unit] / factors[to_unit]
