"""
Ingredient name normalization.

Maps raw ingredient text to a canonical key used for pantry/recipe comparisons
and a title-cased display form. Textual variants listed in SYNONYMS collapse
onto one canonical phrase so that e.g. "Scallion" and "spring onion" compare
equal to "green onion".
"""

import re
from typing import Sequence, Tuple

# variant -> canonical phrase (left side is already lowercased/space-collapsed)
SYNONYMS = {
    "scallion": "green onion",
    "spring onion": "green onion",
    "cilantro": "coriander",
    "caster sugar": "sugar",
    "powdered sugar": "confectioners sugar",
    "icing sugar": "confectioners sugar",
    "all purpose flour": "flour",
    "all-purpose flour": "flour",
    "ap flour": "flour",
    "kosher salt": "salt",
    "sea salt": "salt",
    "soya sauce": "soy sauce",
    "bell pepper": "capsicum",
    "ground beef": "minced beef",
}

_WHITESPACE = re.compile(r"\s+")


def canonical_key(raw: str) -> str:
    """Lowercase, collapse whitespace, trim, then apply the synonym table"""
    cleaned = _WHITESPACE.sub(" ", (raw or "").lower()).strip()
    return SYNONYMS.get(cleaned, cleaned)


def display_name(key: str) -> str:
    """
    Uppercase the first character of each space-separated token.

    Round-tripping the display form through canonical_key gives the key back
    for ASCII names and most others. Characters whose uppercase form is longer or maps to
    a different lowercase ("ß" -> "SS", dotless "ı" -> "I") change the key on a
    second pass: "ıspanak" displays as "Ispanak", which keys as "ispanak".
    """
    return " ".join(token[:1].upper() + token[1:] for token in key.split(" ") if token)


def normalize_ingredient_name(raw: str) -> Tuple[str, str]:
    """
    Normalize a raw ingredient string.
    
    Returns:
        (display, key) - e.g. "Scallion" -> ("Green Onion", "green onion").
        Empty input yields ("", "").
    """
    key = canonical_key(raw)
    return display_name(key), key


def join_names(names: Sequence[str]) -> str:
    """Join names in prose: 'a', 'a and b', 'a, b, and c'"""
    names = list(names)
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + ", and " + names[-1]

