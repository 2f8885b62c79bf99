"""Free-text ingredient line parsing and item name normalization."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

_UNICODE_FRACTIONS = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}
_VULGAR = "".join(_UNICODE_FRACTIONS)

_QUANTITY_RE = re.compile(
    rf"""
    ^(?:
        (?P<whole>\d+)\s+(?P<mixed_num>\d+)/(?P<mixed_den>\d+)
      | (?P<num>\d+)/(?P<den>\d+)
      | (?P<lead>\d+)?\s*(?P<vulgar>[{_VULGAR}])
      | (?P<decimal>\d*\.\d+|\d+(?:\.\d+)?)
    )
    (?:\s*(?:-|–|to)\s*(?:\d+(?:\.\d+)?(?:/\d+)?|[{_VULGAR}]))?
    """,
    re.VERBOSE,
)
_PARENTHETICAL_RE = re.compile(r"^\s*\([^)]*\)")
_FLUID_OUNCE_RE = re.compile(r"^\s*(?:fl\.?\s*oz|fluid\s+ounces?)\.?(?=[\s,]|$)", re.IGNORECASE)
_UNIT_WORD_RE = re.compile(r"^\s*(?P<word>[A-Za-z]+)\.?(?=[\s,]|$)")
_FILLER_RE = re.compile(r"^\s*of\s+", re.IGNORECASE)
_PUNCTUATION_RE = re.compile(r"[^\w\s'-]")
_POSSESSIVE_RE = re.compile(r"'s$")

# unit token -> canonical short code
_UNITS = {
    "cup": "cup",
    "cups": "cup",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "tbl": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tsp": "tsp",
    "tsps": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "kg": "kg",
    "kgs": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "l": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "qt": "qt",
    "quart": "qt",
    "quarts": "qt",
    "pt": "pt",
    "pint": "pt",
    "pints": "pt",
    "gal": "gal",
    "gallon": "gal",
    "gallons": "gal",
    "piece": "piece",
    "pieces": "piece",
    "pc": "piece",
    "pcs": "piece",
    "clove": "clove",
    "cloves": "clove",
    "can": "can",
    "cans": "can",
    "package": "package",
    "packages": "package",
    "pkg": "package",
    "pkgs": "package",
    "pack": "package",
    "packs": "package",
    "bag": "bag",
    "bags": "bag",
    "bottle": "bottle",
    "bottles": "bottle",
    "jar": "jar",
    "jars": "jar",
    "box": "box",
    "boxes": "box",
    "bunch": "bunch",
    "bunches": "bunch",
    "slice": "slice",
    "slices": "slice",
    "stick": "stick",
    "sticks": "stick",
    "pinch": "pinch",
    "pinches": "pinch",
    "dash": "dash",
    "dashes": "dash",
    "sprig": "sprig",
    "sprigs": "sprig",
    "handful": "handful",
    "handfuls": "handful",
    "dozen": "dozen",
    "doz": "dozen",
}

# Measurement words dropped from item names during normalization. Packaging
# words ("can", "jar", ...) stay because they are also legitimate item words.
_NAME_UNIT_WORDS = frozenset(
    {
        "cup",
        "cups",
        "tbsp",
        "tablespoon",
        "tablespoons",
        "tsp",
        "teaspoon",
        "teaspoons",
        "oz",
        "ounce",
        "ounces",
        "lb",
        "lbs",
        "g",
        "gram",
        "grams",
        "kg",
        "ml",
        "l",
        "piece",
        "pieces",
        "clove",
        "cloves",
    }
)

# Food words whose singular ends in "-ie" rather than "-y".
_IE_SINGULARS = frozenset(
    {
        "brownie",
        "cookie",
        "hoagie",
        "pierogie",
        "smoothie",
        "veggie",
        "wheatie",
    }
)


@dataclass(frozen=True)
class ParsedIngredient:
    """Quantity, unit and item name extracted from one ingredient line."""

    quantity: Optional[float]
    unit: Optional[str]
    item_name: str


def _match_quantity(text: str) -> Tuple[Optional[float], str]:
    match = _QUANTITY_RE.match(text)
    if match is None:
        return None, text

    groups = match.groupdict()
    try:
        if groups["whole"] is not None:
            value = int(groups["whole"]) + int(groups["mixed_num"]) / int(groups["mixed_den"])
        elif groups["num"] is not None:
            value = int(groups["num"]) / int(groups["den"])
        elif groups["vulgar"] is not None:
            value = int(groups["lead"] or 0) + _UNICODE_FRACTIONS[groups["vulgar"]]
        else:
            value = float(groups["decimal"])
    except ZeroDivisionError:
        return None, text
    return value, text[match.end():]


def _match_unit(text: str) -> Tuple[Optional[str], str]:
    fluid = _FLUID_OUNCE_RE.match(text)
    if fluid:
        return "fl oz", text[fluid.end():]
    match = _UNIT_WORD_RE.match(text)
    if match:
        unit = _UNITS.get(match.group("word").lower())
        if unit is not None:
            return unit, text[match.end():]
    return None, text


def _clean_name(text: str) -> str:
    return " ".join(text.split()).strip(" ,.;:-")


def parse_ingredient(line: str) -> ParsedIngredient:
    """Split an ingredient line such as ``"2 cups flour"`` into its parts.

    Never raises: when no leading amount can be read the quantity is ``None``
    and the trimmed line is kept as the item name.
    """

    text = (line or "").strip()
    if not text:
        return ParsedIngredient(quantity=None, unit=None, item_name="")

    quantity, rest = _match_quantity(text)
    if quantity is not None:
        if rest[:1].isalpha():
            # glued amount ("500g") only counts when a unit follows directly
            unit, _ = _match_unit(rest)
            if unit is None:
                return ParsedIngredient(quantity=None, unit=None, item_name=_clean_name(text))
        rest = _PARENTHETICAL_RE.sub("", rest, count=1)

    unit, remainder = _match_unit(rest)
    remainder = _FILLER_RE.sub("", remainder, count=1)
    item_name = _clean_name(remainder)

    if not item_name:
        if quantity is None and unit is not None:
            # a bare unit word is the item itself ("clove", "dash")
            return ParsedIngredient(quantity=None, unit=None, item_name=_clean_name(text))
        if quantity is not None:
            rest_name = _clean_name(rest)
            if rest_name:
                return ParsedIngredient(quantity=quantity, unit=None, item_name=rest_name)
        return ParsedIngredient(quantity=None, unit=None, item_name=_clean_name(text))

    return ParsedIngredient(quantity=quantity, unit=unit, item_name=item_name)


def _singularize(word: str) -> str:
    if len(word) <= 3:
        return word
    if word.endswith("ies") and len(word) > 4:
        if word[:-1] in _IE_SINGULARS:
            return word[:-1]
        return word[:-3] + "y"
    if word.endswith("oes") and len(word) > 5:
        return word[:-2]
    if word.endswith(("ches", "shes", "xes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def normalize_item_name(name: str) -> str:
    """Canonical comparison form of an item name.

    Case-folds, drops punctuation and measurement words, collapses whitespace and
    singularizes trivial plurals. Applying it twice gives the same result.
    """

    text = _PUNCTUATION_RE.sub(" ", (name or "").casefold())
    tokens = [_POSSESSIVE_RE.sub("", token.strip("-'")) for token in text.split()]
    tokens = [_singularize(token).strip("-'") for token in tokens if token]
    tokens = [token for token in tokens if token]
    kept = [token for token in tokens if token not in _NAME_UNIT_WORDS]
    return " ".join(kept or tokens)


__all__ = ["ParsedIngredient", "parse_ingredient", "normalize_item_name"]
