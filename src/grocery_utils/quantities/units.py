"""Unit normalization and conversion utilities for shopping list quantities."""

from fractions import Fraction
from typing import Optional

from grocery_utils.quantities.parsing import QuantityRange, QuantityValue

# Unit normalization mapping: canonical name -> accepted surface forms
UNIT_MAP = {
    # Volume
    "teaspoon": ["teaspoon", "teaspoons", "tsp", "tsps", "teaspoonful"],
    "tablespoon": ["tablespoon", "tablespoons", "tbsp", "tbsps", "tbs", "tbl"],
    "fluid ounce": ["fluid ounce", "fluid ounces", "fl oz", "fl ozs", "fl. oz"],
    "cup": ["cup", "cups", "c"],
    "pint": ["pint", "pints", "pt", "pts"],
    "quart": ["quart", "quarts", "qt", "qts"],
    "gallon": ["gallon", "gallons", "gal", "gals"],
    "milliliter": ["milliliter", "milliliters", "millilitre", "millilitres", "ml"],
    "liter": ["liter", "liters", "litre", "litres", "l"],
    # Weight
    "ounce": ["ounce", "ounces", "oz", "ozs"],
    "pound": ["pound", "pounds", "lb", "lbs"],
    "gram": ["gram", "grams", "g", "gr"],
    "kilogram": ["kilogram", "kilograms", "kg", "kgs"],
    # Count/size
    "inch": ["inch", "inches"],
    "piece": ["piece", "pieces", "pc", "pcs"],
    "slice": ["slice", "slices"],
    "clove": ["clove", "cloves"],
    "can": ["can", "cans"],
    "jar": ["jar", "jars"],
    "bottle": ["bottle", "bottles"],
    "package": ["package", "packages", "pkg", "pkgs"],
    "bag": ["bag", "bags"],
    "box": ["box", "boxes"],
    "container": ["container", "containers"],
    "bunch": ["bunch", "bunches"],
    "head": ["head", "heads"],
    "stick": ["stick", "sticks"],
    "pinch": ["pinch", "pinches"],
    "dash": ["dash", "dashes"],
    "drop": ["drop", "drops"],
    "large": ["large"],
    "medium": ["medium"],
    "small": ["small"],
}

# Create reverse mapping for lookup
UNIT_LOOKUP = {v: k for k, vs in UNIT_MAP.items() for v in vs}

# Single-letter abbreviations whose meaning depends on case
CASE_SENSITIVE_UNITS = {"T": "tablespoon", "t": "teaspoon"}

VOLUME = "volume"
WEIGHT = "weight"

_ML_PER_TEASPOON = Fraction("4.92892159375")
_GRAMS_PER_OUNCE = Fraction("28.349523125")

# Exact conversions to the dimension's base unit (milliliter / gram)
UNIT_CONVERSIONS = {
    "teaspoon": (VOLUME, _ML_PER_TEASPOON),
    "tablespoon": (VOLUME, 3 * _ML_PER_TEASPOON),
    "fluid ounce": (VOLUME, 6 * _ML_PER_TEASPOON),
    "cup": (VOLUME, 48 * _ML_PER_TEASPOON),
    "pint": (VOLUME, 96 * _ML_PER_TEASPOON),
    "quart": (VOLUME, 192 * _ML_PER_TEASPOON),
    "gallon": (VOLUME, 768 * _ML_PER_TEASPOON),
    "milliliter": (VOLUME, Fraction(1)),
    "liter": (VOLUME, Fraction(1000)),
    "ounce": (WEIGHT, _GRAMS_PER_OUNCE),
    "pound": (WEIGHT, 16 * _GRAMS_PER_OUNCE),
    "gram": (WEIGHT, Fraction(1)),
    "kilogram": (WEIGHT, Fraction(1000)),
}


def lookup_unit(word: str) -> Optional[str]:
    """Return the canonical unit for a surface form, or None if it is not a unit.

    Matching is case-insensitive except for the single-letter "T"/"t"
    abbreviations. A trailing period is ignored ("tbsp.", "oz.").

    Examples:
        >>> lookup_unit("Tbsp.")
        'tablespoon'
        >>> lookup_unit("T")
        'tablespoon'
        >>> lookup_unit("onion") is None
        True
    """
    word = word.strip()
    if word in CASE_SENSITIVE_UNITS:
        return CASE_SENSITIVE_UNITS[word]
    return UNIT_LOOKUP.get(word.lower().rstrip("."))


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Normalize unit names to their standard form.

    Args:
        unit: Raw unit string

    Returns:
        Canonical unit name, the lowercased input if the unit is unknown,
        or None for a missing/blank unit.

    Examples:
        >>> normalize_unit("cups")
        'cup'
        >>> normalize_unit("Handful")
        'handful'
    """
    if unit is None or not unit.strip():
        return None
    return lookup_unit(unit) or unit.strip().lower().rstrip(".")


def unit_dimension(unit: Optional[str]) -> Optional[str]:
    """Return "volume" or "weight" for convertible units, else None."""
    canonical = normalize_unit(unit)
    if canonical in UNIT_CONVERSIONS:
        return UNIT_CONVERSIONS[canonical][0]
    return None


def convert_quantity(
    value: QuantityValue, from_unit: Optional[str], to_unit: Optional[str]
) -> Optional[QuantityValue]:
    """Convert a quantity between two units of the same dimension.

    Args:
        value: Quantity expressed in ``from_unit``.
        from_unit: Unit the value is expressed in.
        to_unit: Unit to express the value in.

    Returns:
        The converted quantity (exact), or None if the units are unknown or
        belong to different dimensions.

    Examples:
        >>> convert_quantity(Fraction(2), "tbsp", "cup")
        Fraction(1, 8)
        >>> convert_quantity(Fraction(1), "clove", "cup") is None
        True
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source == target and source is not None:
        return value
    if source not in UNIT_CONVERSIONS or target not in UNIT_CONVERSIONS:
        return None

    source_dimension, source_factor = UNIT_CONVERSIONS[source]
    target_dimension, target_factor = UNIT_CONVERSIONS[target]
    if source_dimension != target_dimension:
        return None

    ratio = source_factor / target_factor
    if isinstance(value, QuantityRange):
        return QuantityRange(value.low * ratio, value.high * ratio)
    return value * ratio
