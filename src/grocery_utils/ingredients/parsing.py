"""Ingredient line parsing utilities."""

import re
from typing import Optional, Tuple

from grocery_utils.ingredients.models import ParsedIngredient
from grocery_utils.quantities.parsing import split_leading_quantity
from grocery_utils.quantities.units import CASE_SENSITIVE_UNITS, lookup_unit

# --- Constants ---

TRAILING_NOTES_RE = re.compile(
    r"^(?P<base>.*?)\s*\((?P<notes>[^()]*)\)\s*$", re.DOTALL
)

# Longest multi-word unit in the vocabulary ("fluid ounces", "fl oz")
MAX_UNIT_WORDS = 2

# --- Functions ---


def parse_ingredient_line(line: str) -> ParsedIngredient:
    """Split a free-form ingredient line into quantity, unit, name and notes.

    A trailing parenthetical becomes the notes. The remaining text is
    matched as quantity + unit + name, then quantity + name, and finally
    falls back to treating everything as the ingredient name.

    Args:
        line: Raw ingredient text (e.g., "1 1/2 cups onion, diced (about 1 large)").

    Returns:
        A ParsedIngredient. The quantity is kept in its original textual form
        and the unit as the matched surface form, lowercased.

    Examples:
        >>> parse_ingredient_line("2 Tbsp. olive oil")
        ParsedIngredient(quantity='2', unit='tbsp', ingredient_name='olive oil', notes=None)
        >>> parse_ingredient_line("2 onions (yellow)")
        ParsedIngredient(quantity='2', unit=None, ingredient_name='onions', notes='yellow')
        >>> parse_ingredient_line("Salt")
        ParsedIngredient(quantity=None, unit=None, ingredient_name='Salt', notes=None)
    """
    base, notes = _split_notes(" ".join((line or "").split()))

    quantity, rest = split_leading_quantity(base)
    if quantity is None:
        return ParsedIngredient(None, None, clean_ingredient_name(base), notes)

    unit, name = _parse_unit(rest)
    if unit is not None:
        return ParsedIngredient(quantity, unit, name, notes)

    return ParsedIngredient(quantity, None, clean_ingredient_name(rest), notes)


def _split_notes(text: str) -> Tuple[str, Optional[str]]:
    """Split a trailing "(notes)" group off the end of the text."""
    match = TRAILING_NOTES_RE.match(text)
    if not match or not match.group("base").strip():
        return text, None
    notes = match.group("notes").strip()
    return match.group("base").strip(), notes or None


def _parse_unit(text: str) -> Tuple[Optional[str], str]:
    """Parse unit from the start of an ingredient string.

    A unit is only accepted when more text follows it, so that "2 cups"
    on its own keeps "cups" as the ingredient name.
    """
    words = text.split()
    for width in range(MAX_UNIT_WORDS, 0, -1):
        if len(words) <= width:
            continue
        potential_unit = " ".join(words[:width])
        if lookup_unit(potential_unit):
            name = clean_ingredient_name(" ".join(words[width:]))
            if not name:
                continue
            if potential_unit in CASE_SENSITIVE_UNITS:
                return potential_unit, name
            return potential_unit.lower().rstrip("."), name

    # No unit found - return None for unit and the original text
    return None, text


def clean_ingredient_name(name: str) -> str:
    """Clean up an ingredient name for display and matching.

    Collapses whitespace, strips stray commas and drops a leading "of"
    left behind by the unit ("2 cups of flour").

    Examples:
        >>> clean_ingredient_name("  onion,  diced ,")
        'onion, diced'
        >>> clean_ingredient_name("of flour")
        'flour'
    """
    name = re.sub(r"\s+", " ", name)
    name = re.sub(r"\s+,", ",", name)
    name = name.strip().strip(",").strip()
    name = re.sub(r"^of\s+", "", name, flags=re.IGNORECASE)
    return name
