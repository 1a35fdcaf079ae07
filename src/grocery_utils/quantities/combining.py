"""Combine quantity/unit pairs when merging shopping list entries."""

import dataclasses
import logging
from typing import Optional

from grocery_utils.quantities.parsing import (
    QuantityValue,
    add_quantities,
    format_quantity,
    parse_quantity,
)
from grocery_utils.quantities.units import convert_quantity, normalize_unit

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class CombinedQuantity:
    """Result of combining two quantity/unit pairs.

    ``needs_review`` is set when the pair could not be added numerically and
    ``quantity`` holds a textual concatenation of both sides instead.
    """

    quantity: Optional[str]
    unit: Optional[str]
    needs_review: bool = False


def _blank(text: Optional[str]) -> bool:
    return text is None or not str(text).strip()


def _safe_parse(text: Optional[str]) -> Optional[QuantityValue]:
    if _blank(text):
        return None
    try:
        return parse_quantity(str(text))
    except ValueError as e:
        logger.debug("Treating quantity %r as unparseable: %s", text, e)
        return None


def _format_exact(value: QuantityValue) -> Optional[str]:
    """Format a total, or return None if the text would not parse back to it."""
    text = format_quantity(value)
    if parse_quantity(text) != value:
        return None
    return text


def _describe(
    quantity: Optional[str], value: Optional[QuantityValue], unit: Optional[str]
) -> str:
    """Render one side of a concatenation, preferring the formatted value."""
    shown = _format_exact(value) if value is not None else None
    shown = shown or quantity or ""
    return " ".join(part.strip() for part in (str(shown), unit or "") if part.strip())


def combine_quantities(
    quantity_a: Optional[str],
    unit_a: Optional[str],
    quantity_b: Optional[str],
    unit_b: Optional[str],
) -> CombinedQuantity:
    """Merge two quantity/unit pairs into one.

    Quantities in the same unit are summed; quantities in different units of
    the same dimension are converted into unit A first. Anything that cannot
    be summed safely (an unparseable quantity, a unit on one side only,
    units of different dimensions, or a total that cannot be written
    exactly) is concatenated as text and flagged for review, so neither
    side's information is ever dropped.

    Args:
        quantity_a: Quantity text of the first (existing) entry.
        unit_a: Unit of the first entry.
        quantity_b: Quantity text of the second (incoming) entry.
        unit_b: Unit of the second entry.

    Returns:
        A CombinedQuantity with the merged quantity text and unit.

    Examples:
        >>> combine_quantities("1", "cup", "1", "cup")
        CombinedQuantity(quantity='2', unit='cup', needs_review=False)
        >>> combine_quantities("1", "cup", "2", "tbsp")
        CombinedQuantity(quantity='1⅛', unit='cup', needs_review=False)
        >>> combine_quantities("2", "cloves", "1", "tbsp")
        CombinedQuantity(quantity='2 cloves + 1 tbsp', unit=None, needs_review=True)
    """
    unit_a = None if _blank(unit_a) else unit_a.strip()
    unit_b = None if _blank(unit_b) else unit_b.strip()
    quantity_a = None if _blank(quantity_a) else str(quantity_a).strip()
    quantity_b = None if _blank(quantity_b) else str(quantity_b).strip()

    if quantity_a is None and quantity_b is None:
        if unit_a and unit_b and normalize_unit(unit_a) != normalize_unit(unit_b):
            return CombinedQuantity(f"{unit_a} + {unit_b}", None, needs_review=True)
        return CombinedQuantity(None, unit_a or unit_b)

    # One side carries no information at all: keep the other side as-is
    if quantity_a is None and unit_a is None:
        return CombinedQuantity(quantity_b, unit_b)
    if quantity_b is None and unit_b is None:
        return CombinedQuantity(quantity_a, unit_a)

    value_a = _safe_parse(quantity_a)
    value_b = _safe_parse(quantity_b)

    if value_a is not None and value_b is not None:
        canonical_a = normalize_unit(unit_a)
        canonical_b = normalize_unit(unit_b)

        if canonical_a == canonical_b:
            total = _format_exact(add_quantities(value_a, value_b))
            if total is not None:
                return CombinedQuantity(total, unit_a or unit_b)

        if canonical_a is not None and canonical_b is not None:
            converted = convert_quantity(value_b, unit_b, unit_a)
            if converted is not None:
                total = _format_exact(add_quantities(value_a, converted))
                if total is not None:
                    return CombinedQuantity(total, unit_a)

    text = (
        f"{_describe(quantity_a, value_a, unit_a)} + "
        f"{_describe(quantity_b, value_b, unit_b)}"
    ).strip(" +")
    logger.debug(
        "Cannot combine %r %r with %r %r numerically",
        quantity_a,
        unit_a,
        quantity_b,
        unit_b,
    )
    return CombinedQuantity(text, None, needs_review=True)


def merge_notes(notes_a: Optional[str], notes_b: Optional[str]) -> Optional[str]:
    """Join two notes with "; ", skipping blanks and exact repeats.

    Examples:
        >>> merge_notes("diced", "for the salsa")
        'diced; for the salsa'
        >>> merge_notes("diced", "diced")
        'diced'
    """
    notes_a = None if _blank(notes_a) else notes_a.strip()
    notes_b = None if _blank(notes_b) else notes_b.strip()
    if notes_a and notes_b and notes_a != notes_b:
        return f"{notes_a}; {notes_b}"
    return notes_a or notes_b
