"""Build reconciliation candidates from selected recipes."""

import dataclasses
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Union

from grocery_utils.ingredients.models import (
    CandidateIngredient,
    ParsedIngredient,
    RecipeIngredient,
)
from grocery_utils.ingredients.parsing import (
    clean_ingredient_name,
    parse_ingredient_line,
)
from grocery_utils.quantities.combining import merge_notes
from grocery_utils.quantities.number_utils import to_fraction

logger = logging.getLogger(__name__)

IngredientEntry = Union[str, RecipeIngredient]


@dataclasses.dataclass
class RecipeSelection:
    """One recipe (optionally a variant of it) added to the list in a batch."""

    recipe_id: str
    ingredients: List[IngredientEntry]
    title: str = ""
    variant_id: Optional[str] = None
    variant_ingredients: Optional[List[IngredientEntry]] = None
    multiplier: Union[int, float] = 1


def _entry_name(entry: Optional[IngredientEntry]) -> str:
    if entry is None:
        return ""
    if isinstance(entry, str):
        return entry.strip()
    return (entry.ingredient or "").strip()


def merge_variant_ingredients(
    base: Sequence[IngredientEntry],
    variant: Optional[Sequence[IngredientEntry]],
) -> List[IngredientEntry]:
    """Overlay variant ingredients on the base recipe by position.

    A variant entry replaces the base entry at the same index when it has a
    non-blank ingredient name; otherwise the base entry is kept.
    """
    if not variant:
        return list(base)

    merged = []
    for index, base_entry in enumerate(base):
        variant_entry = variant[index] if index < len(variant) else None
        merged.append(variant_entry if _entry_name(variant_entry) else base_entry)
    return merged


def parse_entry(entry: IngredientEntry) -> ParsedIngredient:
    """Parse one recipe ingredient entry.

    Structured entries that carry both a quantity and a unit are used as
    given; anything else is parsed from its ingredient text.
    """
    if isinstance(entry, str):
        return parse_ingredient_line(entry)

    if entry.quantity and entry.unit:
        return ParsedIngredient(
            quantity=str(entry.quantity).strip(),
            unit=entry.unit.strip(),
            ingredient_name=clean_ingredient_name(entry.ingredient),
            notes=entry.notes,
        )

    parsed = parse_ingredient_line(entry.ingredient)
    if entry.notes:
        notes = merge_notes(parsed.notes, entry.notes)
        parsed = dataclasses.replace(parsed, notes=notes)
    return parsed


def build_candidates(
    selections: Sequence[RecipeSelection],
) -> List[CandidateIngredient]:
    """Turn a batch of recipe selections into reconciliation candidates.

    Args:
        selections: Recipes added in one batch, each with its multiplier.

    Returns:
        Candidates in recipe order, then ingredient order. Entries with a
        blank ingredient name are skipped.

    Raises:
        ValueError: If a selection's multiplier is not a positive number.
    """
    candidates = []
    per_recipe_counts: Dict[str, int] = defaultdict(int)

    for selection in selections:
        if to_fraction(selection.multiplier) <= 0:
            raise ValueError(
                f"Multiplier for recipe {selection.recipe_id!r} must be positive, "
                f"got {selection.multiplier!r}"
            )

        entries = merge_variant_ingredients(
            selection.ingredients, selection.variant_ingredients
        )
        for entry in entries:
            if not _entry_name(entry):
                continue

            parsed = parse_entry(entry)
            if not parsed.ingredient_name:
                logger.warning("Skipping ingredient with empty name: %r", entry)
                continue

            candidates.append(
                CandidateIngredient(
                    ingredient=parsed,
                    recipe_id=selection.recipe_id,
                    recipe_title=selection.title,
                    variant_id=selection.variant_id,
                    multiplier=selection.multiplier,
                    source_index=per_recipe_counts[selection.recipe_id],
                )
            )
            per_recipe_counts[selection.recipe_id] += 1

    return candidates
