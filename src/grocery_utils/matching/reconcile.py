"""Two-phase reconciliation of recipe ingredients against a shopping list."""

import logging
from typing import Optional, Sequence, Tuple

from grocery_utils.ingredients import similarity
from grocery_utils.ingredients.models import CandidateIngredient
from grocery_utils.matching.models import (
    ExactMatch,
    GroceryListItem,
    NewItem,
    PartialMatch,
    ReconciliationResult,
    RecipeToRecipeMatch,
)

logger = logging.getLogger(__name__)


def reconcile(
    candidates: Sequence[CandidateIngredient],
    existing_items: Sequence[GroceryListItem],
) -> ReconciliationResult:
    """Classify a batch of recipe ingredients against each other and the list.

    Phase 1 groups candidates from different recipes whose names clear the
    similarity threshold into recipe-to-recipe matches. Phase 2 scores every
    remaining candidate against the existing items and classifies it as an
    exact match, a partial match or a new item.

    Candidates are visited in input order; each one is claimed by at most
    one group. When several existing items share the best score, the first
    one in ``existing_items`` wins.

    Args:
        candidates: Parsed ingredients from one add-batch of recipes.
        existing_items: Items currently on the shopping list.

    Returns:
        A ReconciliationResult. Recipe-to-recipe groups are reported inside
        ``partial_matches`` alongside regular partial matches.
    """
    result = ReconciliationResult()
    claimed = [False] * len(candidates)

    for i, candidate in enumerate(candidates):
        if claimed[i]:
            continue
        claimed[i] = True

        group = [candidate]
        for j in range(i + 1, len(candidates)):
            other = candidates[j]
            if claimed[j] or other.recipe_id == candidate.recipe_id:
                continue
            if similarity.is_similar(candidate.name, other.name):
                group.append(other)
                claimed[j] = True

        if len(group) > 1:
            logger.debug(
                "Grouped %d candidates for %r across recipes",
                len(group),
                candidate.name,
            )
            result.partial_matches.append(
                RecipeToRecipeMatch(
                    candidates=group,
                    confidence=similarity.RECIPE_TO_RECIPE_CONFIDENCE,
                )
            )
            continue

        best_item, best_score = find_best_item(candidate.name, existing_items)
        if best_item is not None and best_score >= similarity.EXACT_MATCH_THRESHOLD:
            result.exact_matches.append(ExactMatch(candidate, best_item, best_score))
        elif best_item is not None and best_score >= similarity.SIMILARITY_THRESHOLD:
            result.partial_matches.append(
                PartialMatch(candidate, best_item, best_score)
            )
        else:
            result.new_items.append(NewItem(candidate, best_score))

    logger.debug("Reconciliation summary: %s", result.summary())
    return result


def find_best_item(
    name: str, existing_items: Sequence[GroceryListItem]
) -> Tuple[Optional[GroceryListItem], float]:
    """Return the highest scoring existing item for a name and its score.

    Ties keep the earliest item. Returns ``(None, 0.0)`` for an empty list.
    """
    best_item = None
    best_score = 0.0
    for item in existing_items:
        score = similarity.ingredient_similarity(name, item.name)
        if best_item is None or score > best_score:
            best_item = item
            best_score = score
    return best_item, best_score
