"""Tabular views of reconciliation results, duplicate groups and plans."""

from typing import Sequence

import pandas as pd

from grocery_utils.matching.decisions import MutationPlan
from grocery_utils.matching.models import (
    DuplicateGroup,
    ReconciliationResult,
    RecipeToRecipeMatch,
)

RECONCILIATION_COLUMNS = [
    "match_type",
    "match_index",
    "ingredient",
    "recipe_id",
    "recipe_title",
    "quantity",
    "unit",
    "notes",
    "existing_item_id",
    "existing_item_name",
    "confidence",
]

DUPLICATE_COLUMNS = [
    "group",
    "role",
    "item_id",
    "name",
    "quantity",
    "unit",
    "notes",
    "confidence",
]

PLAN_COLUMNS = [
    "action",
    "item_id",
    "name",
    "quantity",
    "unit",
    "notes",
    "needs_review",
]


def _candidate_row(match, index, candidate) -> dict:
    existing = match.existing_item
    return {
        "match_type": match.match_type,
        "match_index": index,
        "ingredient": candidate.name,
        "recipe_id": candidate.recipe_id,
        "recipe_title": candidate.recipe_title,
        "quantity": candidate.scaled_quantity,
        "unit": candidate.unit,
        "notes": candidate.notes,
        "existing_item_id": existing.id if existing is not None else None,
        "existing_item_name": existing.name if existing is not None else None,
        "confidence": match.confidence,
    }


def reconciliation_to_dataframe(result: ReconciliationResult) -> pd.DataFrame:
    """Flatten a reconciliation result into one row per candidate.

    ``match_index`` is the position of the match in its result list, so for
    partial and recipe-to-recipe rows it is the key to use when recording a
    decision. Members of one recipe-to-recipe group share a ``match_index``.
    """
    rows = []
    for index, match in enumerate(result.partial_matches):
        if isinstance(match, RecipeToRecipeMatch):
            for candidate in match.candidates:
                rows.append(_candidate_row(match, index, candidate))
        else:
            rows.append(_candidate_row(match, index, match.candidate))
    for index, match in enumerate(result.exact_matches):
        rows.append(_candidate_row(match, index, match.candidate))
    for index, match in enumerate(result.new_items):
        rows.append(_candidate_row(match, index, match.candidate))

    return pd.DataFrame(rows, columns=RECONCILIATION_COLUMNS)


def duplicates_to_dataframe(groups: Sequence[DuplicateGroup]) -> pd.DataFrame:
    """One row per item in each duplicate group, primary first."""
    rows = []
    for group_index, group in enumerate(groups):
        for item in group.items:
            rows.append(
                {
                    "group": group_index,
                    "role": "primary" if item is group.primary_item else "duplicate",
                    "item_id": item.id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit": item.unit,
                    "notes": item.notes,
                    "confidence": group.confidence,
                }
            )
    return pd.DataFrame(rows, columns=DUPLICATE_COLUMNS)


def mutation_plan_to_dataframe(plan: MutationPlan) -> pd.DataFrame:
    rows = []
    for item in plan.creates:
        rows.append(
            {
                "action": "create",
                "item_id": None,
                "name": item.name,
                "quantity": item.quantity,
                "unit": item.unit,
                "notes": item.notes,
                "needs_review": item.needs_review,
            }
        )
    for update in plan.updates:
        rows.append(
            {
                "action": "update",
                "item_id": update.item_id,
                "name": None,
                "quantity": update.quantity,
                "unit": update.unit,
                "notes": update.notes,
                "needs_review": update.needs_review,
            }
        )
    for item_id in plan.deletes:
        rows.append(
            {
                "action": "delete",
                "item_id": item_id,
                "name": None,
                "quantity": None,
                "unit": None,
                "notes": None,
                "needs_review": False,
            }
        )
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)
