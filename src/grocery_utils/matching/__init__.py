"""Reconciliation of recipe ingredients against a shopping list."""

from .candidates import RecipeSelection, build_candidates
from .decisions import (
    DuplicateAction,
    ItemUpdate,
    MatchAction,
    MutationPlan,
    NewListItem,
    plan_duplicate_resolution,
    plan_exact_merge,
    plan_new_item,
    plan_partial_decision,
    plan_reconciliation,
)
from .duplicates import find_duplicates
from .models import (
    DuplicateGroup,
    ExactMatch,
    GroceryListItem,
    MatchResult,
    NewItem,
    PartialMatch,
    ReconciliationResult,
    RecipeToRecipeMatch,
)
from .reconcile import reconcile

__all__ = [
    "GroceryListItem",
    "ExactMatch",
    "PartialMatch",
    "RecipeToRecipeMatch",
    "NewItem",
    "MatchResult",
    "ReconciliationResult",
    "DuplicateGroup",
    "RecipeSelection",
    "build_candidates",
    "reconcile",
    "find_duplicates",
    "MatchAction",
    "DuplicateAction",
    "NewListItem",
    "ItemUpdate",
    "MutationPlan",
    "plan_exact_merge",
    "plan_new_item",
    "plan_partial_decision",
    "plan_reconciliation",
    "plan_duplicate_resolution",
]
