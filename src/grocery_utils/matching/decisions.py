"""Turn match classifications and user decisions into list mutations.

The functions here never touch storage. They return a MutationPlan that the
persistence layer applies in a single transaction: creates, updates of
quantity/unit/notes on existing items, and deletes.
"""

import dataclasses
import enum
import logging
from typing import Dict, List, Mapping, Optional, Union

from grocery_utils.ingredients.models import CandidateIngredient
from grocery_utils.matching.models import (
    DuplicateGroup,
    ExactMatch,
    GroceryListItem,
    PartialMatch,
    ReconciliationResult,
    RecipeToRecipeMatch,
)
from grocery_utils.quantities.combining import combine_quantities, merge_notes

logger = logging.getLogger(__name__)


class MatchAction(str, enum.Enum):
    MERGE = "merge"
    SEPARATE = "separate"
    SKIP = "skip"


class DuplicateAction(str, enum.Enum):
    MERGE = "merge"
    KEEP_SEPARATE = "keep_separate"


@dataclasses.dataclass
class NewListItem:
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    order: int = 0
    is_completed: bool = False
    needs_review: bool = False


@dataclasses.dataclass
class ItemUpdate:
    item_id: str
    quantity: Optional[str]
    unit: Optional[str]
    notes: Optional[str]
    needs_review: bool = False


@dataclasses.dataclass
class MutationPlan:
    creates: List[NewListItem] = dataclasses.field(default_factory=list)
    updates: List[ItemUpdate] = dataclasses.field(default_factory=list)
    deletes: List[str] = dataclasses.field(default_factory=list)

    @property
    def needs_review(self) -> bool:
        """True if any quantity in the plan could not be combined numerically."""
        return any(c.needs_review for c in self.creates) or any(
            u.needs_review for u in self.updates
        )

    def is_empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)


class _PlanBuilder:
    """Accumulates mutations, folding repeated merges into the same item."""

    def __init__(self):
        self.creates: List[NewListItem] = []
        self.updates: Dict[str, ItemUpdate] = {}
        self.deletes: List[str] = []

    def merge_into(
        self,
        item: GroceryListItem,
        quantity: Optional[str],
        unit: Optional[str],
        notes: Optional[str],
    ) -> None:
        previous = self.updates.get(item.id)
        if previous is not None:
            base_quantity, base_unit, base_notes = (
                previous.quantity,
                previous.unit,
                previous.notes,
            )
        else:
            base_quantity, base_unit, base_notes = item.quantity, item.unit, item.notes

        combined = combine_quantities(base_quantity, base_unit, quantity, unit)
        self.updates[item.id] = ItemUpdate(
            item_id=item.id,
            quantity=combined.quantity,
            unit=combined.unit,
            notes=merge_notes(base_notes, notes),
            needs_review=combined.needs_review
            or (previous is not None and previous.needs_review),
        )

    def add(self, item: NewListItem) -> None:
        self.creates.append(item)

    def delete(self, item_id: str) -> None:
        self.updates.pop(item_id, None)
        self.deletes.append(item_id)

    def build(self) -> MutationPlan:
        return MutationPlan(
            creates=list(self.creates),
            updates=list(self.updates.values()),
            deletes=list(self.deletes),
        )


def plan_new_item(candidate: CandidateIngredient) -> NewListItem:
    """Describe a new list item for a candidate, with its scaled quantity."""
    return NewListItem(
        name=candidate.name,
        quantity=candidate.scaled_quantity,
        unit=candidate.unit,
        notes=candidate.notes,
    )


def _merge_group(match: RecipeToRecipeMatch) -> NewListItem:
    """Combine every member of a recipe-to-recipe group into one new item."""
    first = match.candidates[0]
    quantity, unit, notes = first.scaled_quantity, first.unit, first.notes
    needs_review = False

    for member in match.candidates[1:]:
        combined = combine_quantities(
            quantity, unit, member.scaled_quantity, member.unit
        )
        quantity, unit = combined.quantity, combined.unit
        needs_review = needs_review or combined.needs_review
        notes = merge_notes(notes, member.notes)

    return NewListItem(
        name=first.name,
        quantity=quantity,
        unit=unit,
        notes=notes,
        needs_review=needs_review,
    )


def _apply_exact(builder: _PlanBuilder, match: Union[ExactMatch, PartialMatch]):
    candidate = match.candidate
    builder.merge_into(
        match.existing_item,
        candidate.scaled_quantity,
        candidate.unit,
        candidate.notes,
    )


def _apply_partial(
    builder: _PlanBuilder,
    match: Union[PartialMatch, RecipeToRecipeMatch],
    action: Union[MatchAction, str],
) -> None:
    action = MatchAction(action)
    if action is MatchAction.SKIP:
        return

    if isinstance(match, RecipeToRecipeMatch):
        if action is MatchAction.MERGE:
            builder.add(_merge_group(match))
        else:
            for member in match.candidates:
                builder.add(plan_new_item(member))
        return

    if action is MatchAction.MERGE:
        _apply_exact(builder, match)
    else:
        builder.add(plan_new_item(match.candidate))


def plan_exact_merge(match: Union[ExactMatch, PartialMatch]) -> MutationPlan:
    """Plan merging a matched candidate into its existing list item."""
    builder = _PlanBuilder()
    _apply_exact(builder, match)
    return builder.build()


def plan_partial_decision(
    match: Union[PartialMatch, RecipeToRecipeMatch],
    action: Union[MatchAction, str],
) -> MutationPlan:
    """Plan the user's decision on one partial or recipe-to-recipe match.

    Args:
        match: The match the user resolved.
        action: "merge", "separate" or "skip".

    Returns:
        For a partial match, "merge" updates the existing item and "separate"
        adds the candidate as a new item. For a recipe-to-recipe group,
        "merge" adds one item combining every member and "separate" adds one
        item per member. "skip" plans nothing.

    Raises:
        ValueError: If the action is not one of the above.
    """
    builder = _PlanBuilder()
    _apply_partial(builder, match, action)
    return builder.build()


def plan_reconciliation(
    result: ReconciliationResult,
    decisions: Optional[Mapping[int, Union[MatchAction, str]]] = None,
) -> MutationPlan:
    """Plan every mutation for a reconciled batch.

    Partial matches are resolved with ``decisions`` (keyed by position in
    ``result.partial_matches``; unlisted matches are skipped). Exact matches
    are merged into their items and new items are added automatically.
    Several merges into the same existing item fold into one update.

    Args:
        result: Output of :func:`reconcile`.
        decisions: User decisions for the partial matches.

    Returns:
        The combined MutationPlan for the whole batch.
    """
    decisions = decisions or {}
    unknown = set(decisions) - set(range(len(result.partial_matches)))
    if unknown:
        raise ValueError(
            f"Decisions reference unknown partial matches: {sorted(unknown)}"
        )

    builder = _PlanBuilder()
    for index, match in enumerate(result.partial_matches):
        _apply_partial(builder, match, decisions.get(index, MatchAction.SKIP))
    for match in result.exact_matches:
        _apply_exact(builder, match)
    for match in result.new_items:
        builder.add(plan_new_item(match.candidate))

    plan = builder.build()
    logger.debug(
        "Planned %d creates, %d updates, %d deletes",
        len(plan.creates),
        len(plan.updates),
        len(plan.deletes),
    )
    return plan


def plan_duplicate_resolution(
    group: DuplicateGroup, action: Union[DuplicateAction, str]
) -> MutationPlan:
    """Plan the resolution of one duplicate group.

    "merge" folds each duplicate's quantity and unit (when it has either) and
    its notes into the primary item and deletes the duplicates in the same
    plan.
    "keep_separate" plans nothing.

    Raises:
        ValueError: If the action is not "merge" or "keep_separate".
    """
    action = DuplicateAction(action)
    builder = _PlanBuilder()
    if action is DuplicateAction.KEEP_SEPARATE:
        return builder.build()

    primary = group.primary_item
    quantity, unit, notes = primary.quantity, primary.unit, primary.notes
    needs_review = False

    for duplicate in group.duplicate_items:
        if duplicate.quantity or duplicate.unit:
            combined = combine_quantities(
                quantity, unit, duplicate.quantity, duplicate.unit
            )
            quantity, unit = combined.quantity, combined.unit
            needs_review = needs_review or combined.needs_review
        notes = merge_notes(notes, duplicate.notes)

    builder.updates[primary.id] = ItemUpdate(
        item_id=primary.id,
        quantity=quantity,
        unit=unit,
        notes=notes,
        needs_review=needs_review,
    )
    for duplicate in group.duplicate_items:
        builder.delete(duplicate.id)
    return builder.build()
