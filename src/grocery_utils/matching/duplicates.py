"""Detect near-duplicate items already on a shopping list."""

import logging
from typing import List, Sequence

import numpy as np

from grocery_utils.ingredients import similarity
from grocery_utils.matching.models import DuplicateGroup, GroceryListItem

logger = logging.getLogger(__name__)


def find_duplicates(items: Sequence[GroceryListItem]) -> List[DuplicateGroup]:
    """Group list items whose names refer to the same ingredient.

    Items are visited in list order. Each unclaimed item seeds a group made
    of every later unclaimed item scoring at or above the similarity
    threshold against it; an item belongs to at most one group.

    Args:
        items: Current shopping list items. Ids must be unique.

    Returns:
        Duplicate groups of two or more items, in list order. Each group's
        confidence is the highest pairwise score between its members.

    Raises:
        ValueError: If two items share an id.
    """
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise ValueError("Shopping list item ids must be unique")
    if len(items) < 2:
        return []

    scores = similarity.similarity_matrix([item.name for item in items])
    claimed = np.zeros(len(items), dtype=bool)
    groups = []

    for i, primary in enumerate(items):
        if claimed[i]:
            continue

        members = [
            j
            for j in range(i + 1, len(items))
            if not claimed[j] and scores[i, j] >= similarity.SIMILARITY_THRESHOLD
        ]
        if not members:
            continue

        claimed[i] = True
        claimed[members] = True

        indices = [i, *members]
        block = scores[np.ix_(indices, indices)]
        confidence = float(block[np.triu_indices(len(indices), k=1)].max())

        groups.append(
            DuplicateGroup(
                primary_item=primary,
                duplicate_items=[items[j] for j in members],
                confidence=confidence,
            )
        )
        logger.debug(
            "Duplicate group for %r: %d items, confidence %.2f",
            primary.name,
            len(indices),
            confidence,
        )

    return groups
