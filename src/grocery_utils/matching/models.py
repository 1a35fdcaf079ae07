import dataclasses
from typing import ClassVar, Dict, List, Optional, Union

from grocery_utils.ingredients.models import CandidateIngredient


@dataclasses.dataclass
class GroceryListItem:
    id: str
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    order: int = 0
    is_completed: bool = False


@dataclasses.dataclass(frozen=True)
class ExactMatch:
    """Candidate whose name is identical to an existing list item's name."""

    match_type: ClassVar[str] = "exact"

    candidate: CandidateIngredient
    existing_item: GroceryListItem
    confidence: float


@dataclasses.dataclass(frozen=True)
class PartialMatch:
    """Candidate similar, but not identical, to an existing list item."""

    match_type: ClassVar[str] = "partial"

    candidate: CandidateIngredient
    existing_item: GroceryListItem
    confidence: float


@dataclasses.dataclass(frozen=True)
class RecipeToRecipeMatch:
    """Candidates from different recipes in one batch judged to be the same.

    There is no existing list item to merge into; the user chooses whether
    the group becomes one combined item or one item per member.
    """

    match_type: ClassVar[str] = "recipe-to-recipe"

    candidates: List[CandidateIngredient]
    confidence: float

    @property
    def candidate(self) -> CandidateIngredient:
        """The first member, used as the group's display ingredient."""
        return self.candidates[0]

    @property
    def existing_item(self) -> None:
        return None


@dataclasses.dataclass(frozen=True)
class NewItem:
    """Candidate that matched nothing on the list or in its batch."""

    match_type: ClassVar[str] = "new"

    candidate: CandidateIngredient
    confidence: float

    @property
    def existing_item(self) -> None:
        return None


MatchResult = Union[ExactMatch, PartialMatch, RecipeToRecipeMatch, NewItem]


@dataclasses.dataclass
class ReconciliationResult:
    exact_matches: List[ExactMatch] = dataclasses.field(default_factory=list)
    # PartialMatch and RecipeToRecipeMatch, in candidate order
    partial_matches: List[Union[PartialMatch, RecipeToRecipeMatch]] = (
        dataclasses.field(default_factory=list)
    )
    new_items: List[NewItem] = dataclasses.field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        return {
            "partial_match_count": len(self.partial_matches),
            "exact_match_count": len(self.exact_matches),
            "new_item_count": len(self.new_items),
        }


@dataclasses.dataclass
class DuplicateGroup:
    primary_item: GroceryListItem
    duplicate_items: List[GroceryListItem]
    confidence: float

    @property
    def items(self) -> List[GroceryListItem]:
        return [self.primary_item, *self.duplicate_items]
