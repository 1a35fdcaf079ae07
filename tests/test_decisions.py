import pytest

from grocery_utils.ingredients.models import CandidateIngredient
from grocery_utils.ingredients.parsing import parse_ingredient_line
from grocery_utils.matching.decisions import (
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
from grocery_utils.matching.models import (
    DuplicateGroup,
    ExactMatch,
    GroceryListItem,
    PartialMatch,
    RecipeToRecipeMatch,
)
from grocery_utils.matching.reconcile import reconcile


def make_candidate(line, recipe_id="r1", multiplier=1):
    return CandidateIngredient(
        ingredient=parse_ingredient_line(line),
        recipe_id=recipe_id,
        multiplier=multiplier,
    )


@pytest.fixture
def onion_item():
    return GroceryListItem(id="1", name="onion", quantity="1", unit="cup")


def test_plan_exact_merge(onion_item):
    """Test that an exact match adds its quantity to the existing item."""
    match = ExactMatch(make_candidate("1 cup onion"), onion_item, 1.0)
    plan = plan_exact_merge(match)

    assert plan == MutationPlan(updates=[ItemUpdate("1", "2", "cup", None)])
    assert not plan.needs_review


def test_plan_exact_merge_uses_scaled_quantity(onion_item):
    match = ExactMatch(make_candidate("1 cup onion", multiplier=2), onion_item, 1.0)
    assert plan_exact_merge(match).updates == [ItemUpdate("1", "3", "cup", None)]


def test_exact_match_then_combine_end_to_end(onion_item):
    result = reconcile([make_candidate("1 cup onion")], [onion_item])
    plan = plan_reconciliation(result)

    assert plan.updates == [ItemUpdate("1", "2", "cup", None)]
    assert plan.creates == []


def test_plan_reconciliation_folds_updates_to_same_item(onion_item):
    """Test that several merges into one item build on each other."""
    candidates = [
        make_candidate("1 cup onion (diced)", "r1"),
        make_candidate("2 tbsp onion (minced)", "r1"),
    ]
    result = reconcile(candidates, [onion_item])
    assert len(result.exact_matches) == 2

    plan = plan_reconciliation(result)
    assert plan.updates == [ItemUpdate("1", "2⅛", "cup", "diced; minced")]


def test_plan_new_item():
    candidate = make_candidate("2 onions (yellow)", multiplier=2)
    assert plan_new_item(candidate) == NewListItem(
        name="onions", quantity="4", unit=None, notes="yellow"
    )


@pytest.fixture
def partial_match():
    item = GroceryListItem(id="7", name="red onion", quantity="1", unit="cup")
    return PartialMatch(make_candidate("1 cup onion"), item, 0.9)


def test_partial_merge(partial_match):
    plan = plan_partial_decision(partial_match, MatchAction.MERGE)
    assert plan == MutationPlan(updates=[ItemUpdate("7", "2", "cup", None)])


def test_partial_separate(partial_match):
    plan = plan_partial_decision(partial_match, "separate")
    assert plan == MutationPlan(creates=[NewListItem("onion", "1", "cup")])


def test_partial_skip(partial_match):
    assert plan_partial_decision(partial_match, "skip").is_empty()


def test_partial_unknown_action(partial_match):
    with pytest.raises(ValueError):
        plan_partial_decision(partial_match, "explode")


@pytest.fixture
def onion_group():
    return RecipeToRecipeMatch(
        candidates=[
            make_candidate("1 cup onion, diced", "A"),
            make_candidate("2 tbsp onions", "B"),
        ],
        confidence=0.8,
    )


def test_recipe_group_merge(onion_group):
    """Test that merging a group creates one combined item."""
    plan = plan_partial_decision(onion_group, "merge")
    assert plan == MutationPlan(
        creates=[NewListItem(name="onion, diced", quantity="1⅛", unit="cup")]
    )


def test_recipe_group_merge_flags_incompatible_units():
    group = RecipeToRecipeMatch(
        candidates=[
            make_candidate("1 cup onion", "A"),
            make_candidate("2 onions", "B"),
        ],
        confidence=0.8,
    )
    plan = plan_partial_decision(group, "merge")

    (created,) = plan.creates
    assert created.quantity == "1 cup + 2"
    assert created.unit is None
    assert created.needs_review
    assert plan.needs_review


def test_recipe_group_separate(onion_group):
    plan = plan_partial_decision(onion_group, "separate")
    assert plan.creates == [
        NewListItem("onion, diced", "1", "cup"),
        NewListItem("onions", "2", "tbsp"),
    ]
    assert plan.updates == []


def test_plan_reconciliation_defaults_to_skip():
    result = reconcile(
        [make_candidate("1 cup onion", "A"), make_candidate("2 onions", "B")], []
    )
    assert plan_reconciliation(result).is_empty()


def test_plan_reconciliation_applies_decisions():
    items = [GroceryListItem(id="7", name="red onion", quantity="1", unit="cup")]
    candidates = [
        make_candidate("1 cup onion", "r1"),
        make_candidate("1 tomato", "r1"),
        make_candidate("2 tomatoes", "r2"),
        make_candidate("1 lemon", "r1"),
    ]
    result = reconcile(candidates, items)
    assert [m.match_type for m in result.partial_matches] == [
        "partial",
        "recipe-to-recipe",
    ]

    plan = plan_reconciliation(result, {0: "merge", 1: MatchAction.MERGE})
    assert plan.updates == [ItemUpdate("7", "2", "cup", None)]
    assert plan.creates == [
        NewListItem("tomato", "3", None),
        NewListItem("lemon", "1", None),
    ]
    assert plan.deletes == []


def test_plan_reconciliation_rejects_unknown_index(onion_item):
    result = reconcile([make_candidate("1 cup onion")], [onion_item])
    with pytest.raises(ValueError):
        plan_reconciliation(result, {3: "merge"})


def test_plan_duplicate_merge():
    """Test that duplicates fold into the primary and are deleted."""
    primary = GroceryListItem(id="1", name="tomato", quantity="2")
    duplicates = [
        GroceryListItem(id="2", name="tomatoes", quantity="3", notes="roma"),
        GroceryListItem(id="3", name="Tomato", notes="ripe"),
    ]
    group = DuplicateGroup(primary, duplicates, 0.95)
    plan = plan_duplicate_resolution(group, DuplicateAction.MERGE)

    assert plan.updates == [ItemUpdate("1", "5", None, "roma; ripe")]
    assert plan.deletes == ["2", "3"]
    assert plan.creates == []


def test_plan_duplicate_merge_converts_units():
    primary = GroceryListItem(id="1", name="butter", quantity="1", unit="lb")
    duplicate = GroceryListItem(id="2", name="butter", quantity="8", unit="oz")
    plan = plan_duplicate_resolution(DuplicateGroup(primary, [duplicate], 1.0), "merge")

    assert plan.updates == [ItemUpdate("1", "1½", "lb", None)]
    assert plan.deletes == ["2"]


def test_plan_duplicate_keep_separate():
    group = DuplicateGroup(
        GroceryListItem(id="1", name="tomato"),
        [GroceryListItem(id="2", name="tomatoes")],
        0.95,
    )
    assert plan_duplicate_resolution(group, "keep_separate").is_empty()
    with pytest.raises(ValueError):
        plan_duplicate_resolution(group, "skip")


def test_plan_duplicate_merge_keeps_unit_only_duplicates():
    """Test that a duplicate with a unit but no quantity still reaches the primary."""
    primary = GroceryListItem(id="1", name="basil")
    duplicate = GroceryListItem(id="2", name="basil", unit="bunch")
    plan = plan_duplicate_resolution(DuplicateGroup(primary, [duplicate], 1.0), "merge")
    assert plan.updates == [ItemUpdate("1", None, "bunch", None)]

    primary = GroceryListItem(id="1", name="lettuce", unit="bunch")
    duplicate = GroceryListItem(id="2", name="lettuce", unit="head")
    plan = plan_duplicate_resolution(DuplicateGroup(primary, [duplicate], 1.0), "merge")
    assert plan.updates == [
        ItemUpdate("1", "bunch + head", None, None, needs_review=True)
    ]
    assert plan.deletes == ["2"]


def test_plan_reconciliation_does_not_round_away_small_amounts():
    item = GroceryListItem(id="1", name="flour", quantity="1", unit="lb")
    result = reconcile([make_candidate("1 g flour")], [item])
    plan = plan_reconciliation(result)

    assert plan.updates == [ItemUpdate("1", "1 lb + 1 g", None, None, True)]
    assert plan.needs_review
