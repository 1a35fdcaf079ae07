from grocery_utils.ingredients.models import CandidateIngredient
from grocery_utils.ingredients.parsing import parse_ingredient_line
from grocery_utils.matching.decisions import ItemUpdate, MutationPlan, NewListItem
from grocery_utils.matching.duplicates import find_duplicates
from grocery_utils.matching.models import GroceryListItem, ReconciliationResult
from grocery_utils.matching.reconcile import reconcile
from grocery_utils.reporting import (
    DUPLICATE_COLUMNS,
    PLAN_COLUMNS,
    RECONCILIATION_COLUMNS,
    duplicates_to_dataframe,
    mutation_plan_to_dataframe,
    reconciliation_to_dataframe,
)


def make_candidate(line, recipe_id="r1"):
    return CandidateIngredient(parse_ingredient_line(line), recipe_id, "Recipe")


def test_reconciliation_to_dataframe():
    """Test one row per candidate, with group members sharing an index."""
    items = [GroceryListItem(id="1", name="milk", quantity="1", unit="cup")]
    candidates = [
        make_candidate("1 cup onion, diced", "A"),
        make_candidate("2 onions", "B"),
        make_candidate("1 cup milk", "A"),
    ]
    df = reconciliation_to_dataframe(reconcile(candidates, items))

    assert list(df.columns) == RECONCILIATION_COLUMNS
    assert df["match_type"].tolist() == [
        "recipe-to-recipe",
        "recipe-to-recipe",
        "exact",
    ]
    assert df["match_index"].tolist() == [0, 0, 0]
    assert df["ingredient"].tolist() == ["onion, diced", "onions", "milk"]
    assert df["existing_item_id"].tolist() == [None, None, "1"]
    assert df["confidence"].tolist() == [0.8, 0.8, 1.0]


def test_reconciliation_to_dataframe_empty():
    df = reconciliation_to_dataframe(ReconciliationResult())
    assert df.empty
    assert list(df.columns) == RECONCILIATION_COLUMNS


def test_duplicates_to_dataframe():
    items = [
        GroceryListItem(id="a", name="tomato", quantity="2"),
        GroceryListItem(id="b", name="basil"),
        GroceryListItem(id="c", name="tomatoes", quantity="1"),
    ]
    df = duplicates_to_dataframe(find_duplicates(items))

    assert list(df.columns) == DUPLICATE_COLUMNS
    assert df["item_id"].tolist() == ["a", "c"]
    assert df["role"].tolist() == ["primary", "duplicate"]
    assert df["group"].tolist() == [0, 0]


def test_mutation_plan_to_dataframe():
    plan = MutationPlan(
        creates=[NewListItem("lemon", "1")],
        updates=[ItemUpdate("1", "2", "cup", None)],
        deletes=["2"],
    )
    df = mutation_plan_to_dataframe(plan)

    assert list(df.columns) == PLAN_COLUMNS
    assert df["action"].tolist() == ["create", "update", "delete"]
    assert df["item_id"].tolist() == [None, "1", "2"]
    assert df["quantity"].tolist() == ["1", "2", None]
    assert not df["needs_review"].any()
