import pytest

from grocery_utils.ingredients import similarity
from grocery_utils.matching.duplicates import find_duplicates
from grocery_utils.matching.models import GroceryListItem


def make_items(*names):
    return [GroceryListItem(id=str(i), name=name) for i, name in enumerate(names)]


def test_find_duplicates_groups_plural_forms():
    items = make_items("tomato", "tomatoes", "basil")
    groups = find_duplicates(items)

    assert len(groups) == 1
    (group,) = groups
    assert group.primary_item == items[0]
    assert group.duplicate_items == [items[1]]
    assert group.items == items[:2]
    assert group.confidence == pytest.approx(similarity.PLURAL_VARIANT_SCORE)


def test_find_duplicates_is_idempotent():
    items = make_items("tomato", "basil", "tomatoes", "onion", "red onion")
    assert find_duplicates(items) == find_duplicates(items)


def test_find_duplicates_confidence_covers_all_members():
    """Test group confidence is the best score between any two members."""
    items = make_items("red onion", "onion", "onions")
    (group,) = find_duplicates(items)

    assert group.items == items
    assert group.confidence == pytest.approx(similarity.PLURAL_VARIANT_SCORE)


def test_find_duplicates_item_in_one_group_only():
    items = make_items("onion", "onions", "red onion", "onion")
    groups = find_duplicates(items)

    assert len(groups) == 1
    assert [item.id for item in groups[0].items] == ["0", "1", "2", "3"]


@pytest.mark.parametrize(
    "names",
    [(), ("milk",), ("milk", "eggs", "bread")],
)
def test_find_duplicates_no_groups(names):
    assert find_duplicates(make_items(*names)) == []


def test_find_duplicates_rejects_repeated_ids():
    items = [GroceryListItem(id="1", name="milk"), GroceryListItem(id="1", name="eggs")]
    with pytest.raises(ValueError):
        find_duplicates(items)


def test_find_duplicates_scores_each_pair_once(mocker):
    spy = mocker.spy(similarity, "ingredient_similarity")
    find_duplicates(make_items("tomato", "tomatoes", "basil"))

    # three pairs plus the diagonal
    assert spy.call_count == 6
