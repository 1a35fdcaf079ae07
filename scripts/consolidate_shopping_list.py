#!/usr/bin/env python3
"""
Consolidate a batch of recipes into an existing shopping list.
Writes reconciliation, duplicate and mutation plan reports as CSV.
"""

import argparse
import datetime
import json
import os

import pandas as pd
from tqdm.auto import tqdm

from grocery_utils.ingredients import RecipeIngredient
from grocery_utils.matching import (
    DuplicateAction,
    GroceryListItem,
    MatchAction,
    RecipeSelection,
    build_candidates,
    find_duplicates,
    plan_duplicate_resolution,
    plan_reconciliation,
    reconcile,
)
from grocery_utils.reporting import (
    duplicates_to_dataframe,
    mutation_plan_to_dataframe,
    reconciliation_to_dataframe,
)


def _blank_to_none(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def load_selections(path):
    """Load recipe selections from a JSON list of recipe objects."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    def entries(raw):
        if raw is None:
            return None
        return [
            entry
            if isinstance(entry, str)
            else RecipeIngredient(
                ingredient=entry.get("ingredient", ""),
                quantity=_blank_to_none(entry.get("quantity")),
                unit=_blank_to_none(entry.get("unit")),
                notes=_blank_to_none(entry.get("notes")),
            )
            for entry in raw
        ]

    return [
        RecipeSelection(
            recipe_id=str(recipe["recipe_id"]),
            title=recipe.get("title", ""),
            ingredients=entries(recipe.get("ingredients", [])),
            variant_id=recipe.get("variant_id"),
            variant_ingredients=entries(recipe.get("variant_ingredients")),
            multiplier=recipe.get("multiplier", 1),
        )
        for recipe in data
    ]


def load_list_items(path):
    """Load the current shopping list from CSV (id and name columns required)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = {"id", "name"} - set(df.columns)
    if missing:
        raise ValueError(f"List file {path} is missing columns: {sorted(missing)}")

    items = []
    for position, row in enumerate(df.to_dict("records")):
        items.append(
            GroceryListItem(
                id=row["id"],
                name=row["name"],
                quantity=_blank_to_none(row.get("quantity")),
                unit=_blank_to_none(row.get("unit")),
                notes=_blank_to_none(row.get("notes")),
                category=_blank_to_none(row.get("category")),
                order=int(row.get("order") or position),
                is_completed=str(row.get("is_completed", "")).lower() == "true",
            )
        )
    return items


def main():
    """Main function to consolidate recipes into a shopping list."""
    parser = argparse.ArgumentParser(
        description="Reconcile recipe ingredients against a shopping list"
    )
    parser.add_argument(
        "--recipes",
        type=str,
        required=True,
        help="JSON file with the recipes to add",
    )
    parser.add_argument(
        "--list",
        type=str,
        default=None,
        help="CSV file with the current shopping list",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data",
        help="Output directory for report files",
    )
    parser.add_argument(
        "--partial-action",
        type=str,
        choices=[action.value for action in MatchAction],
        default=MatchAction.SKIP.value,
        help="Decision applied to every partial and recipe-to-recipe match",
    )
    parser.add_argument(
        "--merge-duplicates",
        action="store_true",
        help="Plan a merge for every duplicate group on the list",
    )
    args = parser.parse_args()

    selections = load_selections(args.recipes)
    items = load_list_items(args.list) if args.list else []
    print(f"Loaded {len(selections)} recipes and {len(items)} list items")

    candidates = []
    for selection in tqdm(selections, desc="Parsing recipes"):
        candidates.extend(build_candidates([selection]))

    print("Reconciling ingredients...")
    result = reconcile(candidates, items)
    summary = result.summary()
    print(f"  - Exact matches: {summary['exact_match_count']}")
    print(f"  - Partial matches: {summary['partial_match_count']}")
    print(f"  - New items: {summary['new_item_count']}")

    decisions = {
        index: args.partial_action for index in range(len(result.partial_matches))
    }
    plan = plan_reconciliation(result, decisions)

    groups = find_duplicates(items)
    print(f"Found {len(groups)} duplicate groups on the list")
    duplicate_plans = []
    if args.merge_duplicates:
        for group in tqdm(groups, desc="Planning duplicate merges"):
            duplicate_plans.append(
                plan_duplicate_resolution(group, DuplicateAction.MERGE)
            )

    os.makedirs(args.output_dir, exist_ok=True)
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    reports = {
        "reconciliation": reconciliation_to_dataframe(result),
        "duplicates": duplicates_to_dataframe(groups),
        "plan": pd.concat(
            [mutation_plan_to_dataframe(p) for p in [plan, *duplicate_plans]],
            ignore_index=True,
        ),
    }
    for name, df in reports.items():
        output_file = os.path.join(args.output_dir, f"{name}_{timestamp}.csv")
        df.to_csv(output_file, index=False)
        print(f"  - {name}: {len(df)} rows -> {output_file}")

    if plan.needs_review or any(p.needs_review for p in duplicate_plans):
        print("Some combined quantities could not be added and need review.")


if __name__ == "__main__":
    main()
