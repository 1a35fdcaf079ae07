"""Ingredient line parsing and name similarity utilities."""

from .models import CandidateIngredient, ParsedIngredient, RecipeIngredient
from .parsing import clean_ingredient_name, parse_ingredient_line
from .similarity import (
    EXACT_MATCH_THRESHOLD,
    RECIPE_TO_RECIPE_CONFIDENCE,
    SIMILARITY_THRESHOLD,
    ingredient_similarity,
    normalize_ingredient_name,
    similarity_matrix,
    singularize,
)

__all__ = [
    "ParsedIngredient",
    "RecipeIngredient",
    "CandidateIngredient",
    "parse_ingredient_line",
    "clean_ingredient_name",
    "SIMILARITY_THRESHOLD",
    "EXACT_MATCH_THRESHOLD",
    "RECIPE_TO_RECIPE_CONFIDENCE",
    "normalize_ingredient_name",
    "singularize",
    "ingredient_similarity",
    "similarity_matrix",
]
