"""Fuzzy equivalence scoring between ingredient names.

Recipe-to-recipe grouping, list matching and the duplicate scan all score
names through :func:`ingredient_similarity` and compare against the
thresholds defined here.
"""

import re
from difflib import SequenceMatcher
from typing import List, Sequence

import numpy as np

# --- Constants ---

# Scores at or above this are "plausibly the same ingredient"
SIMILARITY_THRESHOLD = 0.6
# Only normalized-identical names reach this score
EXACT_MATCH_THRESHOLD = 1.0
# Fixed confidence reported for a recipe-to-recipe group
RECIPE_TO_RECIPE_CONFIDENCE = 0.8

PLURAL_VARIANT_SCORE = 0.95
CONTAINMENT_SCORE = 0.9
# One name is the start or end of the other ("salt" in "salted butter")
SUBSTRING_SCORE = 0.75
MIN_SUBSTRING_LENGTH = 3

# Names sharing no words only count as similar when they look like a
# misspelling of each other; anything else stays below this cap
UNRELATED_SCORE_CAP = 0.35
MISSPELLING_RATIO = 0.9
MIN_MISSPELLING_LENGTH = 5

_IRREGULAR_PLURALS = {
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
    "geese": "goose",
}

_WORD_RE = re.compile(r"[^\W_]+")

# --- Functions ---


def normalize_ingredient_name(name: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return " ".join((name or "").lower().split())


def singularize(word: str) -> str:
    """Reduce a word to a singular comparison key.

    The key is not always a dictionary word ("berries" and "berry" both
    become "berri"), but singular and plural forms share the same key.

    Examples:
        >>> singularize("onions")
        'onion'
        >>> singularize("tomatoes")
        'tomato'
        >>> singularize("berries") == singularize("berry")
        True
    """
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if len(word) <= 3:
        return word

    if word.endswith("ies"):
        word = word[:-3] + "i"
    elif word.endswith("es") and word[:-2].endswith(("s", "x", "z", "ch", "sh", "o")):
        word = word[:-2]
    elif word.endswith("s") and not word.endswith(("ss", "us", "is")):
        word = word[:-1]

    if word.endswith("y"):
        word = word[:-1] + "i"
    elif word.endswith("ie"):
        word = word[:-1]
    return word


def _tokens(name: str) -> List[str]:
    return [singularize(word) for word in _WORD_RE.findall(name)]


def _is_prefix_or_suffix(a: str, b: str) -> bool:
    shorter, longer = sorted((a, b), key=len)
    if len(shorter) < MIN_SUBSTRING_LENGTH:
        return False
    return longer.startswith(shorter) or longer.endswith(shorter)


def _character_similarity(a: str, b: str) -> float:
    ratio = SequenceMatcher(None, a, b).ratio()
    if ratio >= MISSPELLING_RATIO and min(len(a), len(b)) >= MIN_MISSPELLING_LENGTH:
        return ratio
    return min(ratio, UNRELATED_SCORE_CAP)


def ingredient_similarity(name_a: str, name_b: str) -> float:
    """Score how likely two ingredient names refer to the same item.

    Scoring, in order:
        - identical after normalization: 1.0
        - same words up to plural forms and punctuation: 0.95
        - all words of one name appear in the other: 0.9
        - one name starts or ends the other: 0.75
        - some shared words: shared / larger word count
        - no shared words: character-level similarity of the singular forms,
          capped at 0.35 unless the names look like a misspelling

    Args:
        name_a: First ingredient name.
        name_b: Second ingredient name.

    Returns:
        A deterministic score in [0, 1]. Empty names score 0.0.

    Examples:
        >>> ingredient_similarity("onion", "onions")
        0.95
        >>> ingredient_similarity("onion", "diced onion")
        0.9
        >>> ingredient_similarity("onion", "garlic") < 0.4
        True
    """
    a = normalize_ingredient_name(name_a)
    b = normalize_ingredient_name(name_b)
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    tokens_a = _tokens(a)
    tokens_b = _tokens(b)
    if not tokens_a or not tokens_b:
        return _character_similarity(a, b)

    if tokens_a == tokens_b:
        return PLURAL_VARIANT_SCORE

    set_a, set_b = set(tokens_a), set(tokens_b)
    if set_a <= set_b or set_b <= set_a:
        return CONTAINMENT_SCORE

    if _is_prefix_or_suffix(a, b):
        return SUBSTRING_SCORE

    common = set_a & set_b
    if common:
        return len(common) / max(len(set_a), len(set_b))

    return _character_similarity(" ".join(tokens_a), " ".join(tokens_b))


def is_similar(name_a: str, name_b: str) -> bool:
    """True when two names clear the shared similarity threshold."""
    return ingredient_similarity(name_a, name_b) >= SIMILARITY_THRESHOLD


def similarity_matrix(names: Sequence[str]) -> np.ndarray:
    """Compute the pairwise similarity matrix for a list of names.

    Each pair is scored once as ``(names[i], names[j])`` with ``i <= j`` and
    mirrored, so the matrix is symmetric.

    Args:
        names: Ingredient names to compare.

    Returns:
        An ``(n, n)`` float array of similarity scores.
    """
    n = len(names)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i, n):
            score = ingredient_similarity(names[i], names[j])
            matrix[i, j] = score
            matrix[j, i] = score
    return matrix
