"""Grocery Utils - Ingredient parsing and shopping list consolidation."""

__version__ = "0.1.0"

from . import ingredients, matching, quantities, reporting

__all__ = ["ingredients", "matching", "quantities", "reporting"]
