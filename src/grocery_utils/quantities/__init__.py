"""Quantity parsing, unit normalization and quantity combination."""

from .combining import CombinedQuantity, combine_quantities, merge_notes
from .parsing import (
    QuantityRange,
    QuantityValue,
    format_quantity,
    parse_quantity,
    scale_quantity,
    shopping_amount,
    split_leading_quantity,
)
from .units import (
    UNIT_LOOKUP,
    UNIT_MAP,
    convert_quantity,
    lookup_unit,
    normalize_unit,
    unit_dimension,
)

__all__ = [
    "QuantityRange",
    "QuantityValue",
    "parse_quantity",
    "split_leading_quantity",
    "scale_quantity",
    "format_quantity",
    "shopping_amount",
    "UNIT_MAP",
    "UNIT_LOOKUP",
    "normalize_unit",
    "lookup_unit",
    "unit_dimension",
    "convert_quantity",
    "CombinedQuantity",
    "combine_quantities",
    "merge_notes",
]
