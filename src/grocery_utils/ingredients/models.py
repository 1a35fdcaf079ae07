import dataclasses
import logging
from fractions import Fraction
from typing import Optional, Union

from grocery_utils.quantities.parsing import (
    QuantityValue,
    format_quantity,
    parse_quantity,
    scale_quantity,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ParsedIngredient:
    quantity: Optional[str]  # original textual form, e.g. "1 1/2"
    unit: Optional[str]
    ingredient_name: str
    notes: Optional[str] = None


@dataclasses.dataclass
class RecipeIngredient:
    """A structured ingredient entry as stored on a recipe or variant."""

    ingredient: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    notes: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class CandidateIngredient:
    """A parsed ingredient line annotated with the recipe it came from."""

    ingredient: ParsedIngredient
    recipe_id: str
    recipe_title: str = ""
    variant_id: Optional[str] = None
    multiplier: Union[int, float, Fraction] = 1
    source_index: int = 0

    @property
    def name(self) -> str:
        return self.ingredient.ingredient_name

    @property
    def unit(self) -> Optional[str]:
        return self.ingredient.unit

    @property
    def notes(self) -> Optional[str]:
        return self.ingredient.notes

    @property
    def scaled_value(self) -> Optional[QuantityValue]:
        """Parsed quantity multiplied by the recipe multiplier, if parseable."""
        try:
            value = parse_quantity(self.ingredient.quantity)
        except ValueError as e:
            logger.debug(
                "Dropping malformed quantity %r for %r: %s",
                self.ingredient.quantity,
                self.name,
                e,
            )
            return None
        if value is None:
            return None
        return scale_quantity(value, self.multiplier)

    @property
    def scaled_quantity(self) -> Optional[str]:
        """Formatted scaled quantity.

        Unparseable quantity text is kept verbatim when no scaling is needed
        and becomes None otherwise.
        """
        value = self.scaled_value
        if value is not None:
            return format_quantity(value)
        if self.multiplier == 1 and self.ingredient.quantity:
            return self.ingredient.quantity.strip() or None
        return None
