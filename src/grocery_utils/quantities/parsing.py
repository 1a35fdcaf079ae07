"""Quantity parsing, scaling and formatting utilities."""

import dataclasses
import re
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Optional, Tuple, Union

from grocery_utils.quantities.number_utils import (
    DISPLAY_FRACTIONS,
    UNICODE_FRACTIONS,
    _is_decimal,
    _is_fraction,
    _is_integer,
    _parse_fraction,
    to_fraction,
)

# --- Constants ---

_GLYPHS = "".join(UNICODE_FRACTIONS)

# Order matters: longer forms must be tried before their prefixes
_NUMBER_PATTERN = (
    rf"(?:[0-9]+\s*[{_GLYPHS}]"
    r"|[0-9]+\s+[0-9]+/[0-9]+"
    r"|[0-9]+/[0-9]+"
    r"|[0-9]*\.[0-9]+"
    r"|[0-9]+"
    rf"|[{_GLYPHS}])"
)
_RANGE_SEPARATOR = r"(?:\s*[-–—]\s*|\s+(?:to|or)\s+)"
_QUANTITY_PATTERN = rf"{_NUMBER_PATTERN}(?:{_RANGE_SEPARATOR}{_NUMBER_PATTERN})?"

NUMBER_RE = re.compile(rf"^{_NUMBER_PATTERN}$")
RANGE_RE = re.compile(
    rf"^(?P<low>{_NUMBER_PATTERN}){_RANGE_SEPARATOR}(?P<high>{_NUMBER_PATTERN})$",
    re.IGNORECASE,
)
LEADING_QUANTITY_RE = re.compile(
    rf"^(?P<quantity>{_QUANTITY_PATTERN})\s+(?P<rest>\S.*)$",
    re.IGNORECASE | re.DOTALL,
)

_CENTS = Decimal("0.01")


@dataclasses.dataclass(frozen=True)
class QuantityRange:
    """An inclusive range of quantities such as "2-3" or "1 to 1½"."""

    low: Fraction
    high: Fraction

    def __post_init__(self):
        low = to_fraction(self.low)
        high = to_fraction(self.high)
        if low > high:
            raise ValueError(f"Range low bound {low} exceeds high bound {high}")
        object.__setattr__(self, "low", low)
        object.__setattr__(self, "high", high)


QuantityValue = Union[Fraction, QuantityRange]

# --- Functions ---


def parse_quantity(text: Optional[str]) -> Optional[QuantityValue]:
    """Parse a quantity token into an exact value or range.

    Accepts integers, decimals, simple fractions, unicode fraction glyphs,
    mixed numbers and ranges ("2-3", "2 to 3", "1 or 2") whose bounds are
    any of the former. The whole token must be a quantity; surrounding
    whitespace is ignored.

    Args:
        text: Quantity text such as "1 1/2", "¾" or "2-3".

    Returns:
        A Fraction for single values, a QuantityRange for ranges, or None
        when the text is empty or not a quantity.

    Raises:
        ValueError: If the text is a range whose low bound exceeds its high bound.

    Examples:
        >>> parse_quantity("1 1/2")
        Fraction(3, 2)
        >>> parse_quantity("2 to 3")
        QuantityRange(low=Fraction(2, 1), high=Fraction(3, 1))
        >>> parse_quantity("a pinch") is None
        True
    """
    if not text or not text.strip():
        return None

    token = " ".join(text.split())
    try:
        if NUMBER_RE.match(token):
            return _parse_number(token)

        match = RANGE_RE.match(token)
        if match:
            low = _parse_number(match.group("low"))
            high = _parse_number(match.group("high"))
            return QuantityRange(low, high)
    except ZeroDivisionError:
        return None

    return None


def _parse_number(token: str) -> Fraction:
    """Parse a single (non-range) number token into a Fraction."""
    token = token.strip()

    # Pattern: "1½", "1 ½" or "½"
    if token[-1] in UNICODE_FRACTIONS:
        whole = token[:-1].strip()
        return (int(whole) if whole else 0) + UNICODE_FRACTIONS[token[-1]]

    # Pattern: "1 1/2" (whole number + fraction)
    parts = token.split()
    if len(parts) == 2 and _is_integer(parts[0]) and _is_fraction(parts[1]):
        return int(parts[0]) + _parse_fraction(parts[1])

    if _is_fraction(token):
        return _parse_fraction(token)

    if _is_decimal(token) or _is_integer(token):
        return Fraction(token)

    raise ValueError(f"Not a number: {token}")


def split_leading_quantity(text: str) -> Tuple[Optional[str], str]:
    """Split a leading quantity token from the start of a string.

    The token is only accepted when it is followed by whitespace and more
    text, so a bare trailing number ("7up", "pepper 2") is never mistaken
    for a quantity.

    Args:
        text: Ingredient text with a potential quantity at the start.

    Returns:
        A tuple containing:
            - quantity: The quantity token with whitespace collapsed, or None
            - rest: The remaining text after the quantity
    """
    text = text.strip()
    match = LEADING_QUANTITY_RE.match(text)
    if not match:
        return None, text

    quantity = " ".join(match.group("quantity").split())
    return quantity, match.group("rest").strip()


def scale_quantity(value: QuantityValue, multiplier) -> QuantityValue:
    """Scale a single value or both bounds of a range by a positive multiplier.

    Args:
        value: The quantity to scale.
        multiplier: A positive int, float, Decimal, Fraction or numeric string.

    Returns:
        The scaled quantity. A multiplier of 1 returns the input unchanged.

    Raises:
        ValueError: If the multiplier is not a positive number.
    """
    factor = to_fraction(multiplier)
    if factor <= 0:
        raise ValueError(f"Multiplier must be positive, got {multiplier!r}")
    if factor == 1:
        return value

    if isinstance(value, QuantityRange):
        return QuantityRange(value.low * factor, value.high * factor)
    return to_fraction(value) * factor


def add_quantities(a: QuantityValue, b: QuantityValue) -> QuantityValue:
    """Add two quantities; ranges add bound-wise."""
    if isinstance(a, QuantityRange) or isinstance(b, QuantityRange):
        a_low, a_high = _bounds(a)
        b_low, b_high = _bounds(b)
        return QuantityRange(a_low + b_low, a_high + b_high)
    return to_fraction(a) + to_fraction(b)


def _bounds(value: QuantityValue) -> Tuple[Fraction, Fraction]:
    if isinstance(value, QuantityRange):
        return value.low, value.high
    value = to_fraction(value)
    return value, value


def shopping_amount(value: QuantityValue) -> Fraction:
    """Return the amount to buy: the high bound of a range, else the value."""
    if isinstance(value, QuantityRange):
        return value.high
    return to_fraction(value)


def format_quantity(value: QuantityValue) -> str:
    """Render a quantity as human-readable text.

    Whole numbers render as integers, halves/thirds/quarters/eighths as a
    whole number followed by a unicode glyph, anything else as a decimal
    rounded to two places. Ranges render as "low-high".

    Examples:
        >>> format_quantity(Fraction(3, 2))
        '1½'
        >>> format_quantity(Fraction(1, 5))
        '0.2'
        >>> format_quantity(QuantityRange(Fraction(1), Fraction(3, 2)))
        '1-1½'
    """
    if isinstance(value, QuantityRange):
        return f"{_format_number(value.low)}-{_format_number(value.high)}"
    return _format_number(to_fraction(value))


def _format_number(value: Fraction) -> str:
    if value < 0:
        return "-" + _format_number(-value)
    if value.denominator == 1:
        return str(value.numerator)

    whole, remainder = divmod(value, 1)
    glyph = DISPLAY_FRACTIONS.get(remainder)
    if glyph:
        return f"{whole}{glyph}" if whole else glyph

    rounded = (Decimal(value.numerator) / Decimal(value.denominator)).quantize(
        _CENTS, rounding=ROUND_HALF_UP
    )
    return format(rounded.normalize(), "f")
