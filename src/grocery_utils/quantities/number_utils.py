from decimal import Decimal
from fractions import Fraction
from typing import Union

# Unicode vulgar fraction glyphs and their exact values
UNICODE_FRACTIONS = {
    "½": Fraction(1, 2),
    "⅓": Fraction(1, 3),
    "⅔": Fraction(2, 3),
    "¼": Fraction(1, 4),
    "¾": Fraction(3, 4),
    "⅕": Fraction(1, 5),
    "⅖": Fraction(2, 5),
    "⅗": Fraction(3, 5),
    "⅘": Fraction(4, 5),
    "⅙": Fraction(1, 6),
    "⅚": Fraction(5, 6),
    "⅛": Fraction(1, 8),
    "⅜": Fraction(3, 8),
    "⅝": Fraction(5, 8),
    "⅞": Fraction(7, 8),
}

# Glyphs used when rendering: halves, thirds, quarters and eighths only
DISPLAY_FRACTIONS = {
    value: glyph
    for glyph, value in UNICODE_FRACTIONS.items()
    if value.denominator in (2, 3, 4, 8)
}


def _is_integer(text: str) -> bool:
    """Check if a string represents a valid non-negative integer."""
    return text.isascii() and text.isdigit()


def _is_decimal(text: str) -> bool:
    """Check if a string represents a plain decimal like '2.5' or '.5'."""
    whole, dot, frac = text.partition(".")
    if not dot:
        return False
    return (whole == "" or _is_integer(whole)) and _is_integer(frac)


def _is_fraction(text: str) -> bool:
    """Check if a string represents a valid fraction (e.g., '1/2')."""
    if "/" not in text:
        return False
    parts = text.split("/")
    return len(parts) == 2 and all(_is_integer(part) for part in parts)


def _parse_fraction(text: str) -> Fraction:
    """Parse a fraction string (e.g., '1/2') into a Fraction."""
    if "/" not in text:
        raise ValueError(f"Not a fraction: {text}")

    numerator_str, denominator_str = text.split("/")
    denominator = int(denominator_str)

    if denominator == 0:
        raise ZeroDivisionError("Division by zero in fraction")

    return Fraction(int(numerator_str), denominator)


def to_fraction(value: Union[int, float, str, Decimal, Fraction]) -> Fraction:
    """Convert a numeric value to an exact Fraction.

    Floats go through their shortest decimal representation so that
    ``1.5`` becomes exactly ``3/2`` and ``0.1`` becomes ``1/10`` rather
    than the nearest binary fraction.

    Raises:
        ValueError: If the value cannot be interpreted as a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        return Fraction(value)
    except (TypeError, ValueError, ZeroDivisionError, OverflowError) as e:
        raise ValueError(f"Not a number: {value!r}") from e
