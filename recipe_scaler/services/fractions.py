"""
Friendly fraction formatting for scaled quantities.

Turns raw decimals (1.3333333) into what a cook expects to read ("1 1/3").
"""

import math
from fractions import Fraction
from typing import Optional

PINCH_TEXT = "a pinch"

# Culinary fractions: halves, quarters, thirds, eighths
FRIENDLY_FRACTIONS: tuple[Fraction, ...] = (
    Fraction(1, 8),
    Fraction(1, 4),
    Fraction(1, 3),
    Fraction(3, 8),
    Fraction(1, 2),
    Fraction(5, 8),
    Fraction(2, 3),
    Fraction(3, 4),
    Fraction(7, 8),
)

# Unicode glyphs seen in scraped ingredient lines
UNICODE_FRACTIONS: dict[str, Fraction] = {
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
    "⅐": Fraction(1, 7),
    "⅛": Fraction(1, 8),
    "⅜": Fraction(3, 8),
    "⅝": Fraction(5, 8),
    "⅞": Fraction(7, 8),
    "⅑": Fraction(1, 9),
    "⅒": Fraction(1, 10),
}


def _strip_zeros(text: str) -> str:
    return text.rstrip("0").rstrip(".") if "." in text else text


class FractionFormatter:
    """Pure, stateless decimal-to-text rendering."""

    def __init__(self, tolerance: float = 0.02):
        if not 0 <= tolerance < 1 / 48:
            # Anything wider would let neighbouring targets (1/3 and 3/8) overlap
            raise ValueError("tolerance must be in [0, 1/48)")
        self.tolerance = tolerance

    def _snap_parts(self, value: float) -> Optional[tuple[int, Optional[Fraction]]]:
        """(whole, fraction) when value is within tolerance of a friendly amount."""
        whole = math.floor(value)
        residual = value - whole

        if residual <= self.tolerance:
            return whole, None
        if residual >= 1 - self.tolerance:
            return whole + 1, None

        for target in FRIENDLY_FRACTIONS:
            if abs(residual - float(target)) <= self.tolerance:
                return whole, target
        return None

    def snap(self, value: float) -> float:
        """Numeric value of what format() displays."""
        if value <= 0:
            return 0.0
        parts = self._snap_parts(value)
        if parts is None or parts == (0, None):
            return round(value, 2)
        whole, fraction = parts
        return whole + (float(fraction) if fraction else 0.0)

    def format(self, value: float) -> str:
        """
        Render a positive amount as "whole numerator/denominator", the whole
        part omitted when zero. Amounts that do not snap are shown as a
        decimal rounded to two places.
        """
        if value <= 0:
            return "0"

        parts = self._snap_parts(value)
        # A tiny amount snapping down to zero is better shown as a decimal
        if parts is None or parts == (0, None):
            return _strip_zeros(f"{value:.2f}")

        whole, fraction = parts
        if fraction is None:
            return str(whole)
        text = f"{fraction.numerator}/{fraction.denominator}"
        return f"{whole} {text}" if whole else text

    def format_exact(self, value: float) -> str:
        """Three decimal places, trailing zeros dropped."""
        if value <= 0:
            return "0"
        return _strip_zeros(f"{value:.3f}")

    def format_amount(self, value: float, pinch_floor: Optional[float] = None) -> str:
        """format(), with amounts under pinch_floor rendered as "a pinch"."""
        if pinch_floor is not None and value < pinch_floor:
            return PINCH_TEXT
        return self.format(value)
