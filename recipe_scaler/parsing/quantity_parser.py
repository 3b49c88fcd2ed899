"""
Leading-quantity extraction for ingredient lines.

Grammar, tried in order at the start of the line:

    amount := INT GLYPH | INT INT "/" INT | INT "/" INT | DECIMAL | INT | GLYPH
    range  := amount SEP amount        SEP := "-" | "–" | "—" | "to"

A hyphen between a whole number and a proper fraction ("1-1/2") is the US
spelling of a mixed number, not a range.
"""

import re
from fractions import Fraction
from typing import Optional

from ..schemas import IngredientQuantity
from ..services.fractions import UNICODE_FRACTIONS

_GLYPHS = "".join(UNICODE_FRACTIONS)

_AMOUNT = (
    rf"\d+[ \t]*[{_GLYPHS}]"
    r"|\d+\s+\d+\s*/\s*\d+"
    r"|\d+\s*/\s*\d+"
    r"|\d*\.\d+"
    r"|\d+"
    rf"|[{_GLYPHS}]"
)

RANGE_PATTERN = re.compile(
    rf"^(?P<low>{_AMOUNT})\s*(?P<sep>[-–—]|to(?=[\s\d{_GLYPHS}]))\s*(?P<high>{_AMOUNT})"
)
SINGLE_PATTERN = re.compile(rf"^(?P<amount>{_AMOUNT})")

_MIXED = re.compile(r"(\d+)\s+(\d+)\s*/\s*(\d+)")
_VULGAR = re.compile(r"(\d+)\s*/\s*(\d+)")


def amount_value(text: str) -> Optional[float]:
    """Numeric value of a single amount token; None when it is not one."""
    cleaned = text.strip()
    if not cleaned:
        return None

    for glyph, fraction in UNICODE_FRACTIONS.items():
        if glyph in cleaned:
            whole = cleaned.replace(glyph, "").strip()
            if whole and not whole.isdigit():
                return None
            return float(int(whole or 0) + fraction)

    # Mixed number: whole + numerator/denominator
    match = _MIXED.fullmatch(cleaned)
    if match:
        whole, num, denom = (int(g) for g in match.groups())
        if denom == 0:
            return None
        return float(whole + Fraction(num, denom))

    match = _VULGAR.fullmatch(cleaned)
    if match:
        num, denom = (int(g) for g in match.groups())
        if denom == 0:
            return None
        return float(Fraction(num, denom))

    try:
        return float(cleaned)
    except ValueError:
        return None


def _is_hyphenated_mixed(low: str, sep: str, high: str) -> bool:
    if sep != "-" or not low.strip().isdigit():
        return False
    match = _VULGAR.fullmatch(high.strip())
    if not match:
        return False
    num, denom = (int(g) for g in match.groups())
    return 0 < num < denom


class QuantityParser:
    """Pulls the leading quantity (single value or range) off a line."""

    def extract(self, text: str) -> tuple[Optional[IngredientQuantity], str]:
        """
        Returns (quantity, remaining_text). When no quantity leads the text,
        quantity is None and the text is returned trimmed.
        """
        trimmed = text.strip()

        match = RANGE_PATTERN.match(trimmed)
        if match:
            low, sep, high = match.group("low"), match.group("sep"), match.group("high")
            remaining = trimmed[match.end():].strip()
            display = " ".join(match.group(0).split())

            if _is_hyphenated_mixed(low, sep, high):
                value = amount_value(f"{low} {high}")
                if value is not None:
                    return IngredientQuantity(type="single", value=value, display_value=display), remaining

            value = amount_value(low)
            value_to = amount_value(high)
            if value is not None and value_to is not None:
                if value_to > value:
                    return IngredientQuantity(
                        type="range", value=value, value_to=value_to, display_value=display
                    ), remaining
                # Equal or descending bounds: keep the lower bound as a single amount
                lower = min(value, value_to)
                shown = low if lower == value else high
                return IngredientQuantity(
                    type="single", value=lower, display_value=" ".join(shown.split())
                ), remaining

        match = SINGLE_PATTERN.match(trimmed)
        if match:
            value = amount_value(match.group("amount"))
            if value is not None:
                display = " ".join(match.group("amount").split())
                remaining = trimmed[match.end():].strip()
                return IngredientQuantity(type="single", value=value, display_value=display), remaining

        return None, trimmed
