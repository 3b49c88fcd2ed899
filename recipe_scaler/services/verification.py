"""
Scaling audit.

Checks a ScaledRecipe against the recipe it came from: multiplier ratio on
every bound, friendly display values, pinch rendering, range preservation.
Used by scripts/verify_scaling.py and the test suite.
"""

import re

from ..schemas import Recipe, ScaledRecipe
from .fractions import PINCH_TEXT

RATIO_TOLERANCE = 1e-9

# Decimals that always have a friendly spelling (0.5 -> 1/2, 0.25 -> 1/4)
_BAD_DECIMAL = re.compile(r"(^|[–—-])0\.(5|25|75|125|375|625|875)($|[–—-])")
_UNIT_WORDS = re.compile(
    r"\b(teaspoon|tablespoon|cup|ounce|pound|gram|milliliter|liter)s?\b", re.IGNORECASE
)
_DASH = re.compile(r"[–—-]")


def _ratio_ok(value: float, original: float, multiplier: float) -> bool:
    return abs(value / original - multiplier) <= RATIO_TOLERANCE


def audit_scaled_recipe(recipe: Recipe, scaled: ScaledRecipe, multiplier: float) -> list[str]:
    """Human-readable issues; empty when the scaled recipe is sound."""
    issues: list[str] = []

    if abs(scaled.scaling.multiplier - multiplier) > RATIO_TOLERANCE:
        issues.append(f"x{multiplier:g}: response multiplier mismatch ({scaled.scaling.multiplier})")

    if len(scaled.scaled_ingredients) != len(recipe.ingredients):
        issues.append(
            f"x{multiplier:g}: {len(scaled.scaled_ingredients)} scaled ingredients "
            f"for {len(recipe.ingredients)} inputs"
        )

    for idx, (source, ing) in enumerate(zip(recipe.ingredients, scaled.scaled_ingredients)):
        if ing.id != source.id:
            issues.append(f"x{multiplier:g}: ingredient #{idx} out of order ('{ing.original}')")

        sq = ing.scaled_quantity
        if sq is None:
            continue

        if _BAD_DECIMAL.search(sq.display_value):
            issues.append(f"x{multiplier:g}: non-friendly displayValue='{sq.display_value}' for '{ing.original}'")

        all_pinch = all(part.strip() == PINCH_TEXT for part in _DASH.split(sq.display_value))
        if all_pinch:
            if _UNIT_WORDS.search(ing.display_text):
                issues.append(f"x{multiplier:g}: pinch still shows unit in '{ing.display_text}'")
        else:
            if sq.original_value > 0 and not _ratio_ok(sq.value, sq.original_value, multiplier):
                issues.append(f"x{multiplier:g}: ratio={sq.value / sq.original_value} for '{ing.original}'")

            if sq.value_to is not None and sq.original_value_to:
                if not _ratio_ok(sq.value_to, sq.original_value_to, multiplier):
                    issues.append(
                        f"x{multiplier:g}: range ratioTo={sq.value_to / sq.original_value_to} for '{ing.original}'"
                    )

        if sq.value_to is not None and not _DASH.search(sq.display_value):
            issues.append(f"x{multiplier:g}: missing range dash for '{ing.original}'")

        if source.quantity is not None and source.quantity.type == "range" and sq.value_to is None:
            issues.append(f"x{multiplier:g}: lost range for '{ing.original}'")

    return issues
