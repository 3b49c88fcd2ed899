"""
Recipe scaling engine.

Multiplies parsed quantities, decides whether to keep, convert or upgrade the
unit, and renders friendly display text ("1 1/2 cups flour", "a pinch salt").
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional

from ..core.text import pluralize
from ..schemas import (
    ParsedIngredient,
    Recipe,
    RoundingPrecision,
    ScaledIngredient,
    ScaledQuantity,
    ScaledRecipe,
    ScalingInfo,
    ScalingOptions,
    ServingInfo,
    UnitDefinition,
    UnitSystem,
)
from ..settings import Settings, settings
from .fractions import PINCH_TEXT, FractionFormatter
from .unit_conversion import UnitRegistry, default_registry

logger = logging.getLogger("recipe_scaler.scaling")

TO_TASTE = "to taste"
DEFAULT_RANGE_DASH = "–"

# Informal units are kept as written when converting between systems
INFORMAL_UNITS = {"pinch", "dash"}

# Static advice per multiplier bucket
SCALING_TIPS: dict[str, list[str]] = {
    "small": [
        "Reduce baking time and start checking for doneness well before the original time.",
        "Use a smaller pan so the batter or filling is not spread too thin.",
        "Very small amounts of spices and leavening are hard to measure; season to taste.",
    ],
    "half": [
        "Check doneness earlier than the original time suggests.",
        "Use a smaller baking pan if the original recipe calls for one.",
    ],
    "double": [
        "Consider extending cook time by 10-15 minutes for baked goods.",
        "You may need to use a larger pan or multiple pans.",
        "Mixing time may need to be extended for larger batches.",
    ],
    "triple": [
        "For baked goods, consider making in batches for best results.",
        "Significantly increase mixing time for uniform consistency.",
        "Check internal temperature rather than relying on time alone.",
    ],
    "large": [
        "Very large batches may affect texture and rise in baked goods.",
        "Consider professional equipment for batches this size.",
        "Cooking times may vary significantly - use a thermometer.",
    ],
}


# --- Policy ---

@dataclass(frozen=True)
class UnitUpgrade:
    ceiling: float  # in the current unit
    next_unit: str


@dataclass(frozen=True)
class CategoryPolicy:
    pinch_floor: Optional[float] = None  # in the category base unit (ml, g)
    upgrades: Mapping[str, UnitUpgrade] = field(default_factory=dict)


VOLUME_UPGRADES: dict[str, UnitUpgrade] = {
    "pinch": UnitUpgrade(8, "teaspoon"),
    "dash": UnitUpgrade(8, "teaspoon"),
    "teaspoon": UnitUpgrade(6, "tablespoon"),
    "tablespoon": UnitUpgrade(8, "cup"),
    "fluid ounce": UnitUpgrade(16, "cup"),
    "cup": UnitUpgrade(16, "quart"),
    "pint": UnitUpgrade(4, "quart"),
    "quart": UnitUpgrade(8, "gallon"),
    "milliliter": UnitUpgrade(1000, "liter"),
    "centiliter": UnitUpgrade(100, "liter"),
    "deciliter": UnitUpgrade(10, "liter"),
}

WEIGHT_UPGRADES: dict[str, UnitUpgrade] = {
    "ounce": UnitUpgrade(32, "pound"),
    "milligram": UnitUpgrade(1000, "gram"),
    "gram": UnitUpgrade(1000, "kilogram"),
}


def build_policy(config: Settings = settings) -> dict[str, CategoryPolicy]:
    """Scaling thresholds keyed by unit category."""
    upgrades_on = config.unit_upgrades_enabled
    return {
        "volume": CategoryPolicy(config.pinch_floor_ml, VOLUME_UPGRADES if upgrades_on else {}),
        "weight": CategoryPolicy(config.pinch_floor_g, WEIGHT_UPGRADES if upgrades_on else {}),
        "count": CategoryPolicy(),
        "temperature": CategoryPolicy(),
    }


def resolve_multiplier(recipe: Recipe, options: ScalingOptions) -> float:
    """Explicit multiplier, or the one implied by targetServings."""
    if options.multiplier is not None:
        return options.multiplier
    if options.target_servings is not None:
        return options.target_servings / recipe.servings.amount
    raise ValueError("Either multiplier or targetServings is required")


def tip_bucket(multiplier: float) -> Optional[str]:
    if math.isclose(multiplier, 1.0):
        return None
    if multiplier < 0.5:
        return "small"
    if multiplier < 1:
        return "half"
    if multiplier <= 2:
        return "double"
    if multiplier <= 3:
        return "triple"
    return "large"


def range_dash(display_value: str) -> str:
    for dash in ("–", "—", "-"):
        if dash in display_value:
            return dash
    return DEFAULT_RANGE_DASH


class ScalingEngine:
    def __init__(
        self,
        registry: UnitRegistry = default_registry,
        formatter: Optional[FractionFormatter] = None,
        policy: Optional[Mapping[str, CategoryPolicy]] = None,
    ):
        self.registry = registry
        self.formatter = formatter or FractionFormatter(settings.snap_tolerance)
        self.policy = policy if policy is not None else build_policy()

    # --- Recipe level ---

    def scale_recipe(self, recipe: Recipe, options: ScalingOptions) -> ScaledRecipe:
        multiplier = resolve_multiplier(recipe, options)
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise ValueError(f"multiplier must be a finite positive number, got {multiplier!r}")

        scaled = [
            self.scale_ingredient(
                ingredient,
                multiplier,
                target_unit_system=options.target_unit_system,
                rounding_precision=options.rounding_precision,
            )
            for ingredient in recipe.ingredients
        ]
        logger.debug(f"Scaled recipe {recipe.title!r} x{multiplier} ({len(scaled)} ingredients)")

        return ScaledRecipe(
            title=recipe.title,
            scaling=ScalingInfo(
                original_servings=recipe.servings,
                scaled_servings=self.scale_servings(recipe.servings, multiplier),
                multiplier=multiplier,
                applied_at=datetime.now(timezone.utc),
            ),
            original_ingredients=list(recipe.ingredients),
            scaled_ingredients=scaled,
            scaling_tips=self.scaling_tips(multiplier),
        )

    def scale_servings(self, servings: ServingInfo, multiplier: float) -> ServingInfo:
        """Nearest whole or half serving, never below half a serving."""
        amount = max(0.5, math.floor(servings.amount * multiplier * 2 + 0.5) / 2)
        shown = str(int(amount)) if amount.is_integer() else f"{amount:g}"
        return ServingInfo(
            amount=amount,
            unit=servings.unit,
            original_text=f"{shown} {servings.unit or 'servings'}",
        )

    def scaling_tips(self, multiplier: float) -> list[str]:
        bucket = tip_bucket(multiplier)
        return list(SCALING_TIPS[bucket]) if bucket else []

    # --- Ingredient level ---

    def scale_ingredient(
        self,
        ingredient: ParsedIngredient,
        multiplier: float,
        target_unit_system: Optional[UnitSystem] = None,
        rounding_precision: RoundingPrecision = "friendly",
    ) -> ScaledIngredient:
        quantity = ingredient.quantity

        # Nothing measurable: pass the line through untouched
        if quantity is None:
            return self._assemble(ingredient, None, ingredient.unit, ingredient.original)

        original_value = quantity.value
        original_to = quantity.value_to if quantity.type == "range" else None
        modifier = None

        unit = self.registry.lookup(ingredient.unit)
        if unit is not None:
            final = self._choose_unit(unit, original_value * multiplier, target_unit_system)
            if final.name != unit.name:
                # Re-express the original amounts in the final unit so the
                # scaled / original ratio is still the multiplier
                original_value = self.registry.convert(original_value, unit.name, final.name)
                if original_to is not None:
                    original_to = self.registry.convert(original_to, unit.name, final.name)
                if final.system == unit.system or target_unit_system is None:
                    modifier = f"converted from {pluralize(unit.name)}"
                unit = final

        value = original_value * multiplier
        value_to = original_to * multiplier if original_to is not None else None

        floor = self._pinch_floor(unit)
        low_text, low_pinch = self._render(value, floor, rounding_precision)
        if value_to is None:
            display_value = low_text
            is_pinch = low_pinch
            shown_max = value if low_pinch else self._shown(value, rounding_precision)
        else:
            high_text, high_pinch = self._render(value_to, floor, rounding_precision)
            is_pinch = low_pinch and high_pinch
            display_value = f"{low_text}{range_dash(quantity.display_value)}{high_text}"
            shown_max = self._shown(value_to, rounding_precision)

        if is_pinch and floor is not None and (value_to if value_to is not None else value) < floor / 2:
            modifier = TO_TASTE

        was_rounded = low_pinch or abs(self._shown(value, rounding_precision) - value) > 1e-9
        if value_to is not None:
            was_rounded = was_rounded or high_pinch or abs(self._shown(value_to, rounding_precision) - value_to) > 1e-9

        scaled_quantity = ScaledQuantity(
            value=value,
            value_to=value_to,
            display_value=display_value,
            display_modifier=modifier,
            was_rounded=was_rounded,
            original_value=original_value,
            original_value_to=original_to,
        )

        scaled_unit = unit.name if unit is not None else ingredient.unit
        if is_pinch:
            unit_text = None
        elif unit is not None:
            unit_text = pluralize(unit.name) if shown_max > 1 else unit.name
        else:
            unit_text = ingredient.unit  # unknown unit stays as written

        quantity_text = display_value
        if modifier == TO_TASTE:
            quantity_text = f"{display_value} ({TO_TASTE})"

        display_text = self._display_text(quantity_text, unit_text, ingredient)
        return self._assemble(ingredient, scaled_quantity, scaled_unit, display_text)

    def _choose_unit(
        self, unit: UnitDefinition, scaled_value: float, target_system: Optional[UnitSystem]
    ) -> UnitDefinition:
        """Unit the scaled amount is shown in: system conversion, then upgrades."""
        if (
            target_system
            and unit.system != target_system
            and unit.category in ("volume", "weight")
            and unit.name not in INFORMAL_UNITS
        ):
            target = self._system_unit(unit, scaled_value, target_system)
            if target is not None:
                scaled_value = self.registry.convert(scaled_value, unit.name, target.name)
                unit = target

        policy = self.policy.get(unit.category)
        if policy is None:
            return unit

        for _ in range(len(policy.upgrades)):
            step = policy.upgrades.get(unit.name)
            if step is None or scaled_value < step.ceiling:
                break
            larger = self.registry.get(step.next_unit)
            if larger is None or larger.category != unit.category:
                break
            scaled_value = self.registry.convert(scaled_value, unit.name, larger.name)
            unit = larger
        return unit

    def _system_unit(
        self, unit: UnitDefinition, scaled_value: float, target_system: UnitSystem
    ) -> Optional[UnitDefinition]:
        """Most readable unit of the target system for this amount."""
        base = scaled_value * unit.base_conversion

        if target_system == "metric":
            if unit.category == "volume":
                name = "liter" if base >= 1000 else "milliliter"
            else:
                name = "kilogram" if base >= 1000 else "gram"
        else:
            if unit.category == "volume":
                # 1 tsp ~ 5ml, 1 tbsp ~ 15ml, 1 cup ~ 240ml, 1 qt ~ 950ml
                if base < 15:
                    name = "teaspoon"
                elif base < 60:
                    name = "tablespoon"
                elif base < 950:
                    name = "cup"
                elif base < 3800:
                    name = "quart"
                else:
                    name = "gallon"
            else:
                name = "pound" if base / 28.3495 >= 32 else "ounce"

        return self.registry.get(name)

    def _pinch_floor(self, unit: Optional[UnitDefinition]) -> Optional[float]:
        """Pinch threshold expressed in the given unit."""
        if unit is None:
            return None
        policy = self.policy.get(unit.category)
        if policy is None or policy.pinch_floor is None:
            return None
        return policy.pinch_floor / unit.base_conversion

    def _render(self, value: float, floor: Optional[float], precision: RoundingPrecision) -> tuple[str, bool]:
        # A zero amount stays "0"; only positive amounts fall to a pinch
        text = self.formatter.format_amount(value, floor if value > 0 else None)
        if text == PINCH_TEXT:
            return text, True
        if precision == "exact":
            return self.formatter.format_exact(value), False
        return text, False

    def _shown(self, value: float, precision: RoundingPrecision) -> float:
        """Numeric value behind the rendered text."""
        if precision == "exact":
            return round(value, 3)
        return self.formatter.snap(value)

    def _display_text(self, quantity_text: str, unit_text: Optional[str], ingredient: ParsedIngredient) -> str:
        text = " ".join(part for part in (quantity_text, unit_text, ingredient.ingredient) if part)
        if ingredient.preparation:
            text += f", {ingredient.preparation}"
        if ingredient.notes:
            text += f" ({ingredient.notes})"
        return text

    def _assemble(
        self,
        ingredient: ParsedIngredient,
        scaled_quantity: Optional[ScaledQuantity],
        scaled_unit: Optional[str],
        display_text: str,
    ) -> ScaledIngredient:
        fields = {name: getattr(ingredient, name) for name in ParsedIngredient.model_fields}
        return ScaledIngredient(
            **fields,
            scaled_quantity=scaled_quantity,
            scaled_unit=scaled_unit,
            display_text=display_text,
        )
