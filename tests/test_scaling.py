"""
Tests for the scaling engine: multiplication, unit upgrades, pinch floor,
display text and recipe-level servings/tips.
"""

import pytest

from recipe_scaler.schemas import ParsedIngredient, Recipe, ScalingOptions, ServingInfo
from recipe_scaler.services.scaling import ScalingEngine, build_policy, resolve_multiplier, tip_bucket
from recipe_scaler.services.verification import audit_scaled_recipe
from recipe_scaler.settings import Settings


def scale(parser, engine, line, multiplier, **kwargs):
    return engine.scale_ingredient(parser.parse_ingredient(line), multiplier, **kwargs)


def make_recipe(parser, lines, servings=4):
    return Recipe(
        title="Test Recipe",
        servings=ServingInfo(amount=servings, original_text=f"{servings} servings"),
        ingredients=[parser.parse_ingredient(line) for line in lines],
    )


# --- Ingredient level ---

def test_one_and_a_half_cups(parser, engine):
    s = scale(parser, engine, "1 cup sugar", 1.5)
    assert s.scaled_quantity.value == 1.5
    assert s.scaled_quantity.display_value == "1 1/2"
    assert s.scaled_quantity.was_rounded is False
    assert s.scaled_unit == "cup"
    assert s.display_text == "1 1/2 cups sugar"


def test_singular_unit_at_one(parser, engine):
    s = scale(parser, engine, "2 cups sugar", 0.5)
    assert s.display_text == "1 cup sugar"


def test_keeps_parsed_fields(parser, engine):
    source = parser.parse_ingredient("3 cloves garlic, minced")
    s = engine.scale_ingredient(source, 2)
    assert s.id == source.id
    assert s.original == source.original
    assert s.preparation == "minced"
    assert s.display_text == "6 cloves garlic, minced"


def test_notes_rendered_in_parentheses(parser, engine):
    s = scale(parser, engine, "1 cup cheddar cheese (shredded)", 2)
    assert s.display_text == "2 cups cheddar cheese (shredded)"


def test_pinch_floor(parser, engine):
    s = scale(parser, engine, "1/4 teaspoon salt", 0.1)
    sq = s.scaled_quantity
    assert sq.display_value == "a pinch"
    assert sq.was_rounded is True
    assert sq.display_modifier == "to taste"
    assert s.display_text == "a pinch (to taste) salt"
    assert "teaspoon" not in s.display_text
    # Raw numbers are still exact
    assert sq.value == pytest.approx(0.025)
    assert sq.original_value == 0.25


def test_pinch_without_to_taste(parser, engine):
    # 0.5 tsp x 0.1 = 0.05 tsp: under the floor (~0.063 tsp), above half of it
    s = scale(parser, engine, "1/2 tsp cinnamon", 0.1)
    assert s.scaled_quantity.display_value == "a pinch"
    assert s.scaled_quantity.display_modifier is None
    assert s.display_text == "a pinch cinnamon"


def test_weight_pinch(parser, engine):
    s = scale(parser, engine, "1 g saffron", 0.2)
    assert s.scaled_quantity.display_value == "a pinch"
    assert s.display_text.startswith("a pinch")
    assert "gram" not in s.display_text


def test_count_has_no_floor(parser, engine):
    s = scale(parser, engine, "1 egg", 0.1)
    assert s.scaled_quantity.display_value == "0.1"
    assert s.display_text == "0.1 egg"


def test_range_keeps_shape_and_dash(parser, engine):
    s = scale(parser, engine, "1-2 cups milk", 2)
    sq = s.scaled_quantity
    assert sq.value == 2
    assert sq.value_to == 4
    assert sq.original_value == 1
    assert sq.original_value_to == 2
    assert sq.display_value == "2-4"
    assert s.display_text == "2-4 cups milk"


def test_range_en_dash_and_word(parser, engine):
    s = scale(parser, engine, "2–3 cloves garlic", 2)
    assert s.scaled_quantity.display_value == "4–6"

    s = scale(parser, engine, "1 to 2 cups stock", 1.5)
    assert s.scaled_quantity.display_value == "1 1/2–3"


def test_range_fully_under_floor(parser, engine):
    s = scale(parser, engine, "1/8-1/4 tsp cayenne", 0.1)
    sq = s.scaled_quantity
    assert sq.display_value == "a pinch-a pinch"
    assert sq.value_to == pytest.approx(0.025)
    assert s.display_text == "a pinch-a pinch (to taste) cayenne"
    assert "teaspoon" not in s.display_text


def test_zero_amount_is_not_a_pinch(engine):
    ing = ParsedIngredient(
        id="z",
        original="0 cups sugar",
        quantity={"type": "single", "value": 0, "display_value": "0"},
        unit="cup",
        ingredient="sugar",
        parse_confidence=1.0,
    )
    for multiplier in (1, 0.1):
        sq = engine.scale_ingredient(ing, multiplier).scaled_quantity
        assert sq.display_value == "0"
        assert sq.display_modifier is None
        assert sq.was_rounded is False


def test_no_quantity_passthrough(parser, engine):
    s = scale(parser, engine, "salt to taste", 3)
    assert s.scaled_quantity is None
    assert s.scaled_unit is None
    assert s.display_text == "salt to taste"


def test_unknown_unit_left_as_written(engine):
    ing = ParsedIngredient(
        id="x",
        original="2 handful spinach",
        quantity={"type": "single", "value": 2, "display_value": "2"},
        unit="handful",
        ingredient="spinach",
        parse_confidence=1.0,
    )
    s = engine.scale_ingredient(ing, 2)
    assert s.scaled_unit == "handful"
    assert s.scaled_quantity.value == 4
    assert s.display_text == "4 handful spinach"


def test_unit_upgrade(parser, engine):
    s = scale(parser, engine, "4 tsp vanilla", 2)
    sq = s.scaled_quantity
    assert s.scaled_unit == "tablespoon"
    assert sq.display_value == "2 2/3"
    assert sq.display_modifier == "converted from teaspoons"
    assert sq.value / sq.original_value == pytest.approx(2)
    # The annotation is metadata only
    assert s.display_text == "2 2/3 tablespoons vanilla"


def test_unit_upgrade_chains(parser, engine):
    s = scale(parser, engine, "6 tsp sugar", 8)
    assert s.scaled_unit == "cup"
    assert s.scaled_quantity.display_value == "1"
    assert s.display_text == "1 cup sugar"


def test_metric_upgrade(parser, engine):
    s = scale(parser, engine, "500 g flour", 3)
    assert s.scaled_unit == "kilogram"
    assert s.display_text == "1 1/2 kilograms flour"


def test_upgrade_decided_on_lower_bound(parser, engine):
    # Lower bound 4 tsp stays under the 6 tsp ceiling, so both bounds stay in tsp
    s = scale(parser, engine, "2-4 tsp lemon juice", 2)
    assert s.scaled_unit == "teaspoon"
    assert s.scaled_quantity.display_value == "4-8"


def test_upgrades_can_be_disabled(parser, registry):
    engine = ScalingEngine(registry=registry, policy=build_policy(Settings(unit_upgrades_enabled=False)))
    s = engine.scale_ingredient(parser.parse_ingredient("4 tsp vanilla"), 2)
    assert s.scaled_unit == "teaspoon"
    assert s.display_text == "8 teaspoons vanilla"


def test_convert_to_metric(parser, engine):
    s = scale(parser, engine, "1 cup milk", 1, target_unit_system="metric")
    sq = s.scaled_quantity
    assert s.scaled_unit == "milliliter"
    assert sq.value == pytest.approx(236.588)
    assert sq.display_value == "236.59"
    assert sq.display_modifier is None
    assert s.display_text == "236.59 milliliters milk"


def test_convert_to_us(parser, engine):
    s = scale(parser, engine, "500 g flour", 1, target_unit_system="us")
    # 500 g = 17.637 oz, which snaps to 17 5/8
    assert s.scaled_unit == "ounce"
    assert s.scaled_quantity.display_value == "17 5/8"
    assert s.display_text == "17 5/8 ounces flour"


def test_convert_keeps_informal_units(parser, engine):
    s = scale(parser, engine, "2 pinches salt", 1, target_unit_system="metric")
    assert s.scaled_unit == "pinch"
    assert s.display_text == "2 pinches salt"


def test_exact_precision(parser, engine):
    s = scale(parser, engine, "1 cup sugar", 1 / 3, rounding_precision="exact")
    assert s.scaled_quantity.display_value == "0.333"
    assert s.scaled_quantity.was_rounded is True


def test_not_rounded_when_exact_fraction(parser, engine):
    s = scale(parser, engine, "1/2 cup oil", 0.5)
    assert s.scaled_quantity.display_value == "1/4"
    assert s.scaled_quantity.was_rounded is False


def test_scaled_serialization_omits_unset(parser, engine):
    data = scale(parser, engine, "1 cup sugar", 2).model_dump(by_alias=True)
    sq = data["scaledQuantity"]
    assert sq["displayValue"] == "2"
    assert sq["wasRounded"] is False
    assert "displayModifier" not in sq
    assert "valueTo" not in sq
    assert "originalValueTo" not in sq
    assert data["scaledUnit"] == "cup"
    assert data["displayText"] == "2 cups sugar"


# --- Recipe level ---

LINES = [
    "2 tbsp olive oil",
    "2 1/2 cups flour",
    "½ cup butter",
    "1-2 cups milk",
    "1/4 teaspoon salt",
    "3 large eggs",
    "salt to taste",
    "4 tsp vanilla",
    "500 g flour",
    "2–3 cloves garlic, minced",
    "1/8-1/4 tsp cayenne",
]


@pytest.mark.parametrize("multiplier", [0.1, 0.5, 1, 1.7, 2, 3, 10])
def test_recipe_ratio_and_shape(parser, engine, multiplier):
    recipe = make_recipe(parser, LINES)
    scaled = engine.scale_recipe(recipe, ScalingOptions(multiplier=multiplier))

    assert scaled.scaling.multiplier == multiplier
    assert [i.id for i in scaled.scaled_ingredients] == [i.id for i in recipe.ingredients]
    assert scaled.original_ingredients == recipe.ingredients
    assert audit_scaled_recipe(recipe, scaled, multiplier) == []


def test_scale_recipe_servings_and_tips(parser, engine):
    recipe = make_recipe(parser, ["1 cup sugar"], servings=4)
    scaled = engine.scale_recipe(recipe, ScalingOptions(multiplier=2))
    assert scaled.title == "Test Recipe"
    assert scaled.scaling.original_servings.amount == 4
    assert scaled.scaling.scaled_servings.amount == 8
    assert scaled.scaling.scaled_servings.original_text == "8 servings"
    assert any("larger pan" in tip for tip in scaled.scaling_tips)


def test_target_servings(parser, engine):
    recipe = make_recipe(parser, ["2 cups flour"], servings=4)
    options = ScalingOptions(target_servings=6)
    assert resolve_multiplier(recipe, options) == 1.5

    scaled = engine.scale_recipe(recipe, options)
    assert scaled.scaling.multiplier == 1.5
    assert scaled.scaled_ingredients[0].display_text == "3 cups flour"


def test_resolve_multiplier_requires_one(parser):
    recipe = make_recipe(parser, ["1 egg"])
    with pytest.raises(ValueError):
        resolve_multiplier(recipe, ScalingOptions())


@pytest.mark.parametrize("amount,multiplier,expected,text", [
    (4, 1.5, 6, "6 servings"),
    (3, 1.5, 4.5, "4.5 servings"),
    (4, 0.1, 0.5, "0.5 servings"),
    (5, 0.3, 1.5, "1.5 servings"),
])
def test_scale_servings(engine, amount, multiplier, expected, text):
    result = engine.scale_servings(ServingInfo(amount=amount), multiplier)
    assert result.amount == expected
    assert result.original_text == text


def test_scale_servings_keeps_unit(engine):
    result = engine.scale_servings(ServingInfo(amount=2, unit="loaves"), 2)
    assert result.unit == "loaves"
    assert result.original_text == "4 loaves"


@pytest.mark.parametrize("multiplier,bucket", [
    (0.25, "small"),
    (0.5, "half"),
    (0.75, "half"),
    (1, None),
    (1.5, "double"),
    (2, "double"),
    (3, "triple"),
    (4, "large"),
])
def test_tip_buckets(multiplier, bucket):
    assert tip_bucket(multiplier) == bucket


def test_tips_content(engine):
    assert engine.scaling_tips(1) == []
    assert any("baking time" in tip.lower() for tip in engine.scaling_tips(0.25))
    assert any("pan" in tip for tip in engine.scaling_tips(2))
