"""Recipe parsing and scaling API router.

Endpoints:
- POST /api/recipes/parse - Turn a recipe shell (raw ingredient lines) into a Recipe
- POST /api/recipes/scale - Scale a parsed recipe by a multiplier or target servings
"""

import logging
import math

from fastapi import APIRouter, Depends, Request

from ..core.envelope import success
from ..core.errors import AppError, ErrorCode
from ..deps import get_ingredient_parser, get_scaling_engine
from ..parsing import IngredientParser
from ..schemas import ApiResponse, Recipe, RecipeShell, ScaledRecipe, ScaleRecipeRequest
from ..services.scaling import ScalingEngine, resolve_multiplier
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("recipe_scaler.recipes")


@router.post("/parse", response_model=ApiResponse[Recipe])
def parse_recipe(
    payload: RecipeShell,
    request: Request,
    parser: IngredientParser = Depends(get_ingredient_parser),
):
    if not any(line.strip() for line in payload.ingredients):
        raise AppError(ErrorCode.NO_INGREDIENTS_FOUND, "Recipe has no ingredient lines")

    recipe = parser.parse_recipe(payload, max_workers=settings.parse_max_workers)
    return success(request, recipe)


@router.post("/scale", response_model=ApiResponse[ScaledRecipe])
def scale_recipe(
    payload: ScaleRecipeRequest,
    request: Request,
    engine: ScalingEngine = Depends(get_scaling_engine),
):
    """
    Scale every ingredient of the recipe.

    The multiplier comes from options.multiplier, or from
    options.targetServings / recipe.servings.amount when no multiplier is given.
    It must be finite and inside the configured window (inclusive).
    """
    recipe, options = payload.recipe, payload.options

    try:
        multiplier = resolve_multiplier(recipe, options)
    except ValueError as e:
        raise AppError(ErrorCode.VALIDATION_ERROR, str(e))

    if not math.isfinite(multiplier) or not (settings.multiplier_min <= multiplier <= settings.multiplier_max):
        raise AppError(
            ErrorCode.INVALID_MULTIPLIER,
            f"Multiplier must be between {settings.multiplier_min:g} and {settings.multiplier_max:g}",
            {"multiplier": multiplier if math.isfinite(multiplier) else str(multiplier)},
        )

    scaled = engine.scale_recipe(recipe, options.model_copy(update={"multiplier": multiplier}))
    logger.info(
        f"recipes.scale title={recipe.title!r} multiplier={multiplier:g} "
        f"ingredients={len(scaled.scaled_ingredients)}"
    )
    return success(request, scaled)
