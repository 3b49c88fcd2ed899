"""Ingredient parsing API router.

Endpoints:
- POST /api/ingredients/parse - Parse raw ingredient lines
"""

import logging

from fastapi import APIRouter, Depends, Request

from ..core.envelope import success
from ..deps import get_ingredient_parser
from ..parsing import IngredientParser
from ..schemas import ApiResponse, ParsedIngredient, ParseIngredientsRequest
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("recipe_scaler.ingredients")


@router.post("/parse", response_model=ApiResponse[list[ParsedIngredient]])
def parse_ingredients(
    payload: ParseIngredientsRequest,
    request: Request,
    parser: IngredientParser = Depends(get_ingredient_parser),
):
    """Parse each line independently. Unparseable lines come back with zero confidence."""
    parsed = parser.parse_ingredients(payload.lines, max_workers=settings.parse_max_workers)
    low = sum(1 for item in parsed if item.parse_confidence < 0.5)
    logger.info(f"ingredients.parse lines={len(parsed)} low_confidence={low}")
    return success(request, parsed)
