"""FastAPI dependencies for the Recipe Scaler API.

Provides:
- The shared unit registry
- Ingredient parser and scaling engine wired to that registry

All three are read-only after construction, so one instance per process is
shared by every request. Tests swap them through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from .parsing import IngredientParser
from .services.fractions import FractionFormatter
from .services.scaling import ScalingEngine, build_policy
from .services.unit_conversion import UnitRegistry
from .settings import settings


@lru_cache
def get_registry() -> UnitRegistry:
    return UnitRegistry()


@lru_cache
def _parser_for(registry: UnitRegistry) -> IngredientParser:
    return IngredientParser(registry=registry)


@lru_cache
def _engine_for(registry: UnitRegistry) -> ScalingEngine:
    return ScalingEngine(
        registry=registry,
        formatter=FractionFormatter(settings.snap_tolerance),
        policy=build_policy(settings),
    )


def get_ingredient_parser(registry: UnitRegistry = Depends(get_registry)) -> IngredientParser:
    return _parser_for(registry)


def get_scaling_engine(registry: UnitRegistry = Depends(get_registry)) -> ScalingEngine:
    return _engine_for(registry)
