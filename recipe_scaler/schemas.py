"""Pydantic schemas for the Recipe Scaler API.

Data model shared by the parser, the scaling engine and the HTTP layer:
- Units
- Parsed ingredients and recipes
- Scaled ingredients and recipes
- API envelope (success / error / meta)

Attributes are snake_case in Python; JSON uses camelCase aliases, which are
the field names existing consumers rely on.
"""

from datetime import datetime
from typing import ClassVar, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel


UnitCategory = Literal["volume", "weight", "count", "temperature"]
UnitSystem = Literal["us", "metric"]
QuantityType = Literal["single", "range"]
RoundingPrecision = Literal["exact", "friendly"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    # Optional fields that are left out of the JSON entirely when unset
    # (as opposed to being sent as null).
    omit_if_none: ClassVar[tuple[str, ...]] = ()

    @model_serializer(mode="wrap")
    def _drop_unset_optionals(self, handler):
        data = handler(self)
        if not isinstance(data, dict):
            return data
        fields = type(self).model_fields
        for name in self.omit_if_none:
            for key in (fields[name].alias, name):
                if key in data and data[key] is None:
                    del data[key]
        return data


# --- Units ---

class UnitDefinition(CamelModel):
    name: str
    abbreviations: tuple[str, ...] = ()
    system: UnitSystem
    category: UnitCategory
    base_conversion: float = Field(..., gt=0)


# --- Parsed ingredients ---

class IngredientQuantity(CamelModel):
    type: QuantityType
    value: float
    value_to: Optional[float] = None
    display_value: str

    omit_if_none: ClassVar[tuple[str, ...]] = ("value_to",)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.type == "range":
            if self.value_to is None:
                raise ValueError("range quantity requires valueTo")
            if self.value_to <= self.value:
                raise ValueError("range valueTo must be greater than value")
        elif self.value_to is not None:
            raise ValueError("single quantity must not have valueTo")
        return self


class ParsedIngredient(CamelModel):
    id: str
    original: str
    quantity: Optional[IngredientQuantity] = None
    unit: Optional[str] = None
    ingredient: str
    preparation: Optional[str] = None
    notes: Optional[str] = None
    parse_confidence: float = Field(..., ge=0, le=1)
    parse_error: Optional[str] = None

    omit_if_none: ClassVar[tuple[str, ...]] = ("preparation", "notes", "parse_error")


class ServingInfo(CamelModel):
    amount: float = Field(..., gt=0)
    unit: Optional[str] = None
    original_text: str = ""

    omit_if_none: ClassVar[tuple[str, ...]] = ("unit",)


class Recipe(CamelModel):
    title: str = ""
    servings: ServingInfo
    ingredients: list[ParsedIngredient] = []


class RecipeShell(CamelModel):
    """Recipe as handed over by a scraper: raw ingredient lines, not yet parsed."""
    title: str = ""
    servings: ServingInfo
    ingredients: list[str] = []


# --- Scaling ---

class ScalingOptions(CamelModel):
    multiplier: Optional[float] = None
    target_servings: Optional[float] = Field(None, gt=0)
    target_unit_system: Optional[UnitSystem] = None
    rounding_precision: RoundingPrecision = "friendly"


class ScaledQuantity(CamelModel):
    value: float
    value_to: Optional[float] = None
    display_value: str
    display_modifier: Optional[str] = None
    was_rounded: bool
    original_value: float
    original_value_to: Optional[float] = None

    omit_if_none: ClassVar[tuple[str, ...]] = ("value_to", "display_modifier", "original_value_to")


class ScaledIngredient(ParsedIngredient):
    scaled_quantity: Optional[ScaledQuantity] = None
    scaled_unit: Optional[str] = None
    display_text: str


class ScalingInfo(CamelModel):
    original_servings: ServingInfo
    scaled_servings: ServingInfo
    multiplier: float
    applied_at: datetime


class ScaledRecipe(CamelModel):
    title: str = ""
    scaling: ScalingInfo
    original_ingredients: list[ParsedIngredient]
    scaled_ingredients: list[ScaledIngredient]
    scaling_tips: list[str] = []


# --- Requests ---

class ParseIngredientsRequest(CamelModel):
    lines: list[str]


class ScaleRecipeRequest(CamelModel):
    recipe: Recipe
    options: ScalingOptions


class UnitConvertRequest(CamelModel):
    value: float
    from_unit: str
    to_unit: str


class UnitConvertResponse(CamelModel):
    value: float
    from_unit: str
    to_unit: str


# --- Envelope ---

DataT = TypeVar("DataT")


class ApiError(CamelModel):
    code: str
    message: str
    details: Optional[dict] = None

    omit_if_none: ClassVar[tuple[str, ...]] = ("details",)


class ResponseMeta(CamelModel):
    request_id: str
    processing_time: int  # milliseconds


class ApiResponse(CamelModel, Generic[DataT]):
    success: bool
    data: Optional[DataT] = None
    error: Optional[ApiError] = None
    meta: Optional[ResponseMeta] = None

    omit_if_none: ClassVar[tuple[str, ...]] = ("data", "error", "meta")
