"""Pydantic schemas for TheMealDB recipe records."""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, NamedTuple, Optional, Tuple, Dict, Any


class IngredientMeasure(NamedTuple):
    """One flattened ``strIngredientN`` / ``strMeasureN`` pair."""

    ingredient: str
    measure: str


class MealSummary(BaseModel):
    """Minimal recipe record returned by the list-by-category endpoint."""

    model_config = ConfigDict(frozen=True)

    id_meal: str = Field(validation_alias="idMeal")
    name: str = Field(validation_alias="strMeal")
    thumbnail_url: Optional[str] = Field(default=None, validation_alias="strMealThumb")

    @property
    def id(self) -> str:
        return self.id_meal


class MealDetail(BaseModel):
    """Full recipe record including the flattened ingredient list."""

    model_config = ConfigDict(frozen=True)

    id_meal: str = Field(validation_alias="idMeal")
    name: str = Field(validation_alias="strMeal")
    instructions: str = Field(validation_alias="strInstructions")
    ingredients: Tuple[IngredientMeasure, ...] = ()

    @property
    def id(self) -> str:
        return self.id_meal


# Response models for the presentation API


class MealSummaryResponse(BaseModel):
    """List entry payload."""

    id_meal: str
    name: str
    thumbnail_url: Optional[str] = None


class IngredientLine(BaseModel):
    """Ingredient pair rendered as an object."""

    ingredient: str
    measure: str


class MealDetailResponse(BaseModel):
    """Detail view payload."""

    id_meal: str
    name: str
    instructions: str
    ingredients: List[IngredientLine] = []


class MealListResponse(BaseModel):
    """List view payload. ``error`` is set when the last list fetch failed."""

    category: str
    meals: List[MealSummaryResponse] = []
    error: Optional[Dict[str, Any]] = None
