"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.meal_schemas import (
    IngredientMeasure,
    MealSummary,
    MealDetail,
    MealSummaryResponse,
    IngredientLine,
    MealDetailResponse,
    MealListResponse,
)

__all__ = [
    # Recipe records
    "IngredientMeasure",
    "MealSummary",
    "MealDetail",
    # Response payloads
    "MealSummaryResponse",
    "IngredientLine",
    "MealDetailResponse",
    "MealListResponse",
]
