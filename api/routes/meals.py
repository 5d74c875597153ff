"""
Meal routes - Recipe list and recipe detail endpoints.
Mirror the two screens of the app: the category list and the selected recipe.
"""

from fastapi import APIRouter, Depends, HTTPException
import logging

from api.dependencies import get_view_model
from domain.mappers.meal_mapper import MealMapper
from domain.schemas.meal_schemas import MealDetailResponse, MealListResponse
from services.meals_view_model import MealsState, MealsViewModel

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("dessertbook.api.meals")


def _list_response(state: MealsState) -> MealListResponse:
    return MealListResponse(
        category=state.category,
        meals=[MealMapper.to_summary_response(meal) for meal in state.meals],
        error=state.meals_error.to_dict() if state.meals_error else None,
    )


@router.get("", response_model=MealListResponse)
def list_meals(
    view_model: MealsViewModel = Depends(get_view_model),
) -> MealListResponse:
    """
    Return the current recipe list, sorted by name.

    The list is empty until the first fetch completes. When the last fetch
    failed, ``error`` describes why and the previous list is kept.
    """
    return _list_response(view_model.state)


@router.post("/refresh", response_model=MealListResponse)
async def refresh_meals(
    view_model: MealsViewModel = Depends(get_view_model),
) -> MealListResponse:
    """Re-fetch the category list and return it once applied."""
    state = await view_model.refresh()
    return _list_response(state)


@router.get("/{meal_id}", response_model=MealDetailResponse)
async def get_meal(
    meal_id: str,
    view_model: MealsViewModel = Depends(get_view_model),
) -> MealDetailResponse:
    """
    Select a recipe and return its details.

    Returns ingredients as ordered ``{ingredient, measure}`` pairs. Fetch
    failures are rendered by the recipe error handler.
    """
    if not meal_id or len(meal_id) > 100:
        raise HTTPException(status_code=400, detail="Invalid meal ID format")

    state = await view_model.select_meal(meal_id)
    if state.selected_meal_id != meal_id:
        logger.info(f"Selection of {meal_id} superseded by {state.selected_meal_id}")
        raise HTTPException(status_code=409, detail="Selection changed while loading")

    error = state.detail_error
    if error is not None:
        # The stored error is shared state; each response gets its own instance.
        raise type(error)(error.message, details=error.details, code=error.code)
    return MealMapper.to_detail_response(state.selected_meal_detail)
