"""Services package - Business logic layer"""

from services.base_service import BaseService
from services.meal_service import MealService
from services.meals_view_model import MealsState, MealsViewModel

__all__ = [
    "BaseService",
    "MealService",
    "MealsState",
    "MealsViewModel",
]
