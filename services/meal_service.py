from typing import List

from adapters.mealdb_adapter import MealDBAdapter
from app.exceptions import DecodeError, NotFoundError
from domain.mappers.meal_mapper import MealMapper
from domain.schemas.meal_schemas import MealDetail, MealSummary
from services.base_service import BaseService


class MealService(BaseService[MealDBAdapter]):
    """Fetch-and-decode operations for recipe lists and recipe details.

    Every call performs exactly one request and nothing is cached. Failures
    are raised as ``NetworkError``, ``DecodeError`` or ``NotFoundError`` so
    callers can tell them apart.
    """

    def __init__(self, adapter: MealDBAdapter):
        super().__init__(adapter, "dessertbook.meals")

    async def fetch_meals_by_category(self, category: str) -> List[MealSummary]:
        """Return the category's recipes sorted by name (case-sensitive)."""
        payload = await self.adapter.filter_by_category(category)
        try:
            meals = [MealMapper.to_summary(raw) for raw in MealMapper.extract_meals(payload)]
        except DecodeError as exc:
            self.log_warning("meals_decode_failed", category=category, error=exc.message)
            raise

        meals.sort(key=lambda meal: meal.name)
        self.log_info("meals_fetched", category=category, count=len(meals))
        return meals

    async def fetch_meal_detail(self, meal_id: str) -> MealDetail:
        """Return the first record of a lookup, flattened.

        Raises:
            NotFoundError: the ``meals`` array is absent, null or empty
        """
        payload = await self.adapter.lookup(meal_id)
        try:
            records = MealMapper.extract_meals(payload)
            if not records:
                self.log_warning("meal_not_found", meal_id=meal_id)
                raise NotFoundError(
                    f"Meal {meal_id} not found",
                    details={"meal_id": meal_id},
                    code="MEAL_NOT_FOUND",
                )
            detail = MealMapper.to_detail(records[0])
        except DecodeError as exc:
            self.log_warning("meal_decode_failed", meal_id=meal_id, error=exc.message)
            raise

        self.log_info(
            "meal_fetched", meal_id=meal_id, ingredients=len(detail.ingredients)
        )
        return detail
