"""
Adapters package - External service connections.
HTTP adapter for TheMealDB recipe API.
"""

from adapters.mealdb_adapter import MealDBAdapter

__all__ = [
    "MealDBAdapter",
]
