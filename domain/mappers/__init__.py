"""
Domain mappers package.
Handles transformation between raw API payloads and typed records.
"""

from domain.mappers.meal_mapper import MealMapper

__all__ = ["MealMapper"]
