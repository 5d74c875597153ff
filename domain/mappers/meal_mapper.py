"""
Recipe domain mappers.
Handles transformation between raw TheMealDB payloads and typed records.
"""

from typing import Any, List, Mapping, Optional, Tuple
from pydantic import ValidationError

from app.exceptions import DecodeError
from domain.schemas.meal_schemas import (
    IngredientMeasure,
    IngredientLine,
    MealDetail,
    MealDetailResponse,
    MealSummary,
    MealSummaryResponse,
)

MAX_INGREDIENTS = 20


def _optional_str(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(
            f"{key} must be a string",
            details={"field": key, "type": type(value).__name__},
            code="INVALID_FIELD_TYPE",
        )
    return value


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DecodeError(
            f"{what} must be a JSON object",
            details={"type": type(raw).__name__},
            code="INVALID_SHAPE",
        )
    return raw


def _validation_details(exc: ValidationError) -> dict:
    return {
        "errors": [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
    }


class MealMapper:
    """Mapper for recipe payload transformations."""

    @staticmethod
    def extract_meals(payload: Any) -> List[Any]:
        """
        Return the ``meals`` array of a response body.

        TheMealDB answers ``{"meals": null}`` when nothing matches, so an
        absent or null key yields an empty list.
        """
        body = _require_mapping(payload, "Response body")
        meals = body.get("meals")
        if meals is None:
            return []
        if not isinstance(meals, list):
            raise DecodeError(
                "meals must be an array or null",
                details={"type": type(meals).__name__},
                code="INVALID_SHAPE",
            )
        return meals

    @staticmethod
    def flatten_ingredients(raw: Mapping[str, Any]) -> Tuple[IngredientMeasure, ...]:
        """
        Collapse ``strIngredient1..20`` / ``strMeasure1..20`` into ordered pairs.

        Index i is kept only when both fields are present, non-null and
        non-empty. Source order is preserved and duplicates are kept.

        Raises:
            DecodeError: a present, non-null field is not a string
        """
        raw = _require_mapping(raw, "Meal record")
        pairs: List[IngredientMeasure] = []
        for index in range(1, MAX_INGREDIENTS + 1):
            ingredient = _optional_str(raw, f"strIngredient{index}")
            measure = _optional_str(raw, f"strMeasure{index}")
            if ingredient and measure:
                pairs.append(IngredientMeasure(ingredient, measure))
        return tuple(pairs)

    @staticmethod
    def to_summary(raw: Any) -> MealSummary:
        """Decode one list-endpoint element."""
        raw = _require_mapping(raw, "Meal summary")
        try:
            return MealSummary.model_validate(raw)
        except ValidationError as exc:
            raise DecodeError(
                "Invalid meal summary",
                details=_validation_details(exc),
                code="INVALID_SUMMARY",
            ) from exc

    @staticmethod
    def to_detail(raw: Any) -> MealDetail:
        """Decode one lookup-endpoint element, flattening its ingredients."""
        raw = _require_mapping(raw, "Meal detail")
        ingredients = MealMapper.flatten_ingredients(raw)
        try:
            return MealDetail.model_validate({**raw, "ingredients": ingredients})
        except ValidationError as exc:
            raise DecodeError(
                "Invalid meal detail",
                details=_validation_details(exc),
                code="INVALID_DETAIL",
            ) from exc

    @staticmethod
    def to_summary_response(summary: MealSummary) -> MealSummaryResponse:
        return MealSummaryResponse(
            id_meal=summary.id_meal,
            name=summary.name,
            thumbnail_url=summary.thumbnail_url,
        )

    @staticmethod
    def to_detail_response(detail: MealDetail) -> MealDetailResponse:
        return MealDetailResponse(
            id_meal=detail.id_meal,
            name=detail.name,
            instructions=detail.instructions,
            ingredients=[
                IngredientLine(ingredient=pair.ingredient, measure=pair.measure)
                for pair in detail.ingredients
            ],
        )
