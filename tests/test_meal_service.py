"""
Tests for MealService fetch-and-decode operations.

Covers:
- Sorting and cardinality of category lists
- Null and empty ``meals`` arrays (empty list vs. NotFoundError)
- Error kinds staying distinguishable
- One request per call, no caching between calls
"""

import asyncio

import httpx
import pytest

from app.exceptions import DecodeError, MealServiceError, NetworkError, NotFoundError
from test_constants import (
    BAKEWELL_LOOKUP,
    BAKEWELL_PAIRS,
    DESSERT_LIST,
    DESSERT_NAMES_SORTED,
)
from test_helpers import FakeMealDB

pytestmark = pytest.mark.anyio


# =============================================================================
# fetch_meals_by_category
# =============================================================================


async def test_meals_sorted_case_sensitively():
    service = FakeMealDB(lists={"Dessert": DESSERT_LIST}).service()

    meals = await service.fetch_meals_by_category("Dessert")

    assert [meal.name for meal in meals] == DESSERT_NAMES_SORTED


async def test_meals_one_entry_per_input_element():
    payload = {
        "meals": DESSERT_LIST["meals"]
        + [{"idMeal": "99999", "strMeal": "Bakewell tart", "strMealThumb": None}]
    }
    service = FakeMealDB(lists={"Dessert": payload}).service()

    meals = await service.fetch_meals_by_category("Dessert")

    assert len(meals) == len(payload["meals"])
    assert sorted(meal.id for meal in meals) == sorted(
        raw["idMeal"] for raw in payload["meals"]
    )


@pytest.mark.parametrize("payload", [{"meals": None}, {"meals": []}, {}])
async def test_meals_null_or_missing_is_empty(payload):
    service = FakeMealDB(lists={"Vegan": payload}).service()

    assert await service.fetch_meals_by_category("Vegan") == []


async def test_meals_bad_element_is_decode_error():
    payload = {"meals": [{"idMeal": "1", "strMeal": None}]}
    service = FakeMealDB(lists={"Dessert": payload}).service()

    with pytest.raises(DecodeError):
        await service.fetch_meals_by_category("Dessert")


async def test_meals_network_failure_is_network_error():
    fake = FakeMealDB(lists={"Dessert": httpx.ConnectError("refused")})

    with pytest.raises(NetworkError):
        await fake.service().fetch_meals_by_category("Dessert")


# =============================================================================
# fetch_meal_detail
# =============================================================================


async def test_detail_returns_first_record():
    second = dict(BAKEWELL_LOOKUP["meals"][0], idMeal="00000", strMeal="Other")
    payload = {"meals": BAKEWELL_LOOKUP["meals"] + [second]}
    service = FakeMealDB(details={"52767": payload}).service()

    detail = await service.fetch_meal_detail("52767")

    assert detail.id == "52767"
    assert list(detail.ingredients) == BAKEWELL_PAIRS


@pytest.mark.parametrize("payload", [{"meals": []}, {"meals": None}, {}])
async def test_detail_empty_is_not_found(payload):
    service = FakeMealDB(details={"1": payload}).service()

    with pytest.raises(NotFoundError) as exc_info:
        await service.fetch_meal_detail("1")

    assert exc_info.value.details == {"meal_id": "1"}
    assert not isinstance(exc_info.value, NetworkError)


async def test_detail_not_found_distinct_from_network_error():
    fake = FakeMealDB(details={"1": {"meals": []}, "2": httpx.ConnectError("down")})
    service = fake.service()

    with pytest.raises(NotFoundError):
        await service.fetch_meal_detail("1")
    with pytest.raises(NetworkError):
        await service.fetch_meal_detail("2")


async def test_detail_type_mismatch_is_decode_error():
    record = dict(BAKEWELL_LOOKUP["meals"][0], strMeasure2=75)
    service = FakeMealDB(details={"52767": {"meals": [record]}}).service()

    with pytest.raises(DecodeError):
        await service.fetch_meal_detail("52767")


async def test_all_errors_share_base_class():
    service = FakeMealDB().service()

    with pytest.raises(MealServiceError):
        await service.fetch_meal_detail("missing")


# =============================================================================
# SIDE EFFECTS
# =============================================================================


async def test_each_call_fetches_again():
    fake = FakeMealDB(
        lists={"Dessert": DESSERT_LIST}, details={"52767": BAKEWELL_LOOKUP}
    )
    service = fake.service()

    await service.fetch_meals_by_category("Dessert")
    await service.fetch_meals_by_category("Dessert")
    await service.fetch_meal_detail("52767")
    await service.fetch_meal_detail("52767")

    assert len(fake.requests) == 4


async def test_concurrent_fetches_are_independent():
    fake = FakeMealDB(
        lists={"Dessert": DESSERT_LIST},
        details={"52767": BAKEWELL_LOOKUP, "1": {"meals": None}},
    )
    service = fake.service()

    results = await asyncio.gather(
        service.fetch_meals_by_category("Dessert"),
        service.fetch_meal_detail("52767"),
        service.fetch_meal_detail("1"),
        return_exceptions=True,
    )

    assert len(results[0]) == len(DESSERT_LIST["meals"])
    assert results[1].name == "Bakewell tart"
    assert isinstance(results[2], NotFoundError)
    assert len(fake.requests) == 3
