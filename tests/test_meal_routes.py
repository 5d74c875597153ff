"""
Tests for the meal detail route under overlapping selections.

The route function is awaited directly against a running view-model so two
requests can be in flight on the same loop.
"""

import asyncio

import pytest
from fastapi import HTTPException

from api.routes.meals import get_meal
from app.exceptions import NotFoundError
from services.meals_view_model import MealsViewModel
from test_constants import BAKEWELL_LOOKUP, BAKEWELL_PAIRS
from test_helpers import FakeMealDB, GatedMealDB, lookup_for, wait_for_waiting

pytestmark = pytest.mark.anyio


async def started(fake: FakeMealDB) -> MealsViewModel:
    view_model = MealsViewModel(fake.service(), "Dessert")
    await view_model.start()
    return view_model


async def test_same_meal_requested_twice_answers_both():
    fake = GatedMealDB(details={"52767": BAKEWELL_LOOKUP})
    first_gate = fake.gate("52767")
    second_gate = fake.gate("52767")
    view_model = await started(fake)

    first = asyncio.create_task(get_meal("52767", view_model))
    second = asyncio.create_task(get_meal("52767", view_model))
    await wait_for_waiting(fake, 2)

    first_gate.set()
    while not fake.requests:
        await asyncio.sleep(0)
    second_gate.set()
    responses = await asyncio.gather(first, second)

    for response in responses:
        assert response.name == "Bakewell tart"
        assert [(i.ingredient, i.measure) for i in response.ingredients] == BAKEWELL_PAIRS
    await view_model.stop()


async def test_superseded_request_answers_conflict():
    fake = GatedMealDB(
        details={"1": lookup_for("1", "Slow Pudding"), "2": lookup_for("2", "Fast Flan")}
    )
    slow_gate = fake.gate("1")
    view_model = await started(fake)

    slow = asyncio.create_task(get_meal("1", view_model))
    await wait_for_waiting(fake, 1)
    fast = await get_meal("2", view_model)

    with pytest.raises(HTTPException) as exc_info:
        await slow

    assert exc_info.value.status_code == 409
    assert fast.name == "Fast Flan"

    slow_gate.set()
    await view_model.settle()
    await view_model.stop()


async def test_each_request_raises_its_own_error_instance():
    view_model = await started(FakeMealDB(details={"1": {"meals": []}}))

    with pytest.raises(NotFoundError) as first:
        await get_meal("1", view_model)
    stored = view_model.state.detail_error
    with pytest.raises(NotFoundError) as second:
        await get_meal("1", view_model)

    assert isinstance(stored, NotFoundError)
    assert first.value is not stored
    assert first.value is not second.value
    assert first.value.code == "MEAL_NOT_FOUND"
    assert first.value.details == {"meal_id": "1"}
    await view_model.stop()
