"""
Meals view-model - display state for the recipe list and the selected recipe.

Fetches run as concurrent tasks on the event loop. Their results are posted
to an update queue and a single writer task applies them, so ``state`` is
only ever replaced from one place. Each load is stamped with a generation
number; a result older than the latest request of the same kind is dropped.
"""

import asyncio
import logging
from typing import List, NamedTuple, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict

from app.exceptions import MealServiceError
from domain.schemas.meal_schemas import MealDetail, MealSummary
from services.meal_service import MealService

logger = logging.getLogger("dessertbook.view_model")

UNAVAILABLE_MESSAGE = "Unable to retrieve. Please try again later."


class MealsState(BaseModel):
    """Immutable snapshot of what the list and detail views show."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    category: str
    meals: Tuple[MealSummary, ...] = ()
    meals_error: Optional[MealServiceError] = None
    selected_meal_id: Optional[str] = None
    selected_meal_detail: Optional[MealDetail] = None
    detail_error: Optional[MealServiceError] = None


# Update messages


class MealsLoaded(NamedTuple):
    generation: int
    meals: Tuple[MealSummary, ...]


class MealsFailed(NamedTuple):
    generation: int
    error: MealServiceError


class DetailRequested(NamedTuple):
    generation: int
    meal_id: str


class DetailLoaded(NamedTuple):
    generation: int
    detail: MealDetail


class DetailFailed(NamedTuple):
    generation: int
    error: MealServiceError


Update = Union[MealsLoaded, MealsFailed, DetailRequested, DetailLoaded, DetailFailed]


class MealsViewModel:
    """Owns the current recipe list and the current selection.

    Usage:
        view_model = MealsViewModel(service, "Dessert")
        await view_model.start()
        view_model.load_meals()
        state = await view_model.select_meal("52768")
        await view_model.stop()
    """

    def __init__(self, service: MealService, category: str):
        self._service = service
        self._state = MealsState(category=category)
        self._updates: Optional[asyncio.Queue] = None
        self._writer: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()
        self._meals_generation = 0
        self._detail_generation = 0
        # (generation, future) pairs resolved with the state snapshot once a
        # selection at least that new has its detail or error applied.
        self._detail_waiters: List[Tuple[int, asyncio.Future]] = []

    @property
    def state(self) -> MealsState:
        return self._state

    @property
    def running(self) -> bool:
        return self._writer is not None and not self._writer.done()

    # ------------------ Lifecycle ------------------

    async def start(self) -> None:
        """Start the writer task on the running loop."""
        if self.running:
            return
        self._updates = asyncio.Queue()
        self._writer = asyncio.create_task(self._drain_updates(), name="meals-state-writer")
        logger.info("View-model started category=%s", self._state.category)

    async def stop(self) -> None:
        """Cancel in-flight fetches and the writer task."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for _, waiter in self._detail_waiters:
            waiter.cancel()
        self._detail_waiters.clear()

        if self._writer is not None:
            self._writer.cancel()
            await asyncio.gather(self._writer, return_exceptions=True)
            self._writer = None
        logger.info("View-model stopped")

    # ------------------ Inputs ------------------

    def load_meals(self) -> asyncio.Task:
        """Schedule a fetch of the category list; returns the fetch task."""
        self._ensure_started()
        self._meals_generation += 1
        return self._spawn(
            self._fetch_meals(self._meals_generation, self._state.category)
        )

    def load_meal_detail(self, meal_id: str) -> asyncio.Task:
        """Select ``meal_id`` and schedule its detail fetch; returns the fetch task."""
        self._ensure_started()
        self._detail_generation += 1
        generation = self._detail_generation
        self._updates.put_nowait(DetailRequested(generation, meal_id))
        return self._spawn(self._fetch_detail(generation, meal_id))

    async def refresh(self) -> MealsState:
        """Reload the list and return the state once the result is applied."""
        await self.load_meals()
        await self._updates.join()
        return self._state

    async def select_meal(self, meal_id: str) -> MealsState:
        """
        Load a detail and return the state once the selection is resolved.

        The returned snapshot holds the detail or error of this selection, or
        of a newer one that superseded it. Callers compare
        ``selected_meal_id`` to tell the two apart.
        """
        self.load_meal_detail(meal_id)
        waiter = asyncio.get_running_loop().create_future()
        entry = (self._detail_generation, waiter)
        self._detail_waiters.append(entry)
        try:
            return await waiter
        finally:
            if entry in self._detail_waiters:
                self._detail_waiters.remove(entry)

    async def settle(self) -> MealsState:
        """Wait until every in-flight fetch has been applied."""
        self._ensure_started()
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self._updates.join()
        return self._state

    # ------------------ Fetch tasks ------------------

    def _ensure_started(self) -> None:
        if not self.running:
            raise RuntimeError("MealsViewModel.start() must be awaited before loading")

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fetch_meals(self, generation: int, category: str) -> None:
        try:
            meals = await self._service.fetch_meals_by_category(category)
        except MealServiceError as exc:
            update: Update = MealsFailed(generation, exc)
        else:
            update = MealsLoaded(generation, tuple(meals))
        await self._updates.put(update)

    async def _fetch_detail(self, generation: int, meal_id: str) -> None:
        try:
            detail = await self._service.fetch_meal_detail(meal_id)
        except MealServiceError as exc:
            update: Update = DetailFailed(generation, exc)
        except Exception:
            # A selection must always resolve, or its waiters hang.
            logger.exception("Unexpected error fetching meal %s", meal_id)
            update = DetailFailed(
                generation, MealServiceError(details={"meal_id": meal_id}, code="UNEXPECTED")
            )
        else:
            update = DetailLoaded(generation, detail)
        await self._updates.put(update)

    # ------------------ Single writer ------------------

    async def _drain_updates(self) -> None:
        while True:
            update = await self._updates.get()
            try:
                self._apply(update)
            except Exception:
                logger.exception("Failed to apply %s", type(update).__name__)
            finally:
                self._updates.task_done()

    def _is_stale(self, update: Update, latest: int) -> bool:
        if update.generation == latest:
            return False
        logger.warning(
            "Dropping stale %s generation=%d latest=%d",
            type(update).__name__,
            update.generation,
            latest,
        )
        return True

    def _apply(self, update: Update) -> None:
        if isinstance(update, (MealsLoaded, MealsFailed)):
            if self._is_stale(update, self._meals_generation):
                return
            if isinstance(update, MealsLoaded):
                changes = {"meals": update.meals, "meals_error": None}
            else:
                # The previous list stays on screen; empty if never loaded.
                changes = {"meals_error": update.error}
        else:
            if self._is_stale(update, self._detail_generation):
                return
            if isinstance(update, DetailRequested):
                changes = {
                    "selected_meal_id": update.meal_id,
                    "selected_meal_detail": None,
                    "detail_error": None,
                }
            elif isinstance(update, DetailLoaded):
                changes = {"selected_meal_detail": update.detail, "detail_error": None}
            else:
                changes = {"selected_meal_detail": None, "detail_error": update.error}

        self._state = self._state.model_copy(update=changes)
        if isinstance(update, (DetailLoaded, DetailFailed)):
            self._resolve_waiters(update.generation)

    def _resolve_waiters(self, generation: int) -> None:
        remaining = []
        for entry in self._detail_waiters:
            waiter_generation, waiter = entry
            if waiter_generation > generation:
                remaining.append(entry)
            elif not waiter.done():
                waiter.set_result(self._state)
        self._detail_waiters = remaining
