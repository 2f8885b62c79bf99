"""In-process collaborator implementations.

Used by the CLI snapshot commands and the test suite. The stores keep one
ordered list of records per user and enforce compare-and-set on ``version``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from larder.errors import ConcurrentUpdateError
from larder.models.inventory import InventoryItem
from larder.models.replan import (
    DaySchedule,
    LeftoverMeal,
    MealProfile,
    MealSuggestion,
    ReplanningContext,
    ScheduledMeal,
)
from larder.models.shopping import ShoppingListItem

logger = logging.getLogger(__name__)


def _check_version(item_id: str, current: int, expected: Optional[int]) -> None:
    if expected is not None and expected != current:
        raise ConcurrentUpdateError(item_id, expected, current)


class InMemoryInventoryStore:
    """Pantry records held in a dict keyed by user."""

    def __init__(self, items: Optional[Dict[str, Iterable[InventoryItem]]] = None) -> None:
        self._items: Dict[str, List[InventoryItem]] = {
            user_id: list(records) for user_id, records in (items or {}).items()
        }

    def add_item(self, user_id: str, item: InventoryItem) -> InventoryItem:
        self._items.setdefault(user_id, []).append(item)
        return item

    def get_item(self, user_id: str, item_id: str) -> InventoryItem:
        for item in self._items.get(user_id, []):
            if item.id == item_id:
                return item
        raise ValueError(f"Inventory item {item_id} not found")

    async def list_items(self, user_id: str) -> List[InventoryItem]:
        return list(self._items.get(user_id, []))

    async def set_used_by_meals(
        self,
        user_id: str,
        item_id: str,
        meal_ids: Sequence[str],
        *,
        expected_version: Optional[int] = None,
    ) -> None:
        records = self._items.get(user_id, [])
        for index, item in enumerate(records):
            if item.id != item_id:
                continue
            _check_version(item_id, item.version, expected_version)
            records[index] = item.model_copy(
                update={
                    "used_by_meals": list(dict.fromkeys(meal_ids)),
                    "version": item.version + 1,
                }
            )
            logger.debug("Item %s now used by %s", item_id, list(meal_ids), extra={"user_id": user_id})
            return
        raise ValueError(f"Inventory item {item_id} not found")


class InMemoryShoppingListStore:
    """Shopping list entries held in a dict keyed by user."""

    def __init__(self, items: Optional[Dict[str, Iterable[ShoppingListItem]]] = None) -> None:
        self._items: Dict[str, List[ShoppingListItem]] = {
            user_id: list(records) for user_id, records in (items or {}).items()
        }

    def add_item(self, user_id: str, item: ShoppingListItem) -> ShoppingListItem:
        self._items.setdefault(user_id, []).append(item)
        return item

    def get_item(self, user_id: str, item_id: str) -> ShoppingListItem:
        for item in self._items.get(user_id, []):
            if item.id == item_id:
                return item
        raise ValueError(f"Shopping list item {item_id} not found")

    async def list_items(self, user_id: str, list_id: str) -> List[ShoppingListItem]:
        return [item for item in self._items.get(user_id, []) if item.list_id == list_id]

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        *,
        meal_id: Optional[str],
        expected_version: Optional[int] = None,
    ) -> None:
        records = self._items.get(user_id, [])
        for index, item in enumerate(records):
            if item.id != item_id:
                continue
            _check_version(item_id, item.version, expected_version)
            records[index] = item.model_copy(update={"meal_id": meal_id, "version": item.version + 1})
            return
        raise ValueError(f"Shopping list item {item_id} not found")


class StaticScheduleProvider:
    """Explicit per-day schedules with a fallback list of meal slots."""

    def __init__(
        self,
        schedules: Iterable[DaySchedule] = (),
        default_meals: Sequence[ScheduledMeal] = (),
    ) -> None:
        self._by_date = {schedule.date: schedule for schedule in schedules}
        self._default_meals = list(default_meals)

    async def effective_schedule(self, user_id: str, day: date) -> DaySchedule:
        schedule = self._by_date.get(day)
        if schedule is not None:
            return schedule
        return DaySchedule(date=day, meals=self._default_meals)


class StaticProfileProvider:
    def __init__(self, profiles: Optional[Dict[str, MealProfile]] = None) -> None:
        self._profiles = dict(profiles or {})

    async def get_profile(self, user_id: str) -> Optional[MealProfile]:
        return self._profiles.get(user_id)


class InMemoryLeftoverProvider:
    def __init__(self, leftovers: Iterable[LeftoverMeal] = ()) -> None:
        self._leftovers = list(leftovers)

    async def list_leftovers(self, user_id: str, start: date, end: date) -> List[LeftoverMeal]:
        return [
            leftover
            for leftover in self._leftovers
            if leftover.prepared_on is None or start <= leftover.prepared_on < end
        ]


class StaticSuggestionService:
    """Returns a fixed suggestion list and remembers the contexts it was given."""

    def __init__(self, suggestions: Iterable[MealSuggestion] = ()) -> None:
        self._suggestions = list(suggestions)
        self.contexts: List[ReplanningContext] = []

    async def suggest(self, context: ReplanningContext) -> List[MealSuggestion]:
        self.contexts.append(context)
        return list(self._suggestions)


__all__ = [
    "InMemoryInventoryStore",
    "InMemoryShoppingListStore",
    "StaticScheduleProvider",
    "StaticProfileProvider",
    "InMemoryLeftoverProvider",
    "StaticSuggestionService",
]
