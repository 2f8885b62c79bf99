"""Collaborator contracts the engine talks to.

Every method is a coroutine: these calls are the only suspension points of the
claim and replanning workflows.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol, Sequence

from larder.models.inventory import InventoryItem
from larder.models.replan import (
    DaySchedule,
    LeftoverMeal,
    MealProfile,
    MealSuggestion,
    ReplanningContext,
)
from larder.models.shopping import ShoppingListItem


class InventoryStore(Protocol):
    """Pantry records owned by a user."""

    async def list_items(self, user_id: str) -> List[InventoryItem]:
        """Return the user's pantry in stored order."""

    async def set_used_by_meals(
        self,
        user_id: str,
        item_id: str,
        meal_ids: Sequence[str],
        *,
        expected_version: Optional[int] = None,
    ) -> None:
        """Replace the item's meal tags; reject the write if the version moved on."""


class ShoppingListStore(Protocol):
    """Shopping list entries owned by a user."""

    async def list_items(self, user_id: str, list_id: str) -> List[ShoppingListItem]:
        """Return the entries of one shopping list."""

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        *,
        meal_id: Optional[str],
        expected_version: Optional[int] = None,
    ) -> None:
        """Link an entry to a meal; reject the write if the version moved on."""


class SuggestionService(Protocol):
    """External generator of replacement meals."""

    async def suggest(self, context: ReplanningContext) -> List[MealSuggestion]:
        """Return ranked suggestions or raise on failure."""


class ScheduleProvider(Protocol):
    """Effective per-day meal schedule."""

    async def effective_schedule(self, user_id: str, day: date) -> DaySchedule:
        """Return the schedule that applies to ``day``."""


class ProfileProvider(Protocol):
    """Household preferences store."""

    async def get_profile(self, user_id: str) -> Optional[MealProfile]:
        """Return the user's profile, if one was saved."""


class LeftoverProvider(Protocol):
    """Prepared leftovers store."""

    async def list_leftovers(self, user_id: str, start: date, end: date) -> List[LeftoverMeal]:
        """Return leftovers prepared in ``[start, end)``."""


__all__ = [
    "InventoryStore",
    "ShoppingListStore",
    "SuggestionService",
    "ScheduleProvider",
    "ProfileProvider",
    "LeftoverProvider",
]
