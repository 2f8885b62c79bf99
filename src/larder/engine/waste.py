"""Expiry checks for pantry items that planned meals may not use in time."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from larder.models.inventory import InventoryItem, WasteRiskItem
from larder.models.meals import DishBasedMeal, LegacyMeal, meal_claimed_item_ids

logger = logging.getLogger(__name__)

NO_EXPIRY_DAYS = 999


def days_until_expiry(item: InventoryItem, today: date) -> int:
    """Whole days from ``today`` to the item's expiry; negative once expired."""

    expiry = item.expiry_date
    if expiry is None:
        return NO_EXPIRY_DAYS
    return (expiry - today).days


def earliest_claiming_dates(
    pantry: Iterable[InventoryItem],
    meals: Iterable[Union[DishBasedMeal, LegacyMeal]],
) -> Dict[str, date]:
    """Map item id to the date of the earliest non-skipped meal claiming it.

    A claim is read from the meal's claimed item ids or from the item's own
    ``used_by_meals`` tags.
    """

    active = [meal for meal in meals if not meal.skipped]
    meal_dates = {meal.id: meal.date for meal in active}
    earliest: Dict[str, date] = {}

    def _record(item_id: str, when: date) -> None:
        current = earliest.get(item_id)
        if current is None or when < current:
            earliest[item_id] = when

    for meal in active:
        for item_id in meal_claimed_item_ids(meal):
            _record(item_id, meal.date)
    for item in pantry:
        for meal_id in item.used_by_meals:
            if meal_id in meal_dates:
                _record(item.id, meal_dates[meal_id])
    return earliest


def find_waste_risk_items(
    pantry: Sequence[InventoryItem],
    meals: Iterable[Union[DishBasedMeal, LegacyMeal]],
    today: date,
    *,
    within_days: int = 3,
) -> List[WasteRiskItem]:
    """Items expected to spoil before they are eaten.

    An item without an expiry date is never at risk. An unclaimed item is at
    risk when it expires within ``within_days``; a claimed item when it expires
    before the first meal that claims it.
    """

    claimed_on = earliest_claiming_dates(pantry, meals)
    at_risk: List[WasteRiskItem] = []
    for item in pantry:
        expiry = item.expiry_date
        if expiry is None:
            continue
        remaining = days_until_expiry(item, today)
        planned_use = claimed_on.get(item.id)
        if planned_use is None:
            flagged = remaining <= within_days
        else:
            flagged = expiry < planned_use
        if flagged:
            at_risk.append(WasteRiskItem(**item.model_dump(), days_until_best_by=remaining))

    logger.debug("Waste risk scan flagged %d of %d item(s)", len(at_risk), len(pantry))
    return at_risk


def best_by_soon(
    pantry: Iterable[InventoryItem],
    today: date,
    *,
    within_days: int = 14,
    limit: Optional[int] = None,
) -> List[InventoryItem]:
    """Items with an expiry date no later than ``today + within_days``."""

    horizon = today + timedelta(days=within_days)
    soon = [item for item in pantry if item.expiry_date is not None and item.expiry_date <= horizon]
    soon.sort(key=lambda item: item.expiry_date or horizon)
    return soon if limit is None else soon[:limit]


__all__ = [
    "NO_EXPIRY_DAYS",
    "days_until_expiry",
    "earliest_claiming_dates",
    "find_waste_risk_items",
    "best_by_soon",
]
