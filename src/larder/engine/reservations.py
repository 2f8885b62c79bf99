"""Reservation ledger: stock already committed to planned meals.

The ledger is a plain ``dict`` rebuilt from scratch for every planning pass.
Callers must rebuild it whenever pantry or plan contents change and must not
share it across unrelated requests.

Allocation is first-declared, first-served: meals are folded in the order given
by :func:`larder.models.meals.active_meals` (date, meal slot, id), so an earlier
meal keeps scarce stock and later meals only get what remains.
"""

from __future__ import annotations

import logging
from typing import Collection, Dict, Iterable, List, Sequence, Tuple, Union

from larder.models.inventory import InventoryItem
from larder.models.meals import DishBasedMeal, LegacyMeal, active_meals, meal_ingredients

from .matching import names_match
from .quantity import normalize_item_name, parse_ingredient

logger = logging.getLogger(__name__)

ReservationMap = Dict[str, float]
_IndexedPantry = List[Tuple[str, InventoryItem]]


def _index_pantry(pantry: Iterable[InventoryItem]) -> _IndexedPantry:
    return [(normalize_item_name(item.name), item) for item in pantry]


def _reserve_line(line: str, pantry: _IndexedPantry, reserved: ReservationMap) -> None:
    parsed = parse_ingredient(line)
    if parsed.quantity is None:
        return

    wanted = normalize_item_name(parsed.item_name)
    remaining = parsed.quantity
    for normalized, item in pantry:
        if remaining <= 0:
            break
        if not names_match(wanted, normalized):
            continue
        already = reserved.get(normalized, 0.0)
        free = max(0.0, item.quantity - already)
        if free <= 0:
            continue
        take = min(remaining, free)
        reserved[normalized] = already + take
        remaining -= take


def build_meal_reservations(
    ingredients: Iterable[str],
    pantry: Sequence[InventoryItem],
) -> ReservationMap:
    """Reservations one meal's ingredient lines would make on an empty ledger."""

    indexed = _index_pantry(pantry)
    reserved: ReservationMap = {}
    for line in ingredients:
        _reserve_line(line, indexed, reserved)
    return reserved


def build_reservation_map(
    meals: Iterable[Union[DishBasedMeal, LegacyMeal]],
    pantry: Sequence[InventoryItem],
    *,
    exclude_meal_ids: Collection[str] = (),
) -> ReservationMap:
    """Fold every non-skipped meal's quantified ingredients into a ledger.

    Unquantified lines ("salt") reserve nothing. ``exclude_meal_ids`` leaves out
    meals being edited so they do not compete with their own reservations.
    """

    indexed = _index_pantry(pantry)
    reserved: ReservationMap = {}
    folded = 0
    for meal in active_meals(meals):
        if meal.id in exclude_meal_ids:
            continue
        for line in meal_ingredients(meal):
            _reserve_line(line, indexed, reserved)
        folded += 1

    logger.debug("Reservation ledger built from %d meal(s): %d item name(s)", folded, len(reserved))
    return reserved


__all__ = ["ReservationMap", "build_meal_reservations", "build_reservation_map"]
