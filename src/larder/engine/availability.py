"""Availability resolution for recipe ingredients against pantry stock."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Sequence

from larder.metrics import AVAILABILITY_CHECKS
from larder.models.availability import AvailabilityResult, IngredientStatus
from larder.models.inventory import InventoryItem
from larder.models.replan import AvailableInventoryItem
from larder.models.shopping import ShoppingListItem

from .matching import names_match
from .quantity import normalize_item_name, parse_ingredient

logger = logging.getLogger(__name__)


def free_quantity(item: InventoryItem, reservations: Mapping[str, float]) -> float:
    """Quantity of ``item`` not yet reserved by other planned meals."""

    reserved = reservations.get(normalize_item_name(item.name), 0.0)
    return max(0.0, item.quantity - reserved)


def _pending_purchase_names(shopping_list: Iterable[ShoppingListItem]) -> List[str]:
    names = (normalize_item_name(entry.name) for entry in shopping_list if not entry.crossed_off)
    return [name for name in names if name]


def stocked_items(
    pantry: Sequence[InventoryItem],
    shopping_list: Iterable[ShoppingListItem],
) -> List[InventoryItem]:
    """Pantry items that are not also waiting on the shopping list.

    An item still listed for purchase is treated as not in stock yet.
    """

    pending = _pending_purchase_names(shopping_list)
    if not pending:
        return list(pantry)
    in_stock: List[InventoryItem] = []
    for item in pantry:
        normalized = normalize_item_name(item.name)
        if any(names_match(normalized, name) for name in pending):
            continue
        in_stock.append(item)
    return in_stock


def _decide_status(
    matched: bool,
    available: float,
    needed: float | None,
) -> IngredientStatus:
    if not matched:
        return "missing"
    if needed is None:
        return "available" if available > 0 else "reserved"
    if available >= needed:
        return "available"
    if available > 0:
        return "partial"
    return "reserved"


def resolve_availability(
    ingredient: str,
    pantry: Sequence[InventoryItem],
    shopping_list: Iterable[ShoppingListItem] = (),
    reservations: Mapping[str, float] | None = None,
) -> AvailabilityResult:
    """Work out whether the pantry can still supply ``ingredient``.

    ``reservations`` must come from a ledger built for the current plan; stock it
    assigns to other meals is not counted as available.
    """

    reservations = reservations or {}
    parsed = parse_ingredient(ingredient)
    wanted = normalize_item_name(parsed.item_name)

    matching: List[InventoryItem] = []
    available = 0.0
    for item in stocked_items(pantry, shopping_list):
        if not names_match(wanted, normalize_item_name(item.name)):
            continue
        matching.append(item)
        available += free_quantity(item, reservations)

    status = _decide_status(bool(matching), available, parsed.quantity)
    AVAILABILITY_CHECKS.labels(status=status).inc()
    logger.debug(
        "Ingredient %r resolved to %s (available=%s needed=%s matches=%d)",
        ingredient,
        status,
        available,
        parsed.quantity,
        len(matching),
    )
    return AvailabilityResult(
        ingredient=ingredient,
        status=status,
        matching_items=matching,
        available_quantity=available,
        needed_quantity=parsed.quantity,
    )


def resolve_ingredients(
    ingredients: Iterable[str],
    pantry: Sequence[InventoryItem],
    shopping_list: Iterable[ShoppingListItem] = (),
    reservations: Mapping[str, float] | None = None,
) -> List[AvailabilityResult]:
    """Resolve several ingredient lines against the same ledger."""

    shopping = list(shopping_list)
    return [
        resolve_availability(line, pantry, shopping, reservations)
        for line in ingredients
        if line and line.strip()
    ]


def available_inventory(
    pantry: Iterable[InventoryItem],
    reservations: Mapping[str, float],
) -> List[AvailableInventoryItem]:
    """Annotate every pantry item with its unreserved quantity."""

    return [
        AvailableInventoryItem(item=item, available_quantity=free_quantity(item, reservations))
        for item in pantry
    ]


__all__ = [
    "free_quantity",
    "stocked_items",
    "resolve_availability",
    "resolve_ingredients",
    "available_inventory",
]
