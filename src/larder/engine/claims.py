"""Claim mutations linking pantry and shopping-list records to a meal."""

from __future__ import annotations

import logging
import warnings
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from larder.errors import ClaimShortfallWarning
from larder.metrics import CLAIMS
from larder.models.inventory import InventoryItem
from larder.models.shopping import ShoppingListItem
from larder.stores.interface import InventoryStore, ShoppingListStore

from .availability import free_quantity
from .matching import names_match
from .quantity import normalize_item_name, parse_ingredient

logger = logging.getLogger(__name__)


class ClaimCoordinator:
    """Tag inventory and shopping-list records as earmarked for a meal.

    Claims trust the reservation ledger they are handed; build it right before
    claiming (excluding the meal being claimed for) or stock may be over-claimed.
    Writes go through the stores with the record version read by the caller, so
    a concurrent writer surfaces as :class:`larder.errors.ConcurrentUpdateError`.
    """

    def __init__(
        self,
        inventory_store: InventoryStore,
        shopping_list_store: Optional[ShoppingListStore] = None,
    ) -> None:
        self._inventory_store = inventory_store
        self._shopping_list_store = shopping_list_store

    async def claim_inventory(
        self,
        user_id: str,
        meal_id: str,
        ingredients: Iterable[str],
        pantry: Sequence[InventoryItem],
        reservations: Mapping[str, float],
    ) -> List[str]:
        """Claim pantry items covering each ingredient; return newly claimed ids.

        Items already tagged with ``meal_id`` count toward the need but are not
        written again, so repeating a claim is a no-op. An item's free stock is
        spent once across all lines; a line it cannot cover moves on to other
        matches and warns when they run out.
        """

        working: Dict[str, InventoryItem] = {item.id: item for item in pantry}
        names = [(item.id, normalize_item_name(item.name)) for item in pantry]
        # what each meal-tagged item can still give to later lines of this call
        unused: Dict[str, float] = {
            item.id: free_quantity(item, reservations)
            for item in pantry
            if meal_id in item.used_by_meals
        }
        claimed: List[str] = []

        for line in ingredients:
            parsed = parse_ingredient(line)
            wanted = normalize_item_name(parsed.item_name)
            if not wanted:
                continue

            needed = parsed.quantity or 1
            remaining = needed
            matched_any = False
            for item_id, normalized in names:
                if remaining <= 0:
                    break
                if not names_match(wanted, normalized):
                    continue
                matched_any = True
                item = working[item_id]

                if item_id not in unused:
                    free = free_quantity(item, reservations)
                    if free <= 0:
                        continue
                    await self._inventory_store.set_used_by_meals(
                        user_id,
                        item.id,
                        [*item.used_by_meals, meal_id],
                        expected_version=item.version,
                    )
                    working[item_id] = item.with_meal(meal_id)
                    unused[item_id] = free
                    claimed.append(item.id)
                    CLAIMS.labels(target="inventory", result="claimed").inc()

                taken = min(remaining, unused[item_id])
                unused[item_id] -= taken
                remaining -= taken

            if matched_any and remaining > 0:
                CLAIMS.labels(target="inventory", result="shortfall").inc()
                warnings.warn(
                    ClaimShortfallWarning(
                        f"Meal {meal_id}: free stock covers {needed - remaining:g} of "
                        f"{needed:g} for {line!r}; the rest is reserved by other meals"
                    ),
                    stacklevel=2,
                )

        logger.info(
            "Claimed %d inventory item(s) for meal %s",
            len(claimed),
            meal_id,
            extra={"user_id": user_id, "meal_id": meal_id},
        )
        return claimed

    async def claim_shopping_list(
        self,
        user_id: str,
        meal_id: str,
        ingredients: Iterable[str],
        list_items: Sequence[ShoppingListItem],
    ) -> List[str]:
        """Link the first eligible shopping-list entry per ingredient to the meal.

        Eligible entries are not crossed off and are unclaimed or already claimed
        by this meal. Another meal's claim is never overwritten.
        """

        if self._shopping_list_store is None:
            raise ValueError("Shopping list claims need a shopping list store")

        working: Dict[str, ShoppingListItem] = {item.id: item for item in list_items}
        names = [(item.id, normalize_item_name(item.name)) for item in list_items]
        claimed: List[str] = []

        for line in ingredients:
            wanted = normalize_item_name(parse_ingredient(line).item_name)
            if not wanted:
                continue

            for item_id, normalized in names:
                item = working[item_id]
                if item.crossed_off:
                    continue
                if item.meal_id is not None and item.meal_id != meal_id:
                    continue
                if not names_match(wanted, normalized):
                    continue

                if item.meal_id is None:
                    await self._shopping_list_store.update_item(
                        user_id,
                        item.id,
                        meal_id=meal_id,
                        expected_version=item.version,
                    )
                    working[item_id] = item.model_copy(
                        update={"meal_id": meal_id, "version": item.version + 1}
                    )
                    CLAIMS.labels(target="shopping_list", result="claimed").inc()
                if item.id not in claimed:
                    claimed.append(item.id)
                break

        logger.info(
            "Linked %d shopping list item(s) to meal %s",
            len(claimed),
            meal_id,
            extra={"user_id": user_id, "meal_id": meal_id},
        )
        return claimed


__all__ = ["ClaimCoordinator"]
