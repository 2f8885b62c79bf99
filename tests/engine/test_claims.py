from __future__ import annotations

import asyncio
import warnings

import pytest

from larder.engine.claims import ClaimCoordinator
from larder.errors import ClaimShortfallWarning, ConcurrentUpdateError
from larder.stores.memory import InMemoryInventoryStore, InMemoryShoppingListStore

USER = "user-1"


def _coordinator(pantry=(), entries=()):
    inventory = InMemoryInventoryStore({USER: list(pantry)})
    shopping = InMemoryShoppingListStore({USER: list(entries)})
    return ClaimCoordinator(inventory, shopping), inventory, shopping


def test_claim_inventory_tags_matching_items(make_item):
    pantry = [make_item("eggs", quantity=6), make_item("flour", quantity=2)]
    coordinator, inventory, _ = _coordinator(pantry)

    claimed = asyncio.run(
        coordinator.claim_inventory(USER, "meal-1", ["2 eggs", "salt"], pantry, {})
    )

    assert claimed == ["item-1"]
    assert inventory.get_item(USER, "item-1").used_by_meals == ["meal-1"]
    assert inventory.get_item(USER, "item-2").used_by_meals == []


def test_claiming_twice_is_idempotent(make_item):
    pantry = [make_item("egg", quantity=1), make_item("egg", quantity=1)]
    coordinator, inventory, _ = _coordinator(pantry)

    first = asyncio.run(coordinator.claim_inventory(USER, "meal-1", ["1 egg"], pantry, {}))
    refreshed = asyncio.run(inventory.list_items(USER))
    second = asyncio.run(coordinator.claim_inventory(USER, "meal-1", ["1 egg"], refreshed, {}))

    assert first == ["item-1"]
    assert second == []
    items = asyncio.run(inventory.list_items(USER))
    assert [item.used_by_meals for item in items] == [["meal-1"], []]


def test_same_item_is_claimed_once_per_call(make_item):
    pantry = [make_item("chicken breast", quantity=4)]
    coordinator, inventory, _ = _coordinator(pantry)

    claimed = asyncio.run(
        coordinator.claim_inventory(
            USER, "meal-1", ["1 chicken breast", "2 chicken breasts"], pantry, {}
        )
    )

    assert claimed == ["item-1"]
    assert inventory.get_item(USER, "item-1").version == 1


def test_later_line_draws_on_other_stock_once_item_is_spent(make_item):
    pantry = [make_item("egg", quantity=3), make_item("egg", quantity=3, id="second")]
    coordinator, inventory, _ = _coordinator(pantry)

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        claimed = asyncio.run(
            coordinator.claim_inventory(USER, "meal-1", ["2 eggs", "3 eggs"], pantry, {})
        )

    assert claimed == ["item-1", "second"]
    assert inventory.get_item(USER, "second").used_by_meals == ["meal-1"]


def test_repeated_ingredient_beyond_stock_warns(make_item):
    pantry = [make_item("egg", quantity=3)]
    coordinator, _, _ = _coordinator(pantry)

    with pytest.warns(ClaimShortfallWarning):
        claimed = asyncio.run(
            coordinator.claim_inventory(USER, "meal-1", ["2 eggs", "3 eggs"], pantry, {})
        )

    assert claimed == ["item-1"]


def test_reserved_stock_is_not_claimed(make_item):
    pantry = [make_item("egg", quantity=2), make_item("egg", quantity=6, id="spare")]
    coordinator, inventory, _ = _coordinator(pantry)

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        claimed = asyncio.run(
            coordinator.claim_inventory(USER, "meal-2", ["2 eggs"], pantry, {"egg": 2})
        )

    assert claimed == ["spare"]
    assert inventory.get_item(USER, "item-1").used_by_meals == []


def test_shortfall_emits_warning(make_item):
    pantry = [make_item("milk", quantity=1)]
    coordinator, _, _ = _coordinator(pantry)

    with pytest.warns(ClaimShortfallWarning):
        claimed = asyncio.run(
            coordinator.claim_inventory(USER, "meal-1", ["3 cups milk"], pantry, {})
        )

    assert claimed == ["item-1"]


def test_stale_version_raises_concurrent_update(make_item):
    pantry = [make_item("butter", quantity=1)]
    coordinator, inventory, _ = _coordinator(pantry)
    asyncio.run(inventory.set_used_by_meals(USER, "item-1", ["other-meal"]))

    with pytest.raises(ConcurrentUpdateError) as excinfo:
        asyncio.run(coordinator.claim_inventory(USER, "meal-1", ["butter"], pantry, {}))

    assert excinfo.value.expected_version == 0
    assert excinfo.value.actual_version == 1


def test_shopping_list_claims_first_eligible_entry(make_entry):
    entries = [
        make_entry("eggs", crossed_off=True),
        make_entry("eggs", meal_id="someone-else"),
        make_entry("free range eggs"),
        make_entry("eggs"),
    ]
    coordinator, _, shopping = _coordinator(entries=entries)

    claimed = asyncio.run(coordinator.claim_shopping_list(USER, "meal-1", ["6 eggs"], entries))

    assert claimed == ["entry-3"]
    assert shopping.get_item(USER, "entry-2").meal_id == "someone-else"
    assert shopping.get_item(USER, "entry-3").meal_id == "meal-1"
    assert shopping.get_item(USER, "entry-4").meal_id is None


def test_shopping_list_claim_is_idempotent(make_entry):
    entries = [make_entry("tortillas"), make_entry("salsa")]
    coordinator, _, shopping = _coordinator(entries=entries)

    first = asyncio.run(
        coordinator.claim_shopping_list(USER, "meal-1", ["8 tortillas", "tortilla"], entries)
    )
    refreshed = asyncio.run(shopping.list_items(USER, "weekly"))
    second = asyncio.run(coordinator.claim_shopping_list(USER, "meal-1", ["8 tortillas"], refreshed))

    assert first == ["entry-1"]
    assert second == ["entry-1"]
    assert shopping.get_item(USER, "entry-1").version == 1


def test_shopping_list_claims_need_a_store(make_entry):
    coordinator = ClaimCoordinator(InMemoryInventoryStore())

    with pytest.raises(ValueError):
        asyncio.run(coordinator.claim_shopping_list(USER, "meal-1", ["eggs"], [make_entry("eggs")]))
