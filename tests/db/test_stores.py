from __future__ import annotations

import asyncio
from datetime import date

import pytest

from larder.db.models import InventoryItemORM
from larder.db.repository import session_scope
from larder.db.stores import SqlInventoryStore, SqlShoppingListStore
from larder.engine.claims import ClaimCoordinator
from larder.errors import ConcurrentUpdateError

USER = "user-1"


def test_inventory_round_trip_keeps_order(make_item):
    store = SqlInventoryStore()
    store.add_items(
        USER,
        [
            make_item("zucchini", quantity=2, best_by_date=date(2026, 4, 2)),
            make_item("apple", quantity=5, category="produce"),
        ],
    )
    store.add_items("someone-else", [make_item("bread")])

    items = asyncio.run(store.list_items(USER))

    assert [item.name for item in items] == ["zucchini", "apple"]
    assert items[0].best_by_date == date(2026, 4, 2)
    assert items[1].category == "produce"


def test_set_used_by_meals_bumps_version(make_item):
    store = SqlInventoryStore()
    store.add_items(USER, [make_item("rice")])

    asyncio.run(store.set_used_by_meals(USER, "item-1", ["m1", "m1", "m2"], expected_version=0))

    (item,) = asyncio.run(store.list_items(USER))
    assert item.used_by_meals == ["m1", "m2"]
    assert item.version == 1
    with session_scope() as session:
        assert session.get(InventoryItemORM, ("item-1", USER)).version == 1


def test_users_can_share_item_ids(make_item, make_entry):
    inventory = SqlInventoryStore()
    inventory.add_items(USER, [make_item("rice", id="shared")])
    inventory.add_items("someone-else", [make_item("beans", id="shared")])
    shopping = SqlShoppingListStore()
    shopping.add_items(USER, [make_entry("milk", id="entry")])
    shopping.add_items("someone-else", [make_entry("bread", id="entry")])

    asyncio.run(inventory.set_used_by_meals(USER, "shared", ["m1"], expected_version=0))

    (mine,) = asyncio.run(inventory.list_items(USER))
    (theirs,) = asyncio.run(inventory.list_items("someone-else"))
    assert (mine.name, mine.used_by_meals) == ("rice", ["m1"])
    assert (theirs.name, theirs.used_by_meals, theirs.version) == ("beans", [], 0)
    assert [entry.name for entry in asyncio.run(shopping.list_items("someone-else", "weekly"))] == ["bread"]


def test_stale_inventory_write_is_rejected(make_item):
    store = SqlInventoryStore()
    store.add_items(USER, [make_item("rice")])
    asyncio.run(store.set_used_by_meals(USER, "item-1", ["m1"]))

    with pytest.raises(ConcurrentUpdateError):
        asyncio.run(store.set_used_by_meals(USER, "item-1", ["m2"], expected_version=0))


def test_missing_or_foreign_items_raise_value_error(make_item):
    store = SqlInventoryStore()
    store.add_items("someone-else", [make_item("rice")])

    with pytest.raises(ValueError):
        asyncio.run(store.set_used_by_meals(USER, "item-1", ["m1"]))


def test_shopping_list_update_links_meal(make_entry):
    store = SqlShoppingListStore()
    store.add_items(USER, [make_entry("  limes "), make_entry("basil", list_id="market")])

    asyncio.run(store.update_item(USER, "entry-1", meal_id="m1", expected_version=0))

    (entry,) = asyncio.run(store.list_items(USER, "weekly"))
    assert entry.name == "limes"
    assert entry.meal_id == "m1"
    assert entry.version == 1
    with pytest.raises(ConcurrentUpdateError):
        asyncio.run(store.update_item(USER, "entry-1", meal_id="m2", expected_version=0))


def test_claims_through_sql_stores(make_item, make_entry):
    inventory = SqlInventoryStore()
    shopping = SqlShoppingListStore()
    inventory.add_items(USER, [make_item("tortillas", quantity=8)])
    shopping.add_items(USER, [make_entry("salsa")])
    coordinator = ClaimCoordinator(inventory, shopping)

    async def _claim():
        pantry = await inventory.list_items(USER)
        entries = await shopping.list_items(USER, "weekly")
        items = await coordinator.claim_inventory(USER, "taco-night", ["8 tortillas", "salsa"], pantry, {})
        linked = await coordinator.claim_shopping_list(USER, "taco-night", ["salsa"], entries)
        return items, linked

    items, linked = asyncio.run(_claim())

    assert items == ["item-1"]
    assert linked == ["entry-1"]
    (stored,) = asyncio.run(inventory.list_items(USER))
    assert stored.used_by_meals == ["taco-night"]
