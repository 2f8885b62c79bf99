"""Shared pytest fixtures for the larder test suite."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from larder.config import get_settings
from larder.db.repository import reset_repository_state
from larder.models.inventory import InventoryItem
from larder.models.meals import Dish, DishBasedMeal
from larder.models.shopping import ShoppingListItem


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_larder.db"
    monkeypatch.setenv("LARDER_DATABASE_PATH", str(db_path))
    monkeypatch.setenv("LARDER_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("LARDER_DATABASE_PATH", raising=False)
    monkeypatch.delenv("LARDER_LOG_LEVEL", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def make_item() -> Callable[..., InventoryItem]:
    """Build pantry items with sequential ids."""

    counter = {"next": 0}

    def _make(name: str, quantity: int = 1, **fields) -> InventoryItem:
        counter["next"] += 1
        fields.setdefault("id", f"item-{counter['next']}")
        return InventoryItem(name=name, quantity=quantity, **fields)

    return _make


@pytest.fixture()
def make_entry() -> Callable[..., ShoppingListItem]:
    counter = {"next": 0}

    def _make(name: str, **fields) -> ShoppingListItem:
        counter["next"] += 1
        fields.setdefault("id", f"entry-{counter['next']}")
        fields.setdefault("list_id", "weekly")
        return ShoppingListItem(name=name, **fields)

    return _make


@pytest.fixture()
def make_meal() -> Callable[..., DishBasedMeal]:
    """Build a single-dish meal from ingredient lines."""

    def _make(
        meal_id: str,
        on: date,
        meal_type: str = "dinner",
        ingredients: tuple[str, ...] = (),
        **fields,
    ) -> DishBasedMeal:
        dish = Dish(id=f"{meal_id}-dish", name=meal_id, recipe_ingredients=list(ingredients))
        return DishBasedMeal(id=meal_id, date=on, meal_type=meal_type, dishes=[dish], **fields)

    return _make
