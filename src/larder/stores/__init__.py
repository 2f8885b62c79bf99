"""Collaborator protocols and their in-memory implementations."""

from .interface import (
    InventoryStore,
    LeftoverProvider,
    ProfileProvider,
    ScheduleProvider,
    ShoppingListStore,
    SuggestionService,
)
from .memory import (
    InMemoryInventoryStore,
    InMemoryLeftoverProvider,
    InMemoryShoppingListStore,
    StaticProfileProvider,
    StaticScheduleProvider,
    StaticSuggestionService,
)

__all__ = [
    "InventoryStore",
    "ShoppingListStore",
    "SuggestionService",
    "ScheduleProvider",
    "ProfileProvider",
    "LeftoverProvider",
    "InMemoryInventoryStore",
    "InMemoryShoppingListStore",
    "StaticScheduleProvider",
    "StaticProfileProvider",
    "InMemoryLeftoverProvider",
    "StaticSuggestionService",
]
