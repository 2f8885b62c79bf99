"""SQLite persistence for pantry and shopping list records."""

from .repository import get_engine, reset_repository_state, session_scope
from .stores import SqlInventoryStore, SqlShoppingListStore

__all__ = [
    "get_engine",
    "session_scope",
    "reset_repository_state",
    "SqlInventoryStore",
    "SqlShoppingListStore",
]
