"""SQL-backed inventory and shopping list stores."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from larder.errors import ConcurrentUpdateError
from larder.models.inventory import InventoryItem
from larder.models.shopping import ShoppingListItem

from .models import InventoryItemORM, ShoppingListItemORM
from .repository import session_scope


def _inventory_to_model(row: InventoryItemORM) -> InventoryItem:
    return InventoryItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "quantity": row.quantity,
            "unit": row.unit,
            "best_by_date": row.best_by_date,
            "thaw_date": row.thaw_date,
            "category": row.category,
            "used_by_meals": list(row.used_by_meals or []),
            "version": row.version,
        }
    )


def _shopping_to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "list_id": row.list_id,
            "name": row.name,
            "quantity": row.quantity,
            "crossed_off": row.crossed_off,
            "meal_id": row.meal_id,
            "version": row.version,
        }
    )


def _next_position(session: Session, orm_class, user_id: str) -> int:
    current = session.execute(
        select(func.max(orm_class.position)).where(orm_class.user_id == user_id)
    ).scalar()
    return 0 if current is None else int(current) + 1


def _compare_and_set(
    session: Session,
    orm_class,
    *,
    user_id: str,
    item_id: str,
    expected_version: Optional[int],
    values: dict,
    label: str,
) -> None:
    conditions = [orm_class.id == item_id, orm_class.user_id == user_id]
    if expected_version is not None:
        conditions.append(orm_class.version == expected_version)

    result = session.execute(
        update(orm_class)
        .where(*conditions)
        .values(**values, version=orm_class.version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        return

    current = session.execute(
        select(orm_class.version).where(orm_class.id == item_id, orm_class.user_id == user_id)
    ).scalar()
    if current is None:
        raise ValueError(f"{label} {item_id} not found")
    raise ConcurrentUpdateError(item_id, expected_version or 0, int(current))


class SqlInventoryStore:
    """Pantry records stored in SQLite; list order is insertion order."""

    def add_items(self, user_id: str, items: Iterable[InventoryItem]) -> List[InventoryItem]:
        with session_scope() as session:
            position = _next_position(session, InventoryItemORM, user_id)
            rows = []
            for offset, item in enumerate(items):
                row = InventoryItemORM(
                    id=item.id,
                    user_id=user_id,
                    position=position + offset,
                    name=item.name,
                    quantity=item.quantity,
                    unit=item.unit,
                    best_by_date=item.best_by_date,
                    thaw_date=item.thaw_date,
                    category=item.category,
                    used_by_meals=list(item.used_by_meals),
                    version=item.version,
                )
                session.add(row)
                rows.append(row)
            session.flush()
            return [_inventory_to_model(row) for row in rows]

    def _list_items(self, user_id: str) -> List[InventoryItem]:
        with session_scope() as session:
            rows = (
                session.execute(
                    select(InventoryItemORM)
                    .where(InventoryItemORM.user_id == user_id)
                    .order_by(InventoryItemORM.position, InventoryItemORM.id)
                )
                .scalars()
                .all()
            )
            return [_inventory_to_model(row) for row in rows]

    def _set_used_by_meals(
        self,
        user_id: str,
        item_id: str,
        meal_ids: Sequence[str],
        expected_version: Optional[int],
    ) -> None:
        with session_scope() as session:
            _compare_and_set(
                session,
                InventoryItemORM,
                user_id=user_id,
                item_id=item_id,
                expected_version=expected_version,
                values={"used_by_meals": list(dict.fromkeys(meal_ids))},
                label="Inventory item",
            )

    async def list_items(self, user_id: str) -> List[InventoryItem]:
        return await asyncio.to_thread(self._list_items, user_id)

    async def set_used_by_meals(
        self,
        user_id: str,
        item_id: str,
        meal_ids: Sequence[str],
        *,
        expected_version: Optional[int] = None,
    ) -> None:
        await asyncio.to_thread(
            self._set_used_by_meals, user_id, item_id, list(meal_ids), expected_version
        )


class SqlShoppingListStore:
    """Shopping list entries stored in SQLite."""

    def add_items(self, user_id: str, items: Iterable[ShoppingListItem]) -> List[ShoppingListItem]:
        with session_scope() as session:
            position = _next_position(session, ShoppingListItemORM, user_id)
            rows = []
            for offset, item in enumerate(items):
                row = ShoppingListItemORM(
                    id=item.id,
                    user_id=user_id,
                    list_id=item.list_id,
                    position=position + offset,
                    name=item.name.strip(),
                    quantity=float(item.quantity),
                    crossed_off=item.crossed_off,
                    meal_id=item.meal_id,
                    version=item.version,
                )
                session.add(row)
                rows.append(row)
            session.flush()
            return [_shopping_to_model(row) for row in rows]

    def _list_items(self, user_id: str, list_id: str) -> List[ShoppingListItem]:
        with session_scope() as session:
            rows = (
                session.execute(
                    select(ShoppingListItemORM)
                    .where(
                        ShoppingListItemORM.user_id == user_id,
                        ShoppingListItemORM.list_id == list_id,
                    )
                    .order_by(ShoppingListItemORM.position, ShoppingListItemORM.id)
                )
                .scalars()
                .all()
            )
            return [_shopping_to_model(row) for row in rows]

    def _update_item(
        self,
        user_id: str,
        item_id: str,
        meal_id: Optional[str],
        expected_version: Optional[int],
    ) -> None:
        with session_scope() as session:
            _compare_and_set(
                session,
                ShoppingListItemORM,
                user_id=user_id,
                item_id=item_id,
                expected_version=expected_version,
                values={"meal_id": meal_id},
                label="Shopping list item",
            )

    async def list_items(self, user_id: str, list_id: str) -> List[ShoppingListItem]:
        return await asyncio.to_thread(self._list_items, user_id, list_id)

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        *,
        meal_id: Optional[str],
        expected_version: Optional[int] = None,
    ) -> None:
        await asyncio.to_thread(self._update_item, user_id, item_id, meal_id, expected_version)


__all__ = ["SqlInventoryStore", "SqlShoppingListStore"]
