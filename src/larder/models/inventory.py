"""Pantry inventory data models."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class InventoryItem(BaseModel):
    """Unit of food tracked in the household pantry."""

    id: str
    name: str
    quantity: int = Field(default=1, ge=1)
    unit: Optional[str] = Field(default=None)
    best_by_date: Optional[date] = Field(default=None)
    thaw_date: Optional[date] = Field(default=None)
    category: Optional[str] = Field(default=None)
    used_by_meals: list[str] = Field(default_factory=list)
    version: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        if value is None or value == "" or value == 0:
            return 1
        return value

    @field_validator("used_by_meals")
    @classmethod
    def _unique_meal_ids(cls, value: list[str]) -> list[str]:
        return _dedupe(value)

    @model_validator(mode="after")
    def _single_expiry_kind(self) -> "InventoryItem":
        if self.best_by_date is not None and self.thaw_date is not None:
            raise ValueError("best_by_date and thaw_date are mutually exclusive")
        return self

    @property
    def expiry_date(self) -> Optional[date]:
        """Best-by date for fresh items, thaw date for frozen ones."""
        return self.best_by_date or self.thaw_date

    def with_meal(self, meal_id: str) -> "InventoryItem":
        """Return a copy tagged with ``meal_id`` (no-op when already tagged)."""
        if meal_id in self.used_by_meals:
            return self
        return self.model_copy(
            update={"used_by_meals": [*self.used_by_meals, meal_id], "version": self.version + 1}
        )


class WasteRiskItem(InventoryItem):
    """Inventory item likely to spoil before any planned meal uses it."""

    days_until_best_by: int


__all__ = ["InventoryItem", "WasteRiskItem"]
