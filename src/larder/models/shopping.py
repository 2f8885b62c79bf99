"""Shopping list models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShoppingListItem(BaseModel):
    """Single entry on one of the household shopping lists.

    ``meal_id`` names the one planned meal allowed to claim the entry.
    """

    id: str
    list_id: str
    name: str
    quantity: float = Field(default=1, gt=0)
    crossed_off: bool = Field(default=False)
    meal_id: Optional[str] = Field(default=None)
    version: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        if value is None or value == "" or value == 0:
            return 1
        return value


__all__ = ["ShoppingListItem"]
