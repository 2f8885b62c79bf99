"""Ingredient availability result models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from larder.models.inventory import InventoryItem

IngredientStatus = Literal["available", "partial", "reserved", "missing"]


class AvailabilityResult(BaseModel):
    """How much of one recipe ingredient the pantry can still supply.

    ``reserved`` means matching stock exists but other meals have claimed all of
    it; ``missing`` means no pantry item matched at all.
    """

    ingredient: str
    status: IngredientStatus
    matching_items: list[InventoryItem] = Field(default_factory=list)
    available_quantity: float = Field(default=0.0, ge=0)
    needed_quantity: Optional[float] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @property
    def count(self) -> int:
        return len(self.matching_items)


__all__ = ["IngredientStatus", "AvailabilityResult"]
