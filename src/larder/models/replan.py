"""Replanning workflow data contracts."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from larder.models.inventory import InventoryItem, WasteRiskItem
from larder.models.meals import MealType, PlannedMeal


class UnplannedEvent(BaseModel):
    """Schedule disruption that cancels some meals on one day."""

    date: date
    meal_types: list[MealType] = Field(min_length=1)
    reason: str = Field(default="")

    model_config = ConfigDict(frozen=True)


class ScheduledMeal(BaseModel):
    """A meal slot on a day's schedule with the time it must be ready by."""

    type: MealType
    finish_by: str

    model_config = ConfigDict(frozen=True)

    @field_validator("finish_by")
    @classmethod
    def _clock_time(cls, value: str) -> str:
        return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")


class DaySchedule(BaseModel):
    """Effective schedule for a single day."""

    date: date
    meals: list[ScheduledMeal] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def finish_by(self, meal_type: str) -> Optional[str]:
        for scheduled in self.meals:
            if scheduled.type == meal_type:
                return scheduled.finish_by
        return None


class MealProfile(BaseModel):
    """Household dietary preferences and cooking durations."""

    disliked_foods: list[str] = Field(default_factory=list)
    food_preferences: list[str] = Field(default_factory=list)
    diet_approach: Optional[str] = Field(default=None)
    diet_strict: bool = Field(default=False)
    favorite_meals: list[str] = Field(default_factory=list)
    serving_size: int = Field(default=2, ge=1)
    meal_duration_preferences: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class LeftoverMeal(BaseModel):
    """Prepared leftovers that can stand in for a planned meal."""

    id: str
    meal_name: str
    quantity: str = Field(default="")
    ingredients: list[str] = Field(default_factory=list)
    prepared_on: Optional[date] = Field(default=None)

    model_config = ConfigDict(frozen=True)


class MealSuggestion(BaseModel):
    """Ranked meal proposal returned by the suggestion service."""

    date: date
    meal_type: MealType
    meal_name: str
    description: str = Field(default="")
    uses_items: list[str] = Field(default_factory=list)
    rank: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class AvailableInventoryItem(BaseModel):
    """Inventory item annotated with the quantity not yet reserved by a meal."""

    item: InventoryItem
    available_quantity: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class ReplanningContext(BaseModel):
    """Everything the suggestion service is given to propose replacement meals."""

    user_id: str
    preferences: MealProfile
    schedule: list[DaySchedule] = Field(default_factory=list)
    leftover_meals: list[LeftoverMeal] = Field(default_factory=list)
    current_inventory: list[AvailableInventoryItem] = Field(default_factory=list)
    best_by_soon_items: list[InventoryItem] = Field(default_factory=list)
    skipped_meals: list[PlannedMeal] = Field(default_factory=list)
    waste_risk_items: list[WasteRiskItem] = Field(default_factory=list)
    unplanned_event: UnplannedEvent

    model_config = ConfigDict(frozen=True)


__all__ = [
    "UnplannedEvent",
    "ScheduledMeal",
    "DaySchedule",
    "MealProfile",
    "LeftoverMeal",
    "MealSuggestion",
    "AvailableInventoryItem",
    "ReplanningContext",
]
