"""Pydantic models defining shared data contracts."""

from larder.models.availability import AvailabilityResult, IngredientStatus
from larder.models.inventory import InventoryItem, WasteRiskItem
from larder.models.meals import (
    MEAL_TYPES,
    Dish,
    DishBasedMeal,
    LegacyMeal,
    MealPlan,
    MealType,
    PlannedMeal,
    active_meals,
    meal_claimed_item_ids,
    meal_ingredients,
    parse_planned_meal,
)
from larder.models.replan import (
    AvailableInventoryItem,
    DaySchedule,
    LeftoverMeal,
    MealProfile,
    MealSuggestion,
    ReplanningContext,
    ScheduledMeal,
    UnplannedEvent,
)
from larder.models.shopping import ShoppingListItem

__all__ = [
    "AvailabilityResult",
    "IngredientStatus",
    "InventoryItem",
    "WasteRiskItem",
    "MEAL_TYPES",
    "Dish",
    "DishBasedMeal",
    "LegacyMeal",
    "MealPlan",
    "MealType",
    "PlannedMeal",
    "active_meals",
    "meal_claimed_item_ids",
    "meal_ingredients",
    "parse_planned_meal",
    "AvailableInventoryItem",
    "DaySchedule",
    "LeftoverMeal",
    "MealProfile",
    "MealSuggestion",
    "ReplanningContext",
    "ScheduledMeal",
    "UnplannedEvent",
    "ShoppingListItem",
]
