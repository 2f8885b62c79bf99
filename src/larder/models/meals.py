"""Planned meal models.

Meals come in two shapes: current records keep ingredients and claims on their
dishes, while legacy records keep them on the meal itself (and may carry dishes
too). The shapes form a tagged union on ``kind``; consumers read ingredients and
claims through :func:`meal_ingredients` and :func:`meal_claimed_item_ids` only.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

MealType = Literal["breakfast", "lunch", "dinner"]
MEAL_TYPES: tuple[str, ...] = ("breakfast", "lunch", "dinner")
MEAL_TYPE_ORDER = {meal_type: index for index, meal_type in enumerate(MEAL_TYPES)}

_LEGACY_FIELDS = ("recipe_ingredients", "suggested_ingredients", "claimed_item_ids")


class Dish(BaseModel):
    """Dish within a planned meal."""

    id: Optional[str] = Field(default=None)
    name: str = Field(default="")
    recipe_ingredients: list[str] = Field(default_factory=list)
    claimed_item_ids: list[str] = Field(default_factory=list)
    claimed_shopping_list_item_ids: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class _MealBase(BaseModel):
    id: str
    date: date
    meal_type: MealType
    confirmed: bool = Field(default=False)
    skipped: bool = Field(default=False)
    finish_by: Optional[str] = Field(default=None)
    start_cooking_at: Optional[str] = Field(default=None)
    is_leftover: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)


class DishBasedMeal(_MealBase):
    """Meal whose ingredients and claims live on its dishes."""

    kind: Literal["dishes"] = "dishes"
    dishes: list[Dish] = Field(default_factory=list)


class LegacyMeal(_MealBase):
    """Meal carrying ingredients and claims directly on the meal record."""

    kind: Literal["legacy"] = "legacy"
    dishes: list[Dish] = Field(default_factory=list)
    recipe_ingredients: list[str] = Field(default_factory=list)
    suggested_ingredients: list[str] = Field(default_factory=list)
    claimed_item_ids: list[str] = Field(default_factory=list)


PlannedMeal = Annotated[Union[DishBasedMeal, LegacyMeal], Field(discriminator="kind")]

_PLANNED_MEAL_ADAPTER: TypeAdapter[Any] = TypeAdapter(PlannedMeal)


def _with_kind(payload: Any) -> Any:
    if not isinstance(payload, dict) or payload.get("kind"):
        return payload
    is_legacy = any(payload.get(field_name) for field_name in _LEGACY_FIELDS)
    return {**payload, "kind": "legacy" if is_legacy else "dishes"}


def parse_planned_meal(payload: Any) -> Union[DishBasedMeal, LegacyMeal]:
    """Validate a raw meal record, inferring its shape when ``kind`` is absent."""

    return _PLANNED_MEAL_ADAPTER.validate_python(_with_kind(payload))


def meal_ingredients(meal: Union[DishBasedMeal, LegacyMeal]) -> list[str]:
    """Return every ingredient line of a meal regardless of its shape."""

    lines = [line for dish in meal.dishes for line in dish.recipe_ingredients]
    if isinstance(meal, LegacyMeal):
        lines.extend(meal.recipe_ingredients or meal.suggested_ingredients)
    return lines


def meal_claimed_item_ids(meal: Union[DishBasedMeal, LegacyMeal]) -> list[str]:
    """Return the inventory item ids claimed by a meal, without duplicates."""

    ids = [item_id for dish in meal.dishes for item_id in dish.claimed_item_ids]
    if isinstance(meal, LegacyMeal):
        ids.extend(meal.claimed_item_ids)
    return list(dict.fromkeys(ids))


def active_meals(
    meals: Iterable[Union[DishBasedMeal, LegacyMeal]],
) -> list[Union[DishBasedMeal, LegacyMeal]]:
    """Return non-skipped meals in first-declared, first-served order.

    Meals are ordered by date, then meal slot (breakfast, lunch, dinner), then
    id. The sort is stable so the order never depends on how meals were fetched.
    """

    return sorted(
        (meal for meal in meals if not meal.skipped),
        key=lambda meal: (meal.date, MEAL_TYPE_ORDER.get(meal.meal_type, len(MEAL_TYPES)), meal.id),
    )


class MealPlan(BaseModel):
    """A user's plan: the ordered list of planned meals."""

    id: str
    user_id: Optional[str] = Field(default=None)
    meals: list[PlannedMeal] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("meals", mode="before")
    @classmethod
    def _infer_meal_kinds(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_with_kind(entry) for entry in value]
        return value


__all__ = [
    "MealType",
    "MEAL_TYPES",
    "MEAL_TYPE_ORDER",
    "Dish",
    "DishBasedMeal",
    "LegacyMeal",
    "PlannedMeal",
    "MealPlan",
    "parse_planned_meal",
    "meal_ingredients",
    "meal_claimed_item_ids",
    "active_meals",
]
