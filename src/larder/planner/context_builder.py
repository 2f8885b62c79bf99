"""Helpers for assembling the replanning context handed to the suggestion service."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence

from larder.config import Settings, get_settings
from larder.engine.availability import available_inventory
from larder.engine.reservations import ReservationMap
from larder.engine.waste import best_by_soon, find_waste_risk_items
from larder.models.inventory import InventoryItem
from larder.models.meals import MealPlan
from larder.models.replan import DaySchedule, MealProfile, ReplanningContext, UnplannedEvent
from larder.stores.interface import LeftoverProvider, ProfileProvider, ScheduleProvider

DAYS_PER_WEEK = 7


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""

    return day - timedelta(days=(day.weekday() + 1) % DAYS_PER_WEEK)


def resolve_profile(profile: Optional[MealProfile], settings: Settings) -> MealProfile:
    """Fill in cooking durations when the profile has none (or is missing)."""

    profile = profile or MealProfile()
    if profile.meal_duration_preferences:
        return profile
    return profile.model_copy(
        update={"meal_duration_preferences": settings.meal_duration_defaults()}
    )


async def load_week_schedule(
    schedule_provider: ScheduleProvider,
    user_id: str,
    start: date,
) -> List[DaySchedule]:
    return [
        await schedule_provider.effective_schedule(user_id, start + timedelta(days=offset))
        for offset in range(DAYS_PER_WEEK)
    ]


async def assemble_replanning_context(
    *,
    user_id: str,
    plan: MealPlan,
    event: UnplannedEvent,
    pantry: Sequence[InventoryItem],
    reservations: ReservationMap,
    schedule_provider: ScheduleProvider,
    profile_provider: ProfileProvider,
    leftover_provider: LeftoverProvider,
    today: date,
    settings: Optional[Settings] = None,
) -> ReplanningContext:
    """Return a fully-hydrated ReplanningContext for a plan with skips applied.

    Schedule and leftovers cover the Sunday-to-Saturday week containing the
    event. Inventory quantities are net of the supplied reservations.
    """

    settings = settings or get_settings()
    profile = resolve_profile(await profile_provider.get_profile(user_id), settings)

    start = week_start(event.date)
    schedule = await load_week_schedule(schedule_provider, user_id, start)
    leftovers = await leftover_provider.list_leftovers(
        user_id, start, start + timedelta(days=DAYS_PER_WEEK)
    )

    skipped = [
        meal
        for meal in plan.meals
        if meal.skipped and meal.date == event.date and meal.meal_type in event.meal_types
    ]

    return ReplanningContext(
        user_id=user_id,
        preferences=profile,
        schedule=schedule,
        leftover_meals=leftovers,
        current_inventory=available_inventory(pantry, reservations),
        best_by_soon_items=best_by_soon(pantry, today, within_days=settings.best_by_soon_days),
        skipped_meals=skipped,
        waste_risk_items=find_waste_risk_items(
            pantry,
            plan.meals,
            today,
            within_days=settings.waste_risk_days,
        ),
        unplanned_event=event,
    )


__all__ = [
    "DAYS_PER_WEEK",
    "week_start",
    "resolve_profile",
    "load_week_schedule",
    "assemble_replanning_context",
]
