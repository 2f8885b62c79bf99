"""Replanning workflow run after a schedule disruption.

A run moves through ``idle -> disrupted -> resolving -> suggested -> merged``.
Skipped meals are flagged before the suggestion service is called and stay
flagged when the run fails; errors carry the flagged plan so callers can keep it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from larder.config import Settings, get_settings
from larder.engine.reservations import build_reservation_map
from larder.errors import ReplanCancelled, SuggestionServiceError
from larder.metrics import REPLANS, SUGGESTION_LATENCY
from larder.models.meals import DishBasedMeal, MealPlan
from larder.models.replan import (
    DaySchedule,
    MealProfile,
    MealSuggestion,
    ReplanningContext,
    UnplannedEvent,
)
from larder.stores.interface import (
    InventoryStore,
    LeftoverProvider,
    ProfileProvider,
    ScheduleProvider,
    SuggestionService,
)

from .context_builder import assemble_replanning_context

logger = logging.getLogger(__name__)


class ReplanState(str, Enum):
    IDLE = "idle"
    DISRUPTED = "disrupted"
    RESOLVING = "resolving"
    SUGGESTED = "suggested"
    MERGED = "merged"


_ALLOWED_TRANSITIONS: Dict[ReplanState, Tuple[ReplanState, ...]] = {
    ReplanState.IDLE: (ReplanState.DISRUPTED,),
    ReplanState.DISRUPTED: (ReplanState.RESOLVING,),
    ReplanState.RESOLVING: (ReplanState.SUGGESTED,),
    ReplanState.SUGGESTED: (ReplanState.MERGED,),
    ReplanState.MERGED: (),
}


@dataclass
class ReplanRun:
    """Tracks the state of a single replanning run."""

    state: ReplanState = ReplanState.IDLE
    history: List[ReplanState] = field(default_factory=lambda: [ReplanState.IDLE])

    def advance(self, target: ReplanState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal replan transition {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)


@dataclass
class ReplanResult:
    plan: MealPlan
    skipped_meal_ids: List[str]
    new_meals: List[DishBasedMeal]
    context: ReplanningContext
    states: List[ReplanState]


def apply_skips(plan: MealPlan, event: UnplannedEvent) -> Tuple[MealPlan, List[str]]:
    """Flag every meal on the event's date and slots as skipped.

    Skips are only ever added; a meal already skipped stays skipped.
    """

    skipped_ids: List[str] = []
    meals = []
    for meal in plan.meals:
        if meal.date == event.date and meal.meal_type in event.meal_types:
            skipped_ids.append(meal.id)
            if not meal.skipped:
                meal = meal.model_copy(update={"skipped": True})
        meals.append(meal)
    return plan.model_copy(update={"meals": meals}), skipped_ids


def cooking_start(day: date, finish_by: str, duration_min: int) -> str:
    """Clock time (HH:MM) cooking must start to finish by ``finish_by``."""

    finish = datetime.strptime(finish_by, "%H:%M").time()
    start = datetime.combine(day, finish) - timedelta(minutes=duration_min)
    return start.strftime("%H:%M")


class Replanner:
    """Skips disrupted meals and merges replacement suggestions into the plan."""

    def __init__(
        self,
        *,
        inventory_store: InventoryStore,
        suggestion_service: SuggestionService,
        schedule_provider: ScheduleProvider,
        profile_provider: ProfileProvider,
        leftover_provider: LeftoverProvider,
        settings: Optional[Settings] = None,
    ) -> None:
        self._inventory_store = inventory_store
        self._suggestion_service = suggestion_service
        self._schedule_provider = schedule_provider
        self._profile_provider = profile_provider
        self._leftover_provider = leftover_provider
        self._settings = settings or get_settings()

    async def replan(
        self,
        user_id: str,
        plan: MealPlan,
        event: UnplannedEvent,
        *,
        today: Optional[date] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ReplanResult:
        run = ReplanRun()
        today = today or date.today()
        log_extra = {"user_id": user_id, "plan_id": plan.id}

        run.advance(ReplanState.DISRUPTED)
        logger.info(
            "Replanning %s on %s (%s)",
            ", ".join(event.meal_types),
            event.date.isoformat(),
            event.reason or "no reason given",
            extra=log_extra,
        )

        run.advance(ReplanState.RESOLVING)
        updated, skipped_ids = apply_skips(plan, event)
        pantry = await self._inventory_store.list_items(user_id)
        reservations = build_reservation_map(updated.meals, pantry)
        context = await assemble_replanning_context(
            user_id=user_id,
            plan=updated,
            event=event,
            pantry=pantry,
            reservations=reservations,
            schedule_provider=self._schedule_provider,
            profile_provider=self._profile_provider,
            leftover_provider=self._leftover_provider,
            today=today,
            settings=self._settings,
        )

        suggestions = await self._request_suggestions(context, updated, cancel)
        run.advance(ReplanState.SUGGESTED)

        schedules = {schedule.date: schedule for schedule in context.schedule}
        new_meals = [
            await self._meal_from_suggestion(user_id, suggestion, context.preferences, schedules)
            for suggestion in _ranked(suggestions)
        ]
        merged = updated.model_copy(update={"meals": [*updated.meals, *new_meals]})
        run.advance(ReplanState.MERGED)

        REPLANS.labels(outcome="merged").inc()
        logger.info(
            "Replan skipped %d meal(s) and added %d suggestion(s)",
            len(skipped_ids),
            len(new_meals),
            extra=log_extra,
        )
        return ReplanResult(
            plan=merged,
            skipped_meal_ids=skipped_ids,
            new_meals=new_meals,
            context=context,
            states=list(run.history),
        )

    async def _request_suggestions(
        self,
        context: ReplanningContext,
        plan: MealPlan,
        cancel: Optional[asyncio.Event],
    ) -> List[MealSuggestion]:
        attempts = 1 + self._settings.suggestion_max_retries
        timeout = self._settings.suggestion_timeout_seconds
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            if cancel is not None and cancel.is_set():
                REPLANS.labels(outcome="cancelled").inc()
                raise ReplanCancelled("Replanning cancelled before suggestions were merged", plan=plan)
            try:
                with SUGGESTION_LATENCY.time():
                    suggestions = await asyncio.wait_for(
                        self._suggestion_service.suggest(context), timeout=timeout
                    )
                return list(suggestions)
            except asyncio.TimeoutError as exc:
                last_error = exc
                logger.warning(
                    "Suggestion service timed out after %.1fs (attempt %d/%d)",
                    timeout,
                    attempt,
                    attempts,
                    extra={"plan_id": plan.id},
                )
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "Suggestion service failed (attempt %d/%d): %s",
                    attempt,
                    attempts,
                    exc,
                    extra={"plan_id": plan.id},
                )

        REPLANS.labels(outcome="failed").inc()
        raise SuggestionServiceError(
            f"Suggestion service failed after {attempts} attempt(s)", plan=plan
        ) from last_error

    async def _meal_from_suggestion(
        self,
        user_id: str,
        suggestion: MealSuggestion,
        profile: MealProfile,
        schedules: Dict[date, DaySchedule],
    ) -> DishBasedMeal:
        schedule = schedules.get(suggestion.date)
        if schedule is None:
            schedule = await self._schedule_provider.effective_schedule(user_id, suggestion.date)
            schedules[suggestion.date] = schedule

        finish_by = schedule.finish_by(suggestion.meal_type) or self._settings.default_finish_by
        duration = self._duration_for(suggestion.meal_type, profile)
        return DishBasedMeal(
            id=f"meal-{uuid4().hex[:12]}",
            date=suggestion.date,
            meal_type=suggestion.meal_type,
            finish_by=finish_by,
            start_cooking_at=cooking_start(suggestion.date, finish_by, duration),
            confirmed=False,
            skipped=False,
            is_leftover=False,
            dishes=[],
        )

    def _duration_for(self, meal_type: str, profile: MealProfile) -> int:
        preferred = profile.meal_duration_preferences.get(meal_type)
        if preferred:
            return preferred
        return self._settings.meal_duration_defaults().get(
            meal_type, self._settings.default_meal_duration_min
        )


def _ranked(suggestions: Sequence[MealSuggestion]) -> List[MealSuggestion]:
    # Unranked suggestions keep their position after the ranked ones.
    return sorted(suggestions, key=lambda suggestion: (suggestion.rank is None, suggestion.rank or 0))


__all__ = [
    "ReplanState",
    "ReplanRun",
    "ReplanResult",
    "Replanner",
    "apply_skips",
    "cooking_start",
]
