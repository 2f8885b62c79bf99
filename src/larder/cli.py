"""Command-line interface for larder.

Commands that need pantry or plan data read a JSON snapshot holding the keys
``user_id``, ``pantry``, ``shopping_list``, ``plan``, ``profile``, ``schedule``
and ``leftovers``.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import BaseModel, ConfigDict, Field

from larder.config import get_settings
from larder.engine.availability import resolve_ingredients
from larder.engine.claims import ClaimCoordinator
from larder.engine.matching import matches
from larder.engine.quantity import normalize_item_name, parse_ingredient
from larder.engine.reservations import build_reservation_map
from larder.engine.waste import find_waste_risk_items
from larder.errors import ReplanError
from larder.logging_utils import configure_logging
from larder.models.inventory import InventoryItem
from larder.models.meals import MealPlan, meal_ingredients
from larder.models.replan import (
    DaySchedule,
    LeftoverMeal,
    MealProfile,
    MealSuggestion,
    ScheduledMeal,
    UnplannedEvent,
)
from larder.models.shopping import ShoppingListItem
from larder.planner.replanner import Replanner
from larder.stores.memory import (
    InMemoryInventoryStore,
    InMemoryLeftoverProvider,
    InMemoryShoppingListStore,
    StaticProfileProvider,
    StaticScheduleProvider,
    StaticSuggestionService,
)

app = typer.Typer(help="Pantry matching, reservation and replanning commands.")


class Snapshot(BaseModel):
    """Household state loaded from a JSON file."""

    user_id: str = Field(default="default")
    pantry: list[InventoryItem] = Field(default_factory=list)
    shopping_list: list[ShoppingListItem] = Field(default_factory=list)
    plan: Optional[MealPlan] = Field(default=None)
    profile: Optional[MealProfile] = Field(default=None)
    schedule: list[DaySchedule] = Field(default_factory=list)
    default_schedule: list[ScheduledMeal] = Field(default_factory=list)
    leftovers: list[LeftoverMeal] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def meals(self) -> list:
        return list(self.plan.meals) if self.plan is not None else []


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _load_snapshot(path: Path) -> Snapshot:
    return Snapshot.model_validate(_read_json(path))


def _echo_json(payload: Any, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty, default=str))


def _find_meal(snapshot: Snapshot, meal_id: str):
    for meal in snapshot.meals:
        if meal.id == meal_id:
            return meal
    raise typer.BadParameter(f"Meal {meal_id} not found in snapshot", param_hint="--meal-id")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)


@app.command()
def parse(line: str = typer.Argument(..., help="Free-text ingredient line.")) -> None:
    """Split an ingredient line into quantity, unit and item name."""

    parsed = parse_ingredient(line)
    _echo_json(
        {
            "quantity": parsed.quantity,
            "unit": parsed.unit,
            "item_name": parsed.item_name,
            "normalized": normalize_item_name(parsed.item_name),
        },
        pretty=False,
    )


@app.command()
def match(ingredient: str, candidate: str) -> None:
    """Report whether an ingredient line refers to a candidate item name."""

    matched = matches(ingredient, candidate)
    typer.echo("match" if matched else "no match")
    if not matched:
        raise typer.Exit(code=1)


@app.command()
def availability(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    meal_id: Optional[str] = typer.Option(None, "--meal-id", help="Check this planned meal's ingredients."),
    ingredient: Optional[List[str]] = typer.Option(None, "--ingredient", help="Ingredient line to check."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Resolve ingredient availability against pantry stock and planned meals."""

    snapshot = _load_snapshot(snapshot_path)
    lines = list(ingredient or [])
    exclude: tuple[str, ...] = ()
    if meal_id:
        lines.extend(meal_ingredients(_find_meal(snapshot, meal_id)))
        exclude = (meal_id,)
    if not lines:
        raise typer.BadParameter("Pass --meal-id or at least one --ingredient")

    reservations = build_reservation_map(snapshot.meals, snapshot.pantry, exclude_meal_ids=exclude)
    results = resolve_ingredients(lines, snapshot.pantry, snapshot.shopping_list, reservations)
    _echo_json([result.model_dump(mode="json") for result in results], pretty)


@app.command()
def reservations(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Show how much of each pantry item the current plan already reserves."""

    snapshot = _load_snapshot(snapshot_path)
    _echo_json(build_reservation_map(snapshot.meals, snapshot.pantry), pretty)


@app.command("waste-risk")
def waste_risk(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    today: Optional[str] = typer.Option(None, "--today", help="Reference date (YYYY-MM-DD)."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """List pantry items likely to spoil before a planned meal uses them."""

    snapshot = _load_snapshot(snapshot_path)
    reference = date.fromisoformat(today) if today else date.today()
    items = find_waste_risk_items(
        snapshot.pantry,
        snapshot.meals,
        reference,
        within_days=get_settings().waste_risk_days,
    )
    _echo_json([item.model_dump(mode="json") for item in items], pretty)


@app.command()
def claim(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    meal_id: str = typer.Option(..., "--meal-id", help="Planned meal to claim ingredients for."),
    list_id: Optional[str] = typer.Option(None, "--list-id", help="Also link entries of this shopping list."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Claim pantry items (and optionally shopping list entries) for a meal."""

    snapshot = _load_snapshot(snapshot_path)
    lines = meal_ingredients(_find_meal(snapshot, meal_id))
    inventory_store = InMemoryInventoryStore({snapshot.user_id: snapshot.pantry})
    shopping_store = InMemoryShoppingListStore({snapshot.user_id: snapshot.shopping_list})
    coordinator = ClaimCoordinator(inventory_store, shopping_store)
    ledger = build_reservation_map(snapshot.meals, snapshot.pantry, exclude_meal_ids=(meal_id,))

    async def _run() -> dict[str, Any]:
        claimed_items = await coordinator.claim_inventory(
            snapshot.user_id, meal_id, lines, snapshot.pantry, ledger
        )
        claimed_entries: list[str] = []
        if list_id:
            entries = await shopping_store.list_items(snapshot.user_id, list_id)
            claimed_entries = await coordinator.claim_shopping_list(
                snapshot.user_id, meal_id, lines, entries
            )
        pantry = await inventory_store.list_items(snapshot.user_id)
        return {
            "claimed_item_ids": claimed_items,
            "claimed_shopping_list_item_ids": claimed_entries,
            "pantry": [item.model_dump(mode="json") for item in pantry],
        }

    _echo_json(asyncio.run(_run()), pretty)


@app.command()
def replan(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    event_path: Path = typer.Option(..., "--event", exists=True, dir_okay=False, help="Unplanned event JSON."),
    suggestions_path: Path = typer.Option(
        ...,
        "--suggestions",
        exists=True,
        dir_okay=False,
        help="JSON list of replacement meal suggestions.",
    ),
    today: Optional[str] = typer.Option(None, "--today", help="Reference date (YYYY-MM-DD)."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Skip the meals an unplanned event disrupts and merge replacement suggestions."""

    snapshot = _load_snapshot(snapshot_path)
    if snapshot.plan is None:
        raise typer.BadParameter("Snapshot has no plan to replan", param_hint="SNAPSHOT_PATH")
    event = UnplannedEvent.model_validate(_read_json(event_path))
    suggestions = [MealSuggestion.model_validate(entry) for entry in _read_json(suggestions_path)]

    profiles = {snapshot.user_id: snapshot.profile} if snapshot.profile is not None else {}
    replanner = Replanner(
        inventory_store=InMemoryInventoryStore({snapshot.user_id: snapshot.pantry}),
        suggestion_service=StaticSuggestionService(suggestions),
        schedule_provider=StaticScheduleProvider(snapshot.schedule, snapshot.default_schedule),
        profile_provider=StaticProfileProvider(profiles),
        leftover_provider=InMemoryLeftoverProvider(snapshot.leftovers),
    )
    reference = date.fromisoformat(today) if today else None

    try:
        result = asyncio.run(replanner.replan(snapshot.user_id, snapshot.plan, event, today=reference))
    except ReplanError as exc:
        typer.secho(f"Replanning failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    _echo_json(
        {
            "plan": result.plan.model_dump(mode="json"),
            "skipped_meal_ids": result.skipped_meal_ids,
            "new_meal_ids": [meal.id for meal in result.new_meals],
        },
        pretty,
    )


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `larder` console script."""
    app(prog_name="larder", args=argv)


if __name__ == "__main__":
    main()
