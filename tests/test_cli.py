from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from larder.cli import app

runner = CliRunner()


@pytest.fixture()
def snapshot_path(tmp_path):
    payload = {
        "user_id": "user-1",
        "pantry": [
            {"id": "eggs", "name": "Eggs", "quantity": 8, "best_by_date": "2026-03-03"},
            {"id": "rice", "name": "rice", "quantity": 4},
        ],
        "shopping_list": [{"id": "s1", "list_id": "weekly", "name": "basil"}],
        "plan": {
            "id": "plan-1",
            "meals": [
                {
                    "id": "wed-dinner",
                    "date": "2026-03-04",
                    "meal_type": "dinner",
                    "dishes": [{"name": "Fried rice", "recipe_ingredients": ["2 eggs", "2 cups rice", "basil"]}],
                },
                {
                    "id": "tue-lunch",
                    "date": "2026-03-03",
                    "meal_type": "lunch",
                    "recipe_ingredients": ["5 eggs"],
                },
            ],
        },
        "default_schedule": [{"type": "dinner", "finish_by": "19:00"}],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parse_command():
    result = runner.invoke(app, ["parse", "2 cups flour"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "quantity": 2.0,
        "unit": "cup",
        "item_name": "flour",
        "normalized": "flour",
    }


def test_match_command_exit_codes():
    assert runner.invoke(app, ["match", "2 eggs", "egg"]).exit_code == 0
    assert runner.invoke(app, ["match", "flour", "sugar"]).exit_code == 1


def test_reservations_follow_meal_order(snapshot_path):
    result = runner.invoke(app, ["reservations", str(snapshot_path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"egg": 7, "rice": 2}


def test_availability_for_meal(snapshot_path):
    result = runner.invoke(
        app,
        ["availability", str(snapshot_path), "--meal-id", "wed-dinner", "--ingredient", "4 eggs"],
    )

    assert result.exit_code == 0
    statuses = {entry["ingredient"]: entry["status"] for entry in json.loads(result.stdout)}
    assert statuses == {
        "4 eggs": "partial",
        "2 eggs": "available",
        "2 cups rice": "available",
        "basil": "missing",
    }


def test_claim_command(snapshot_path):
    result = runner.invoke(
        app, ["claim", str(snapshot_path), "--meal-id", "tue-lunch", "--list-id", "weekly"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["claimed_item_ids"] == ["eggs"]
    assert payload["claimed_shopping_list_item_ids"] == []
    assert payload["pantry"][0]["used_by_meals"] == ["tue-lunch"]


def test_waste_risk_command(snapshot_path):
    result = runner.invoke(app, ["waste-risk", str(snapshot_path), "--today", "2026-03-01"])

    assert result.exit_code == 0
    (item,) = json.loads(result.stdout)
    assert item["id"] == "eggs"
    assert item["days_until_best_by"] == 2


def test_replan_command(snapshot_path, tmp_path):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"date": "2026-03-04", "meal_types": ["dinner"]}), encoding="utf-8")
    suggestions = tmp_path / "suggestions.json"
    suggestions.write_text(
        json.dumps([{"date": "2026-03-04", "meal_type": "dinner", "meal_name": "Egg curry"}]),
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        [
            "replan",
            str(snapshot_path),
            "--event",
            str(event),
            "--suggestions",
            str(suggestions),
            "--today",
            "2026-03-01",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["skipped_meal_ids"] == ["wed-dinner"]
    new_meal = payload["plan"]["meals"][-1]
    assert new_meal["id"] == payload["new_meal_ids"][0]
    assert new_meal["finish_by"] == "19:00"
    assert new_meal["start_cooking_at"] == "18:20"
