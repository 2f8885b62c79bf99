from __future__ import annotations

from datetime import date

from larder.engine.reservations import build_meal_reservations, build_reservation_map
from larder.models.meals import LegacyMeal

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


def test_meal_reservations_ignore_unquantified_lines(make_item):
    pantry = [make_item("eggs", quantity=6), make_item("salt")]

    assert build_meal_reservations(["2 eggs", "salt"], pantry) == {"egg": 2}


def test_reservations_are_capped_by_stock(make_item):
    pantry = [make_item("rice", quantity=2)]

    assert build_meal_reservations(["5 cups rice"], pantry) == {"rice": 2}


def test_earlier_meals_win_scarce_stock(make_item, make_meal):
    pantry = [make_item("egg", quantity=6), make_item("milk", quantity=1)]
    dinner = make_meal("dinner-1", MONDAY, "dinner", ("4 eggs",))
    breakfast = make_meal("breakfast-1", MONDAY, "breakfast", ("3 eggs", "1 cup milk"))

    reserved = build_reservation_map([dinner, breakfast], pantry)

    assert reserved == {"egg": 6, "milk": 1}
    # without the breakfast the dinner alone takes four
    assert build_reservation_map([dinner, breakfast], pantry, exclude_meal_ids={"breakfast-1"}) == {"egg": 4}


def test_ledger_is_deterministic_regardless_of_input_order(make_item, make_meal):
    pantry = [make_item("egg", quantity=5), make_item("flour", quantity=3)]
    meals = [
        make_meal("b", TUESDAY, "lunch", ("2 cups flour",)),
        make_meal("a", TUESDAY, "lunch", ("2 cups flour", "3 eggs")),
        make_meal("c", MONDAY, "dinner", ("4 eggs",)),
    ]

    first = build_reservation_map(meals, pantry)
    second = build_reservation_map(list(reversed(meals)), pantry)

    assert first == second == {"egg": 5, "flour": 3}


def test_skipped_meals_reserve_nothing(make_item, make_meal):
    pantry = [make_item("egg", quantity=6)]
    meals = [make_meal("m1", MONDAY, ingredients=("4 eggs",), skipped=True)]

    assert build_reservation_map(meals, pantry) == {}


def test_legacy_meal_lines_are_reserved(make_item):
    pantry = [make_item("chicken breast", quantity=4)]
    legacy = LegacyMeal(
        id="legacy-1",
        date=MONDAY,
        meal_type="dinner",
        suggested_ingredients=["2 chicken breasts"],
    )

    assert build_reservation_map([legacy], pantry) == {"chicken breast": 2}
