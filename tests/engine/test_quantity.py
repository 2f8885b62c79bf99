from __future__ import annotations

import pytest

from larder.engine.quantity import normalize_item_name, parse_ingredient


@pytest.mark.parametrize(
    ("line", "quantity", "unit", "name"),
    [
        ("2 cups flour", 2.0, "cup", "flour"),
        ("salt", None, None, "salt"),
        ("1 1/2 cups milk", 1.5, "cup", "milk"),
        ("½ tsp salt", 0.5, "tsp", "salt"),
        ("3/4 cup sugar", 0.75, "cup", "sugar"),
        ("2-3 cloves garlic", 2.0, "clove", "garlic"),
        ("500g ground beef", 500.0, "g", "ground beef"),
        ("2 (14 oz) cans tomatoes", 2.0, "can", "tomatoes"),
        ("1 cup of sugar", 1.0, "cup", "sugar"),
        ("3 eggs", 3.0, None, "eggs"),
        ("8 fl oz cream", 8.0, "fl oz", "cream"),
    ],
)
def test_parse_ingredient_examples(line, quantity, unit, name):
    parsed = parse_ingredient(line)

    if quantity is None:
        assert parsed.quantity is None
    else:
        assert parsed.quantity == pytest.approx(quantity)
    assert parsed.unit == unit
    assert parsed.item_name == name


def test_parse_ingredient_never_raises_on_odd_input():
    assert parse_ingredient("").item_name == ""
    assert parse_ingredient("   ").quantity is None
    assert parse_ingredient("1/0 cup flour").quantity is None

    # a number glued to a word that is not a unit is part of the name
    parsed = parse_ingredient("7up soda")
    assert parsed.quantity is None
    assert parsed.item_name == "7up soda"


def test_bare_unit_word_is_kept_as_name():
    parsed = parse_ingredient("dash")

    assert parsed.quantity is None
    assert parsed.unit is None
    assert parsed.item_name == "dash"


def test_normalize_is_case_and_whitespace_insensitive():
    assert normalize_item_name(" Chicken  Breast ") == normalize_item_name("chicken breast")
    assert normalize_item_name("Tomatoes!") == "tomato"
    assert normalize_item_name("Cherries") == "cherry"
    assert normalize_item_name("cups flour") == "flour"


@pytest.mark.parametrize(
    "name",
    [
        "Potatoes",
        "boxes of Peaches",
        "hummus",
        "Molasses",
        "cups",
        "baby-spinach'",
        "2 lbs beef",
        "Baker's chocolate",
        "Hershey's syrup",
        "Brownies",
    ],
)
def test_normalize_is_idempotent(name):
    once = normalize_item_name(name)

    assert normalize_item_name(once) == once


def test_possessive_is_dropped():
    assert normalize_item_name("Baker's chocolate") == "baker chocolate"
    assert normalize_item_name("baker's chocolate") == normalize_item_name("bakers chocolate")


def test_ie_plurals_keep_their_ending():
    assert normalize_item_name("cookies") == "cookie"
    assert normalize_item_name("Brownies") == "brownie"
    assert normalize_item_name("veggies") == "veggie"
    assert normalize_item_name("berries") == "berry"
