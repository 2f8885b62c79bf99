"""Pure matching, availability and reservation logic plus claim mutations."""

from .availability import available_inventory, free_quantity, resolve_availability, resolve_ingredients
from .claims import ClaimCoordinator
from .matching import find_best_match, matches, names_match, similarity
from .quantity import ParsedIngredient, normalize_item_name, parse_ingredient
from .reservations import ReservationMap, build_meal_reservations, build_reservation_map
from .waste import best_by_soon, days_until_expiry, find_waste_risk_items

__all__ = [
    "ParsedIngredient",
    "parse_ingredient",
    "normalize_item_name",
    "similarity",
    "names_match",
    "matches",
    "find_best_match",
    "free_quantity",
    "resolve_availability",
    "resolve_ingredients",
    "available_inventory",
    "ReservationMap",
    "build_meal_reservations",
    "build_reservation_map",
    "ClaimCoordinator",
    "days_until_expiry",
    "find_waste_risk_items",
    "best_by_soon",
]
