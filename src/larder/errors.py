"""Exception and warning types raised by the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - type-only imports
    from larder.models.meals import MealPlan


class LarderError(Exception):
    """Base class for engine errors surfaced to callers."""


class ConcurrentUpdateError(LarderError):
    """A compare-and-set write lost against a newer version of the record."""

    def __init__(self, item_id: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Item {item_id} changed concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        self.item_id = item_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class ReplanError(LarderError):
    """Replanning stopped; ``plan`` holds the meals as they stand (skips included)."""

    def __init__(self, message: str, plan: Optional["MealPlan"] = None) -> None:
        super().__init__(message)
        self.plan = plan


class SuggestionServiceError(ReplanError):
    """The suggestion service failed or timed out."""


class ReplanCancelled(ReplanError):
    """Replanning was cancelled before the suggestion service was called."""


class ClaimShortfallWarning(UserWarning):
    """Free stock could not cover a claimed ingredient without over-claiming."""


__all__ = [
    "LarderError",
    "ConcurrentUpdateError",
    "ReplanError",
    "SuggestionServiceError",
    "ReplanCancelled",
    "ClaimShortfallWarning",
]
