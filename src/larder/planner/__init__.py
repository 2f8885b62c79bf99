"""Replanning workflow and context assembly."""

from .context_builder import assemble_replanning_context, week_start
from .replanner import ReplanResult, Replanner, ReplanRun, ReplanState, apply_skips, cooking_start

__all__ = [
    "assemble_replanning_context",
    "week_start",
    "ReplanResult",
    "Replanner",
    "ReplanRun",
    "ReplanState",
    "apply_skips",
    "cooking_start",
]
