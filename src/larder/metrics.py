"""Prometheus metrics definitions for larder."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

AVAILABILITY_CHECKS = Counter(
    "larder_availability_checks_total",
    "Number of ingredient availability checks by resulting status",
    ["status"],
)

CLAIMS = Counter(
    "larder_claims_total",
    "Number of claim mutations by target store and result",
    ["target", "result"],
)

REPLANS = Counter(
    "larder_replans_total",
    "Number of replanning attempts by outcome",
    ["outcome"],
)

SUGGESTION_LATENCY = Histogram(
    "larder_suggestion_request_duration_seconds",
    "Latency of calls to the meal suggestion service",
)

__all__ = [
    "AVAILABILITY_CHECKS",
    "CLAIMS",
    "REPLANS",
    "SUGGESTION_LATENCY",
]
