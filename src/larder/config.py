"""Application configuration helpers."""

from __future__ import annotations

import os
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


def _parse_clock_time(value: str) -> str:
    """Return ``value`` as zero-padded HH:MM; raise ValueError if it is not a time."""
    return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")


class Settings(BaseModel):
    """Global settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/larder.db"),
        description="SQLite database location used by the SQL-backed stores.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    waste_risk_days: int = Field(
        default=3,
        ge=0,
        description="Unclaimed items expiring within this many days are flagged as waste risk.",
    )
    best_by_soon_days: int = Field(
        default=14,
        ge=0,
        description="Horizon used for the best-by-soon list handed to the suggestion service.",
    )
    suggestion_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the suggestion service before giving up.",
    )
    suggestion_max_retries: int = Field(
        default=0,
        ge=0,
        description="Extra attempts after a failed suggestion request.",
    )
    default_finish_by: str = Field(
        default="18:00",
        description="Finish-by time (HH:MM) used when the schedule has no entry for a meal.",
    )
    default_meal_duration_min: int = Field(
        default=30,
        ge=0,
        description="Cooking duration used when the profile has none for a meal type.",
    )
    breakfast_duration_min: int = Field(default=20, ge=0)
    lunch_duration_min: int = Field(default=30, ge=0)
    dinner_duration_min: int = Field(default=40, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("default_finish_by")
    @classmethod
    def _clock_time(cls, value: str) -> str:
        return _parse_clock_time(value)

    def meal_duration_defaults(self) -> dict[str, int]:
        return {
            "breakfast": self.breakfast_duration_min,
            "lunch": self.lunch_duration_min,
            "dinner": self.dinner_duration_min,
        }


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


_INT_FIELDS = {
    "LARDER_WASTE_RISK_DAYS": "waste_risk_days",
    "LARDER_BEST_BY_SOON_DAYS": "best_by_soon_days",
    "LARDER_SUGGESTION_MAX_RETRIES": "suggestion_max_retries",
    "LARDER_DEFAULT_MEAL_DURATION_MIN": "default_meal_duration_min",
    "LARDER_BREAKFAST_DURATION_MIN": "breakfast_duration_min",
    "LARDER_LUNCH_DURATION_MIN": "lunch_duration_min",
    "LARDER_DINNER_DURATION_MIN": "dinner_duration_min",
}


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("LARDER_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (log_level := _env("LARDER_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("LARDER_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (finish_by := _env("LARDER_DEFAULT_FINISH_BY")):
        try:
            payload["default_finish_by"] = _parse_clock_time(finish_by)
        except ValueError:
            pass
    if (timeout := _env("LARDER_SUGGESTION_TIMEOUT_SECONDS")):
        try:
            payload["suggestion_timeout_seconds"] = float(timeout)
        except ValueError:
            pass
    for env_key, field_name in _INT_FIELDS.items():
        if (raw := _env(env_key)):
            try:
                payload[field_name] = int(raw)
            except ValueError:
                pass
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
