"""Runtime configuration for the match tracker."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import UTC, datetime

from pydantic import BaseModel, Field, ValidationError, field_validator

from duotracker.riot import REGION_TO_ROUTING, RANKED_SOLO_QUEUE_ID


def _parse_iso(ts: str | None) -> datetime | None:
    if not ts:
        return None
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    dt = datetime.fromisoformat(ts)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


class TrackerConfig(BaseModel):
    """Settings consumed by the scheduler and the Riot client."""
    riot_api_key: str = ""
    region: str = "euw1"
    queue_id: int = RANKED_SOLO_QUEUE_ID

    # Matches created before this instant are ignored
    event_start: datetime | None = None

    matches_per_player: int = Field(default=5, ge=1, le=100)
    base_interval_seconds: float = Field(default=60.0, gt=0)
    reschedule_threshold: float = Field(default=0.1, ge=0)
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    log_level: str = "INFO"

    @field_validator("region")
    @classmethod
    def _known_region(cls, value: str) -> str:
        value = value.lower()
        if value not in REGION_TO_ROUTING:
            raise ValueError(f"unknown region {value!r}")
        return value

    @field_validator("event_start")
    @classmethod
    def _aware_event_start(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TrackerConfig:
        """Build the config from environment variables.

        Raises:
            ValueError: If any variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        values: dict[str, object] = {
            "riot_api_key": env.get("RIOT_API_KEY", ""),
            "region": env.get("RIOT_REGION", "euw1"),
            "log_level": env.get("LOG_LEVEL", "INFO"),
        }
        optional = {
            "queue_id": "DUOQ_QUEUE_ID",
            "matches_per_player": "DUOQ_MATCHES_PER_PLAYER",
            "base_interval_seconds": "DUOQ_BASE_INTERVAL_SECONDS",
        }
        for field, var in optional.items():
            raw = env.get(var)
            if raw:
                values[field] = raw

        try:
            values["event_start"] = _parse_iso(env.get("DUOQ_EVENT_START"))
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ValueError(f"Invalid tracker configuration: {exc}") from exc
