"""
Engine Settings - Timing and balance constants.

Every interval, duration and curve parameter the engine uses lives here
so sessions can be tuned without touching engine code. Values can be
overridden through OXYGROVE_* environment variables.
"""

from __future__ import annotations
import os

from pydantic import BaseModel, Field, field_validator


ENV_PREFIX = "OXYGROVE_"


class EngineSettings(BaseModel):
    """Balance and timing configuration for one engine instance."""

    # Periodic tasks
    auto_till_interval_ms: int = Field(1000, gt=0)
    production_interval_ms: int = Field(1000, gt=0)
    special_event_interval_ms: int = Field(60000, gt=0)

    # Self-expiring effects
    click_boost_duration_ms: int = Field(300000, gt=0)
    special_event_duration_ms: int = Field(30000, gt=0)
    special_event_chance: float = Field(0.1, ge=0.0, le=1.0)
    special_event_multipliers: tuple[int, ...] = (2, 3, 4)
    matured_mark_ms: int = Field(2000, gt=0)

    # Tilling curve: floor(base * growth ** position), capped
    tilling_base: int = Field(30, gt=0)
    tilling_growth: float = Field(1.5, ge=1.0)
    tilling_cap: int = Field(10000, gt=0)

    # Board and starting resources
    board_size: int = Field(16, gt=0)
    starting_oxygen: int = Field(1, ge=0)

    model_config = {"frozen": True}

    @field_validator("special_event_multipliers")
    @classmethod
    def _multipliers_positive(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("special_event_multipliers must not be empty")
        if any(m <= 0 for m in value):
            raise ValueError("special_event_multipliers must be positive")
        return value

    @classmethod
    def from_env(cls, **overrides) -> EngineSettings:
        """
        Build settings from OXYGROVE_* environment variables.

        Explicit keyword overrides win over the environment. Multipliers
        are read as a comma-separated list (OXYGROVE_SPECIAL_EVENT_MULTIPLIERS=2,3,4).
        """
        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if name == "special_event_multipliers":
                values[name] = tuple(part.strip() for part in raw.split(",") if part.strip())
            else:
                values[name] = raw
        values.update(overrides)
        return cls.model_validate(values)


DEFAULT_SETTINGS = EngineSettings()
