"""
Tilling - Plot preparation rules.

Each board position needs an amount of tilling before a tree can be
planted there. The requirement grows exponentially with the position
index and is capped, so later plots are a soft difficulty curve.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING

from ..config import DEFAULT_SETTINGS, EngineSettings

if TYPE_CHECKING:
    from .state import GameState


def required_tilling(position: int, settings: EngineSettings | None = None) -> int:
    """floor(base * growth ** position), capped at the configured maximum."""
    settings = settings or DEFAULT_SETTINGS
    if position < 0:
        raise ValueError(f"Position must be non-negative, got {position}")
    try:
        requirement = math.floor(settings.tilling_base * settings.tilling_growth ** position)
    except OverflowError:
        return settings.tilling_cap
    return min(requirement, settings.tilling_cap)


def advance_tilling(current: float, power: float, required: int) -> int:
    """Progress after one application of `power`, clamped and floored."""
    return math.floor(min(required, current + power))


def advance_auto_tilling(current: float, power: float, required: int) -> float:
    """
    Progress after one automated tick, clamped but not floored.

    Fractional power accumulates across ticks, so an automation with
    power below 1 still reaches the requirement eventually.
    """
    return min(required, current + power)


def is_tilled(state: GameState, position: int, settings: EngineSettings | None = None) -> bool:
    """True when the position's progress has reached its requirement."""
    return state.tilling_progress(position) >= required_tilling(position, settings)


def has_tilled_plots(state: GameState, settings: EngineSettings | None = None) -> bool:
    """True iff any position's progress meets its requirement."""
    return any(
        progress >= required_tilling(position, settings)
        for position, progress in state.tilled_boxes.items()
    )
