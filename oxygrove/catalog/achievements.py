"""
Achievements - Goals and their oxygen rewards.

Each predicate reads a GameState and nothing else.
"""

from __future__ import annotations
from typing import Callable, TYPE_CHECKING

from ..engine_core.state import Achievement

if TYPE_CHECKING:
    from ..engine_core.state import GameState


def clicks_at_least(count: int) -> Callable[[GameState], bool]:
    return lambda state: state.total_clicks >= count


def trees_at_least(count: int) -> Callable[[GameState], bool]:
    return lambda state: len(state.planted_trees) >= count


def oxygen_at_least(amount: int) -> Callable[[GameState], bool]:
    return lambda state: state.oxygen >= amount


def lifetime_oxygen_at_least(amount: float) -> Callable[[GameState], bool]:
    return lambda state: state.total_oxygen_generated >= amount


ACHIEVEMENTS: list[Achievement] = [
    Achievement(
        id="first-furrow",
        title="First Furrow",
        description="Till the land for the first time.",
        reward=5,
        condition=clicks_at_least(1),
    ),
    Achievement(
        id="green-thumb",
        title="Green Thumb",
        description="Plant your first tree.",
        reward=10,
        condition=trees_at_least(1),
    ),
    Achievement(
        id="busy-hands",
        title="Busy Hands",
        description="Till 100 times.",
        reward=50,
        condition=clicks_at_least(100),
    ),
    Achievement(
        id="grove-keeper",
        title="Grove Keeper",
        description="Have 5 trees growing at once.",
        reward=100,
        condition=trees_at_least(5),
    ),
    Achievement(
        id="first-breath",
        title="First Breath",
        description="Generate 100 oxygen in total.",
        reward=25,
        condition=lifetime_oxygen_at_least(100),
    ),
    Achievement(
        id="oxygen-hoarder",
        title="Oxygen Hoarder",
        description="Hold 1000 oxygen at once.",
        reward=250,
        condition=oxygen_at_least(1000),
    ),
    Achievement(
        id="living-atmosphere",
        title="Living Atmosphere",
        description="Generate 10000 oxygen in total.",
        reward=1000,
        condition=lifetime_oxygen_at_least(10000),
    ),
]
