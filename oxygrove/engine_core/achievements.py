"""
Achievement Evaluator - Two-phase unlock and reward.

Phase 1 checks every locked achievement's predicate against a snapshot
and reports the ones that now qualify. Phase 2 flips those flags and
credits their rewards in a single new snapshot. An achievement that is
already unlocked is never re-checked, so a reward is credited once.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Achievement, GameState


def qualified_achievements(state: GameState) -> list[Achievement]:
    """Locked achievements whose predicate holds. Does not touch the state."""
    return [
        achievement for achievement in state.achievements
        if not achievement.unlocked and achievement.condition(state)
    ]


def grant_achievements(state: GameState, achievement_ids: set[str]) -> GameState:
    """
    Unlock the given achievements and credit their rewards.

    Ids that are unknown or already unlocked are ignored.
    """
    reward = 0
    new_achievements = []
    for achievement in state.achievements:
        if achievement.id in achievement_ids and not achievement.unlocked:
            new_achievements.append(achievement.unlock())
            reward += achievement.reward
        else:
            new_achievements.append(achievement)

    new_state = state._copy_with(achievements=new_achievements)
    if reward:
        new_state = new_state.with_oxygen_credit(reward)
    return new_state
