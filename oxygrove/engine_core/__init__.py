"""
Engine Core - Tree farm state management and transitions.

The engine is the runtime that:
1. Holds a GameState snapshot
2. Turns every operation and tick into an Action
3. Applies actions via the reducer
4. Schedules the reducer's delayed follow-ups
5. Evaluates achievements after relevant changes
"""

from .state import (
    GameState,
    PlantedTree,
    Upgrade,
    UpgradeType,
    Achievement,
    TreeType,
    compute_tilling_power,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ScheduledAction
from .reducer import Reducer, apply_action
from .tilling import required_tilling, has_tilled_plots
from .scheduler import Scheduler

__all__ = [
    "GameState",
    "PlantedTree",
    "Upgrade",
    "UpgradeType",
    "Achievement",
    "TreeType",
    "compute_tilling_power",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ScheduledAction",
    "Reducer",
    "apply_action",
    "required_tilling",
    "has_tilled_plots",
    "Scheduler",
]
