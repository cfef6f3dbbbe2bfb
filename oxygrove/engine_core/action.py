"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player operations (till, plant, remove, purchase, boost)
2. Periodic ticks (auto-till, production, special event roll)
3. Scheduled reversals (boost expiry, event expiry, matured-mark expiry)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import uuid


class ActionType(Enum):
    """Types of actions in the system."""
    # Player operations
    TILL_BOX = "till_box"
    PLANT_TREE = "plant_tree"
    REMOVE_TREE = "remove_tree"
    INCREMENT_CLICKS = "increment_clicks"
    MATURE_ALL_TREES = "mature_all_trees"
    ADD_OXYGEN = "add_oxygen"
    SPEND_OXYGEN = "spend_oxygen"
    REFUND_OXYGEN = "refund_oxygen"
    ADD_CLICK_POWER_BOOST = "add_click_power_boost"
    PURCHASE_UPGRADE = "purchase_upgrade"

    # Periodic ticks
    AUTO_TILL_TICK = "auto_till_tick"
    PRODUCTION_TICK = "production_tick"
    START_SPECIAL_EVENT = "start_special_event"

    # Scheduled reversals
    REVERT_CLICK_POWER_BOOST = "revert_click_power_boost"
    END_SPECIAL_EVENT = "end_special_event"
    CLEAR_MATURED_MARK = "clear_matured_mark"

    # Reactive
    EVALUATE_ACHIEVEMENTS = "evaluate_achievements"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types have different payload shapes.
    This is a generic container; validation happens in the reducer.
    """
    position: int | None = None
    tree_id: str | None = None
    tree_type: Any | None = None  # TreeType
    upgrade_id: str | None = None
    amount: float | None = None
    multiplier: float | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    The timestamp is engine time in milliseconds; the reducer
    never reads a clock of its own.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: int = 0

    @classmethod
    def till_box(cls, position: int, timestamp: int = 0) -> Action:
        return cls(ActionType.TILL_BOX, ActionPayload(position=position), timestamp)

    @classmethod
    def plant_tree(
        cls,
        tree_type: Any,
        position: int,
        timestamp: int = 0,
        tree_id: str | None = None,
    ) -> Action:
        """Factory for planting. A fresh tree id is minted unless given."""
        return cls(
            ActionType.PLANT_TREE,
            ActionPayload(
                position=position,
                tree_type=tree_type,
                tree_id=tree_id or uuid.uuid4().hex[:9],
            ),
            timestamp,
        )

    @classmethod
    def remove_tree(cls, tree_id: str, timestamp: int = 0) -> Action:
        return cls(ActionType.REMOVE_TREE, ActionPayload(tree_id=tree_id), timestamp)

    @classmethod
    def increment_clicks(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.INCREMENT_CLICKS, ActionPayload(), timestamp)

    @classmethod
    def mature_all_trees(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.MATURE_ALL_TREES, ActionPayload(), timestamp)

    @classmethod
    def add_oxygen(cls, amount: float, timestamp: int = 0) -> Action:
        return cls(ActionType.ADD_OXYGEN, ActionPayload(amount=amount), timestamp)

    @classmethod
    def spend_oxygen(cls, amount: float, timestamp: int = 0) -> Action:
        return cls(ActionType.SPEND_OXYGEN, ActionPayload(amount=amount), timestamp)

    @classmethod
    def refund_oxygen(cls, amount: float, timestamp: int = 0) -> Action:
        """Give back a spent price without counting it as produced oxygen."""
        return cls(ActionType.REFUND_OXYGEN, ActionPayload(amount=amount), timestamp)

    @classmethod
    def add_click_power_boost(cls, multiplier: float, timestamp: int = 0) -> Action:
        return cls(
            ActionType.ADD_CLICK_POWER_BOOST,
            ActionPayload(multiplier=multiplier),
            timestamp,
        )

    @classmethod
    def purchase_upgrade(
        cls,
        upgrade_id: str,
        position: int | None = None,
        timestamp: int = 0,
    ) -> Action:
        return cls(
            ActionType.PURCHASE_UPGRADE,
            ActionPayload(upgrade_id=upgrade_id, position=position),
            timestamp,
        )

    @classmethod
    def auto_till_tick(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.AUTO_TILL_TICK, ActionPayload(), timestamp)

    @classmethod
    def production_tick(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.PRODUCTION_TICK, ActionPayload(), timestamp)

    @classmethod
    def start_special_event(cls, multiplier: float, timestamp: int = 0) -> Action:
        return cls(
            ActionType.START_SPECIAL_EVENT,
            ActionPayload(multiplier=multiplier),
            timestamp,
        )

    @classmethod
    def revert_click_power_boost(cls, multiplier: float, timestamp: int = 0) -> Action:
        """Divide out exactly this multiplier, whatever else is active."""
        return cls(
            ActionType.REVERT_CLICK_POWER_BOOST,
            ActionPayload(multiplier=multiplier),
            timestamp,
        )

    @classmethod
    def end_special_event(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.END_SPECIAL_EVENT, ActionPayload(), timestamp)

    @classmethod
    def clear_matured_mark(cls, tree_id: str, timestamp: int = 0) -> Action:
        return cls(ActionType.CLEAR_MATURED_MARK, ActionPayload(tree_id=tree_id), timestamp)

    @classmethod
    def evaluate_achievements(cls, timestamp: int = 0) -> Action:
        return cls(ActionType.EVALUATE_ACHIEVEMENTS, ActionPayload(), timestamp)


@dataclass
class ScheduledAction:
    """
    A delayed action requested by the reducer.

    The action carries its own reversal payload so it stays correct
    whatever happens to the state before it fires.
    """
    delay_ms: int
    action: Action


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes and delayed follow-up actions
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)
    follow_ups: list[ScheduledAction] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        follow_ups: list[ScheduledAction] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            follow_ups=follow_ups or [],
        )
