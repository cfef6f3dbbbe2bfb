"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure
- Never reads a clock: time comes from the action timestamp
- Delayed reversals are returned as follow-ups, not scheduled here
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import DEFAULT_SETTINGS, EngineSettings
from .state import GameState, PlantedTree, UpgradeType
from .action import Action, ActionType, ActionResult, ScheduledAction
from .tilling import required_tilling, advance_tilling, advance_auto_tilling
from .achievements import qualified_achievements, grant_achievements

if TYPE_CHECKING:
    from ..catalog import Catalog


# Failure codes
INVALID_POSITION = "INVALID_POSITION"
INVALID_AMOUNT = "INVALID_AMOUNT"
POSITION_OCCUPIED = "POSITION_OCCUPIED"
ALREADY_TILLED = "ALREADY_TILLED"
NO_PROGRESS = "NO_PROGRESS"
NOT_TILLED = "NOT_TILLED"
UNKNOWN_TREE_TYPE = "UNKNOWN_TREE_TYPE"
DUPLICATE_TREE_ID = "DUPLICATE_TREE_ID"
UNKNOWN_UPGRADE = "UNKNOWN_UPGRADE"
INSUFFICIENT_OXYGEN = "INSUFFICIENT_OXYGEN"
EVENT_ACTIVE = "EVENT_ACTIVE"
NO_HANDLER = "NO_HANDLER"
HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Catalog and settings provide the rules.
    """
    catalog: Catalog
    settings: EngineSettings = field(default_factory=lambda: DEFAULT_SETTINGS)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=NO_HANDLER,
            )

        try:
            return handler(state, action)
        except Exception as e:
            return ActionResult.failure(str(e), error_code=HANDLER_ERROR)

    def required_tilling(self, position: int) -> int:
        return required_tilling(position, self.settings)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.TILL_BOX: self._handle_till_box,
            ActionType.PLANT_TREE: self._handle_plant_tree,
            ActionType.REMOVE_TREE: self._handle_remove_tree,
            ActionType.INCREMENT_CLICKS: self._handle_increment_clicks,
            ActionType.MATURE_ALL_TREES: self._handle_mature_all_trees,
            ActionType.ADD_OXYGEN: self._handle_add_oxygen,
            ActionType.SPEND_OXYGEN: self._handle_spend_oxygen,
            ActionType.REFUND_OXYGEN: self._handle_refund_oxygen,
            ActionType.ADD_CLICK_POWER_BOOST: self._handle_add_click_power_boost,
            ActionType.PURCHASE_UPGRADE: self._handle_purchase_upgrade,
            ActionType.AUTO_TILL_TICK: self._handle_auto_till_tick,
            ActionType.PRODUCTION_TICK: self._handle_production_tick,
            ActionType.START_SPECIAL_EVENT: self._handle_start_special_event,
            ActionType.REVERT_CLICK_POWER_BOOST: self._handle_revert_click_power_boost,
            ActionType.END_SPECIAL_EVENT: self._handle_end_special_event,
            ActionType.CLEAR_MATURED_MARK: self._handle_clear_matured_mark,
            ActionType.EVALUATE_ACHIEVEMENTS: self._handle_evaluate_achievements,
        }
        return handlers.get(action_type)

    def _check_position(self, position: int | None) -> str | None:
        """Return an error message if the position is off the board."""
        if position is None:
            return "No position given"
        if not 0 <= position < self.settings.board_size:
            return f"Position {position} is off the board (0-{self.settings.board_size - 1})"
        return None

    # =========================================================================
    # Tilling
    # =========================================================================

    def _handle_till_box(self, state: GameState, action: Action) -> ActionResult:
        """Advance a plot by the current tilling power."""
        position = action.payload.position
        error = self._check_position(position)
        if error:
            return ActionResult.failure(error, error_code=INVALID_POSITION)

        if state.tree_at(position) is not None:
            return ActionResult.failure(
                f"A tree is growing at position {position}",
                error_code=POSITION_OCCUPIED,
            )

        current = state.tilling_progress(position)
        required = self.required_tilling(position)
        if current >= required:
            return ActionResult.failure(
                f"Position {position} is already fully tilled",
                error_code=ALREADY_TILLED,
            )

        progress = advance_tilling(current, state.tilling_power, required)
        if progress <= current:
            return ActionResult.failure(
                f"Tilling power {state.tilling_power} made no progress",
                error_code=NO_PROGRESS,
            )

        return ActionResult.success_with_state(
            state.with_tilling(position, progress),
            changes=[f"Tilled position {position}: {progress}/{required}"],
        )

    def _handle_auto_till_tick(self, state: GameState, action: Action) -> ActionResult:
        """Advance every position bound to an automation upgrade by its power."""
        new_boxes = state.tilled_boxes.copy()
        changes = []

        for position, upgrade_id in state.auto_tillers.items():
            upgrade = state.upgrades.get(upgrade_id)
            if upgrade is None:
                continue
            current = new_boxes.get(position, 0)
            required = self.required_tilling(position)
            if current < required:
                progress = advance_auto_tilling(current, upgrade.power, required)
                if progress != current:
                    new_boxes[position] = progress
                    changes.append(f"{upgrade.name} tilled position {position}: {progress}/{required}")

        if not changes:
            return ActionResult.success_with_state(state)

        return ActionResult.success_with_state(
            state._copy_with(tilled_boxes=new_boxes),
            changes=changes,
        )

    # =========================================================================
    # Trees
    # =========================================================================

    def _handle_plant_tree(self, state: GameState, action: Action) -> ActionResult:
        """Plant on a fully tilled, empty plot and reset its progress."""
        payload = action.payload
        position = payload.position
        error = self._check_position(position)
        if error:
            return ActionResult.failure(error, error_code=INVALID_POSITION)

        if not self.catalog.has_tree(payload.tree_type):
            return ActionResult.failure(
                f"Unknown tree type: {payload.tree_type}",
                error_code=UNKNOWN_TREE_TYPE,
            )

        if state.tree_at(position) is not None:
            return ActionResult.failure(
                f"A tree is already growing at position {position}",
                error_code=POSITION_OCCUPIED,
            )

        required = self.required_tilling(position)
        if state.tilling_progress(position) < required:
            return ActionResult.failure(
                f"Position {position} needs {required} tilling before planting",
                error_code=NOT_TILLED,
            )

        if state.get_tree(payload.tree_id) is not None:
            return ActionResult.failure(
                f"Tree id {payload.tree_id} is already in use",
                error_code=DUPLICATE_TREE_ID,
            )

        tree = PlantedTree(
            id=payload.tree_id,
            type=payload.tree_type,
            planted_at=action.timestamp,
            position=position,
        )
        new_state = state.with_trees(state.planted_trees + [tree]).with_tilling(position, 0)

        spec = self.catalog.get_tree(tree.type)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Planted {spec.title} at position {position}"],
        )

    def _handle_remove_tree(self, state: GameState, action: Action) -> ActionResult:
        """Remove a tree by id. No refund; an unknown id changes nothing."""
        tree_id = action.payload.tree_id
        remaining = [t for t in state.planted_trees if t.id != tree_id]
        if len(remaining) == len(state.planted_trees):
            return ActionResult.success_with_state(state)

        return ActionResult.success_with_state(
            state.with_trees(remaining),
            changes=[f"Removed tree {tree_id}"],
        )

    def _handle_mature_all_trees(self, state: GameState, action: Action) -> ActionResult:
        """Force-mature every growing tree. Matured trees keep their timestamp."""
        now = action.timestamp
        growing = [t for t in state.planted_trees if not t.is_mature]
        if not growing:
            return ActionResult.success_with_state(state)

        new_trees = [t.mature(now) for t in state.planted_trees]
        return ActionResult.success_with_state(
            state.with_trees(new_trees),
            changes=[f"Matured {len(growing)} tree(s)"],
        )

    def _handle_production_tick(self, state: GameState, action: Action) -> ActionResult:
        """
        Mature eligible trees and accrue oxygen from trees that were
        already mature before this tick.

        Each newly matured tree gets a transient mark plus a follow-up
        that clears it after the configured delay.
        """
        now = action.timestamp
        produced = 0
        new_trees = []
        newly_matured = []

        for tree in state.planted_trees:
            spec = self.catalog.get_tree(tree.type)
            if not tree.is_mature and now - tree.planted_at >= spec.growth_time_ms:
                tree = tree.mature(now)
                newly_matured.append(tree)
            elif tree.is_mature:
                produced += spec.base_production
            new_trees.append(tree)

        if not newly_matured and not produced:
            return ActionResult.success_with_state(state)

        new_state = state
        changes = []
        follow_ups = []

        if newly_matured:
            marks = state.recently_matured_trees.copy()
            for tree in newly_matured:
                marks[tree.id] = now
                follow_ups.append(ScheduledAction(
                    delay_ms=self.settings.matured_mark_ms,
                    action=Action.clear_matured_mark(tree.id),
                ))
                changes.append(
                    f"{self.catalog.get_tree(tree.type).title} at position {tree.position} matured"
                )
            new_state = new_state._copy_with(
                planted_trees=new_trees,
                recently_matured_trees=marks,
            )

        if produced:
            new_state = new_state.with_oxygen_credit(produced)
            changes.append(f"Trees produced {produced} oxygen")

        return ActionResult.success_with_state(new_state, changes=changes, follow_ups=follow_ups)

    def _handle_clear_matured_mark(self, state: GameState, action: Action) -> ActionResult:
        """Drop a just-matured mark if it is still present."""
        tree_id = action.payload.tree_id
        if tree_id not in state.recently_matured_trees:
            return ActionResult.success_with_state(state)

        marks = {k: v for k, v in state.recently_matured_trees.items() if k != tree_id}
        return ActionResult.success_with_state(
            state._copy_with(recently_matured_trees=marks),
        )

    # =========================================================================
    # Resources
    # =========================================================================

    def _handle_add_oxygen(self, state: GameState, action: Action) -> ActionResult:
        amount = action.payload.amount
        if amount is None or amount < 0:
            return ActionResult.failure(f"Invalid oxygen amount: {amount}", error_code=INVALID_AMOUNT)

        return ActionResult.success_with_state(
            state.with_oxygen_credit(amount),
            changes=[f"Gained {amount} oxygen"],
        )

    def _handle_spend_oxygen(self, state: GameState, action: Action) -> ActionResult:
        """Spend oxygen. A spend that would go negative is rejected."""
        amount = action.payload.amount
        if amount is None or amount < 0:
            return ActionResult.failure(f"Invalid oxygen amount: {amount}", error_code=INVALID_AMOUNT)

        if amount > state.oxygen:
            return ActionResult.failure(
                f"Need {amount} oxygen, have {state.oxygen}",
                error_code=INSUFFICIENT_OXYGEN,
            )

        return ActionResult.success_with_state(
            state._copy_with(oxygen=state.oxygen - amount),
            changes=[f"Spent {amount} oxygen"],
        )

    def _handle_refund_oxygen(self, state: GameState, action: Action) -> ActionResult:
        """Undo a spend exactly. Lifetime oxygen is not touched."""
        amount = action.payload.amount
        if amount is None or amount < 0:
            return ActionResult.failure(f"Invalid oxygen amount: {amount}", error_code=INVALID_AMOUNT)

        new_oxygen = state.oxygen + amount
        return ActionResult.success_with_state(
            state._copy_with(
                oxygen=new_oxygen,
                highest_oxygen_reached=max(state.highest_oxygen_reached, new_oxygen),
            ),
            changes=[f"Refunded {amount} oxygen"],
        )

    def _handle_increment_clicks(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(total_clicks=state.total_clicks + 1),
        )

    # =========================================================================
    # Workshop
    # =========================================================================

    def _handle_purchase_upgrade(self, state: GameState, action: Action) -> ActionResult:
        """
        Buy one copy of an upgrade.

        Tilling power is recomputed from the whole upgrade set. An
        automation upgrade bought with a position is bound to it,
        replacing whatever drove that position before.
        """
        payload = action.payload
        upgrade = state.upgrades.get(payload.upgrade_id)
        if upgrade is None:
            return ActionResult.failure(
                f"Unknown upgrade: {payload.upgrade_id}",
                error_code=UNKNOWN_UPGRADE,
            )

        if state.oxygen < upgrade.price:
            return ActionResult.failure(
                f"{upgrade.name} costs {upgrade.price} oxygen, have {state.oxygen}",
                error_code=INSUFFICIENT_OXYGEN,
            )

        binds_position = upgrade.type == UpgradeType.AUTOMATION and payload.position is not None
        if binds_position:
            error = self._check_position(payload.position)
            if error:
                return ActionResult.failure(error, error_code=INVALID_POSITION)

        new_state = state._copy_with(oxygen=state.oxygen - upgrade.price)
        new_state = new_state.with_upgrade(upgrade.with_owned(upgrade.owned + 1))
        changes = [f"Bought {upgrade.name} ({upgrade.owned + 1} owned)"]

        if binds_position:
            tillers = state.auto_tillers.copy()
            tillers[payload.position] = upgrade.id
            new_state = new_state._copy_with(auto_tillers=tillers)
            changes.append(f"{upgrade.name} now tills position {payload.position}")

        return ActionResult.success_with_state(new_state, changes=changes)

    # =========================================================================
    # Timed effects
    # =========================================================================

    def _handle_add_click_power_boost(self, state: GameState, action: Action) -> ActionResult:
        """Multiply click power now and schedule dividing out the same factor."""
        multiplier = action.payload.multiplier
        if multiplier is None or multiplier <= 0:
            return ActionResult.failure(
                f"Boost multiplier must be positive, got {multiplier}",
                error_code=INVALID_AMOUNT,
            )

        return ActionResult.success_with_state(
            state._copy_with(click_power=state.click_power * multiplier),
            changes=[f"Click power boosted x{multiplier}"],
            follow_ups=[ScheduledAction(
                delay_ms=self.settings.click_boost_duration_ms,
                action=Action.revert_click_power_boost(multiplier),
            )],
        )

    def _handle_revert_click_power_boost(self, state: GameState, action: Action) -> ActionResult:
        multiplier = action.payload.multiplier
        if multiplier is None or multiplier <= 0:
            return ActionResult.failure(
                f"Boost multiplier must be positive, got {multiplier}",
                error_code=INVALID_AMOUNT,
            )

        return ActionResult.success_with_state(
            state._copy_with(click_power=state.click_power / multiplier),
            changes=[f"Click power boost x{multiplier} expired"],
        )

    def _handle_start_special_event(self, state: GameState, action: Action) -> ActionResult:
        """Activate a special event unless one is already running."""
        if state.special_event_active:
            return ActionResult.failure(
                "A special event is already active",
                error_code=EVENT_ACTIVE,
            )

        multiplier = action.payload.multiplier
        if multiplier is None or multiplier <= 0:
            return ActionResult.failure(
                f"Event multiplier must be positive, got {multiplier}",
                error_code=INVALID_AMOUNT,
            )

        return ActionResult.success_with_state(
            state._copy_with(
                special_event_active=True,
                special_event_multiplier=multiplier,
            ),
            changes=[f"Special event started: x{multiplier}"],
            follow_ups=[ScheduledAction(
                delay_ms=self.settings.special_event_duration_ms,
                action=Action.end_special_event(),
            )],
        )

    def _handle_end_special_event(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(
                special_event_active=False,
                special_event_multiplier=1,
            ),
            changes=["Special event ended"],
        )

    # =========================================================================
    # Achievements
    # =========================================================================

    def _handle_evaluate_achievements(self, state: GameState, action: Action) -> ActionResult:
        """Unlock every newly qualified achievement and credit its reward once."""
        qualified = qualified_achievements(state)
        if not qualified:
            return ActionResult.success_with_state(state)

        new_state = grant_achievements(state, {a.id for a in qualified})
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Achievement unlocked: {a.title} (+{a.reward} oxygen)" for a in qualified],
        )


def apply_action(catalog: Catalog, state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog)
    return reducer.apply(state, action)
