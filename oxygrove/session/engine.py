"""
Grove Engine - The in-process interface presentation code talks to.

The engine:
1. Owns the current GameState snapshot (single logical owner)
2. Turns every call into an Action stamped with engine time
3. Applies it through the reducer and swaps in the new snapshot
4. Schedules the reducer's follow-ups (boost, event and mark expiry)
5. Re-evaluates achievements when oxygen, trees, clicks or lifetime
   oxygen changed
6. Runs the periodic ticks on a cooperative scheduler

Usage:
    engine = GroveEngine(seed=42)
    for _ in range(30):
        if engine.till_box(0):
            engine.increment_clicks()
    engine.plant_tree("oak", 0)
    engine.advance(61000)
"""

from __future__ import annotations
import logging
import random
import time
from typing import Callable

from ..catalog import Catalog, create_default_catalog, validate_catalog
from ..config import DEFAULT_SETTINGS, EngineSettings
from ..engine_core import queries
from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.reducer import Reducer
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import GameState, TreeType, Upgrade
from ..engine_core.tilling import required_tilling, has_tilled_plots

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], None]

# Routine actions logged at debug level only
_QUIET_ACTIONS = {
    ActionType.TILL_BOX,
    ActionType.AUTO_TILL_TICK,
    ActionType.INCREMENT_CLICKS,
    ActionType.CLEAR_MATURED_MARK,
}


def _achievement_inputs(state: GameState) -> tuple:
    """The fields whose change triggers achievement re-evaluation."""
    return (
        state.oxygen,
        state.planted_trees,
        state.total_clicks,
        state.total_oxygen_generated,
    )


class GroveEngine:
    """
    A running tree farm.

    Time is engine time in milliseconds, owned by the scheduler. Tests and
    headless runs move it with advance(); wall-clock sessions call
    catch_up() and let the time source decide how far to go.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        settings: EngineSettings | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        time_source: Callable[[], float] | None = None,
        start_ms: int = 0,
    ):
        self.catalog = catalog or create_default_catalog()
        validate_catalog(self.catalog, raise_on_error=True)

        self.settings = settings or DEFAULT_SETTINGS
        self.reducer = Reducer(catalog=self.catalog, settings=self.settings)
        self.scheduler = Scheduler(start_ms=start_ms)
        self.rng = rng or random.Random(seed)

        self._state = GameState.create(
            upgrades=self.catalog.upgrades,
            achievements=self.catalog.achievements,
            starting_oxygen=self.settings.starting_oxygen,
        )
        self._listeners: list[StateListener] = []

        # Wall-clock anchoring for catch_up()
        self._time_source = time_source or time.monotonic
        self._wall_origin = self._time_source()
        self._engine_origin = start_ms

        self._register_ticks()

    # =========================================================================
    # Snapshot access
    # =========================================================================

    @property
    def state(self) -> GameState:
        """The current snapshot. Never mutated after it is published."""
        return self._state

    @property
    def now(self) -> int:
        return self.scheduler.now

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call `listener(state)` with every new snapshot.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """
        Apply one action at the current engine time.

        On success the new snapshot is published, follow-ups are
        scheduled and achievements are re-evaluated if their inputs moved.
        """
        action.timestamp = self.now
        before = self._state
        result = self.reducer.apply(before, action)

        if not result.success:
            logger.debug(
                "%s rejected: %s (%s)",
                action.action_type.value, result.error, result.error_code,
            )
            return result

        level = logging.DEBUG if action.action_type in _QUIET_ACTIONS else logging.INFO
        for change in result.state_changes:
            logger.log(level, change)

        self._publish(result.new_state)

        for follow_up in result.follow_ups:
            self.scheduler.after(
                follow_up.delay_ms,
                lambda now, queued=follow_up.action: self.dispatch(queued),
                name=follow_up.action.action_type.value,
            )

        if _achievement_inputs(before) != _achievement_inputs(self._state):
            self._evaluate_achievements()

        return result

    def _publish(self, new_state: GameState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def _evaluate_achievements(self) -> None:
        """Unlock achievements until nothing new qualifies; rewards can chain."""
        while True:
            result = self.reducer.apply(self._state, Action.evaluate_achievements(self.now))
            if not result.success:
                logger.error("Achievement evaluation failed: %s", result.error)
                return
            if result.new_state is self._state:
                return
            for change in result.state_changes:
                logger.info(change)
            self._publish(result.new_state)

    # =========================================================================
    # Operations
    # =========================================================================

    def till_box(self, position: int) -> bool:
        """Till a plot by the current tilling power. True if it advanced."""
        return self.dispatch(Action.till_box(position)).success

    def plant_tree(self, tree_type: TreeType | str, position: int) -> bool:
        """Plant on a fully tilled, empty plot. True if planted."""
        try:
            tree_type = TreeType(tree_type)
        except ValueError:
            logger.warning("Unknown tree type %r", tree_type)
            return False
        return self.dispatch(Action.plant_tree(tree_type, position)).success

    def remove_tree(self, tree_id: str) -> None:
        self.dispatch(Action.remove_tree(tree_id))

    def increment_clicks(self) -> None:
        self.dispatch(Action.increment_clicks())

    def mature_all_trees(self) -> None:
        self.dispatch(Action.mature_all_trees())

    def add_oxygen(self, amount: float) -> None:
        result = self.dispatch(Action.add_oxygen(amount))
        if not result.success:
            logger.warning("Ignored oxygen credit: %s", result.error)

    def spend_oxygen(self, amount: float) -> bool:
        """Spend oxygen. Returns False and changes nothing if it would go negative."""
        return self.dispatch(Action.spend_oxygen(amount)).success

    def refund_oxygen(self, amount: float) -> None:
        """Return a spent price, e.g. after a purchase could not complete."""
        result = self.dispatch(Action.refund_oxygen(amount))
        if not result.success:
            logger.warning("Ignored oxygen refund: %s", result.error)

    def add_click_power_boost(self, multiplier: float) -> None:
        result = self.dispatch(Action.add_click_power_boost(multiplier))
        if not result.success:
            logger.warning("Ignored click power boost: %s", result.error)

    def purchase_upgrade(self, upgrade: Upgrade | str, position: int | None = None) -> bool:
        """Buy one copy of an upgrade, binding automation to `position` if given."""
        upgrade_id = upgrade.id if isinstance(upgrade, Upgrade) else upgrade
        return self.dispatch(Action.purchase_upgrade(upgrade_id, position)).success

    # =========================================================================
    # Queries
    # =========================================================================

    def required_tilling(self, position: int) -> int:
        return required_tilling(position, self.settings)

    def has_tilled_plots(self) -> bool:
        return has_tilled_plots(self._state, self.settings)

    def total_multiplier(self) -> float:
        return queries.total_multiplier(self._state, self.catalog)

    def auto_generation(self) -> float:
        return queries.auto_generation(self._state, self.catalog)

    def growth_progress(self, tree_id: str) -> float:
        return queries.growth_progress(self._state, self.catalog, tree_id, self.now)

    # =========================================================================
    # Time
    # =========================================================================

    def advance(self, ms: int) -> int:
        """Run the simulation forward by `ms` engine milliseconds."""
        return self.scheduler.advance(ms)

    def advance_to(self, target_ms: int) -> int:
        return self.scheduler.advance_to(target_ms)

    def catch_up(self) -> int:
        """Advance engine time to match the wall clock since construction."""
        elapsed_ms = int((self._time_source() - self._wall_origin) * 1000)
        target = self._engine_origin + elapsed_ms
        if target <= self.now:
            return 0
        return self.scheduler.advance_to(target)

    def _register_ticks(self) -> None:
        settings = self.settings
        self.scheduler.every(settings.auto_till_interval_ms, self._auto_till_tick, name="auto_till")
        self.scheduler.every(settings.production_interval_ms, self._production_tick, name="production")
        self.scheduler.every(settings.special_event_interval_ms, self._special_event_tick, name="special_event")

    def _auto_till_tick(self, now: int) -> None:
        self.dispatch(Action.auto_till_tick())

    def _production_tick(self, now: int) -> None:
        self.dispatch(Action.production_tick())

    def _special_event_tick(self, now: int) -> None:
        """Roll for a special event. Never stacks on a running one."""
        if self._state.special_event_active:
            logger.debug("Special event already active at %d ms, skipping roll", now)
            return
        if self.rng.random() < self.settings.special_event_chance:
            multiplier = self.rng.choice(self.settings.special_event_multipliers)
            self.dispatch(Action.start_special_event(multiplier))
