"""
Tests for self-expiring effects: click power boosts and special events.
"""

import pytest

from ..engine_core.action import Action, ActionType
from ..session import GroveEngine
from .conftest import StubRandom


class TestClickPowerBoost:
    """Tests for the click power boost and its reversal."""

    def test_boost_schedules_exact_reversal(self, reducer, fresh_state, settings):
        result = reducer.apply(fresh_state, Action.add_click_power_boost(2))

        assert result.new_state.click_power == 2
        follow_up = result.follow_ups[0]
        assert follow_up.delay_ms == settings.click_boost_duration_ms
        assert follow_up.action.action_type == ActionType.REVERT_CLICK_POWER_BOOST
        assert follow_up.action.payload.multiplier == 2

    @pytest.mark.parametrize("multiplier", [0, -2, None])
    def test_non_positive_boost_rejected(self, reducer, fresh_state, multiplier):
        result = reducer.apply(fresh_state, Action.add_click_power_boost(multiplier))

        assert not result.success
        assert result.error_code == "INVALID_AMOUNT"

    def test_boost_reverts_after_delay(self, engine):
        """x2 now, back to 1 after 300000 ms even with other changes in between."""
        engine.add_click_power_boost(2)
        assert engine.state.click_power == 2

        engine.advance(100000)
        engine.till_box(0)
        engine.add_oxygen(50)
        engine.advance(199999)
        assert engine.state.click_power == 2

        engine.advance(1)
        assert engine.state.click_power == 1

    def test_overlapping_boosts_divide_out_own_factor(self, engine):
        engine.add_click_power_boost(2)
        engine.advance(100000)
        engine.add_click_power_boost(3)
        assert engine.state.click_power == 6

        engine.advance(200000)
        assert engine.state.click_power == 3

        engine.advance(100000)
        assert engine.state.click_power == pytest.approx(1.0)

    def test_invalid_boost_ignored_by_engine(self, engine):
        engine.add_click_power_boost(0)

        assert engine.state.click_power == 1
        assert engine.scheduler.pending(ActionType.REVERT_CLICK_POWER_BOOST.value) == []


class TestSpecialEventReducer:
    """Tests for starting and ending special events."""

    def test_start_event(self, reducer, fresh_state, settings):
        result = reducer.apply(fresh_state, Action.start_special_event(3))

        assert result.new_state.special_event_active
        assert result.new_state.special_event_multiplier == 3
        assert result.follow_ups[0].delay_ms == settings.special_event_duration_ms
        assert result.follow_ups[0].action.action_type == ActionType.END_SPECIAL_EVENT

    def test_events_never_stack(self, reducer, fresh_state):
        active = reducer.apply(fresh_state, Action.start_special_event(3)).new_state

        result = reducer.apply(active, Action.start_special_event(4))

        assert not result.success
        assert result.error_code == "EVENT_ACTIVE"

    def test_end_event_resets_multiplier(self, reducer, fresh_state):
        active = reducer.apply(fresh_state, Action.start_special_event(4)).new_state

        ended = reducer.apply(active, Action.end_special_event()).new_state

        assert not ended.special_event_active
        assert ended.special_event_multiplier == 1


class TestSpecialEventTick:
    """Tests for the periodic special event roll."""

    def test_no_event_when_roll_misses(self, bare_catalog):
        rng = StubRandom(rolls=[0.5])
        engine = GroveEngine(catalog=bare_catalog, rng=rng)

        engine.advance(60000)

        assert not engine.state.special_event_active
        assert rng.choices_seen == []

    def test_event_fires_and_expires(self, bare_catalog):
        rng = StubRandom(rolls=[0.05], choice=4)
        engine = GroveEngine(catalog=bare_catalog, rng=rng)

        engine.advance(60000)
        assert engine.state.special_event_active
        assert engine.state.special_event_multiplier == 4
        assert rng.choices_seen == [(2, 3, 4)]

        engine.advance(29999)
        assert engine.state.special_event_active

        engine.advance(1)
        assert not engine.state.special_event_active
        assert engine.state.special_event_multiplier == 1

    def test_roll_skipped_while_active(self, bare_catalog, settings):
        """A long event stays single; the overlapping tick does not roll."""
        long_events = settings.model_copy(update={"special_event_duration_ms": 90000})
        rng = StubRandom(rolls=[0.0, 0.0], choice=2)
        engine = GroveEngine(catalog=bare_catalog, settings=long_events, rng=rng)

        engine.advance(120000)

        assert engine.state.special_event_active
        assert rng.rolls == [0.0]
        assert len(rng.choices_seen) == 1

    def test_seeded_engines_agree(self, bare_catalog):
        """Two engines with the same seed roll the same events."""
        first = GroveEngine(catalog=bare_catalog, seed=7)
        second = GroveEngine(catalog=bare_catalog, seed=7)
        history = ([], [])

        for _ in range(30):
            first.advance(60000)
            second.advance(60000)
            history[0].append(first.state.special_event_multiplier)
            history[1].append(second.state.special_event_multiplier)

        assert history[0] == history[1]
