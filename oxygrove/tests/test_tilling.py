"""
Tests for plot tilling rules.

Tests:
- Requirement curve and cap
- Clamped advancement
- Tilled-plot detection
"""

import pytest

from ..config import EngineSettings
from ..engine_core.tilling import (
    required_tilling,
    advance_tilling,
    is_tilled,
    has_tilled_plots,
)


class TestRequiredTilling:
    """Tests for the exponential requirement curve."""

    def test_known_values(self):
        """floor(30 * 1.5 ** position) for the first plots."""
        assert required_tilling(0) == 30
        assert required_tilling(1) == 45
        assert required_tilling(2) == 67
        assert required_tilling(3) == 101
        assert required_tilling(14) == 8757

    def test_capped_at_ten_thousand(self):
        """Late positions hit the cap."""
        assert required_tilling(15) == 10000
        assert required_tilling(40) == 10000

    def test_huge_position_does_not_overflow(self):
        """Positions far past float range still return the cap."""
        assert required_tilling(5000) == 10000

    def test_non_decreasing(self):
        """Each position needs at least as much as the one before."""
        values = [required_tilling(p) for p in range(60)]
        assert values == sorted(values)
        assert max(values) == 10000

    def test_negative_position_rejected(self):
        with pytest.raises(ValueError):
            required_tilling(-1)

    def test_custom_settings(self):
        """Curve parameters come from settings."""
        settings = EngineSettings(tilling_base=10, tilling_growth=2.0, tilling_cap=100)
        assert required_tilling(0, settings) == 10
        assert required_tilling(3, settings) == 80
        assert required_tilling(4, settings) == 100


class TestAdvanceTilling:
    """Tests for clamped advancement."""

    def test_adds_power(self):
        assert advance_tilling(10, 3, 30) == 13

    def test_clamped_to_requirement(self):
        assert advance_tilling(28, 5, 30) == 30

    def test_floors_fractional_power(self):
        assert advance_tilling(10, 2.7, 30) == 12


class TestTilledPlots:
    """Tests for tilled-plot queries."""

    def test_fresh_state_has_none(self, fresh_state):
        assert not has_tilled_plots(fresh_state)

    def test_partial_progress_is_not_tilled(self, fresh_state):
        state = fresh_state.with_tilling(0, 29)
        assert not is_tilled(state, 0)
        assert not has_tilled_plots(state)

    def test_complete_plot_detected(self, fresh_state):
        state = fresh_state.with_tilling(0, 5).with_tilling(1, 45)
        assert is_tilled(state, 1)
        assert has_tilled_plots(state)
