"""
Derived read-only values for presentation.

Nothing here is stored on the state; each value is summed over the
matured trees of a snapshot on demand.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import GameState
    from ..catalog import Catalog


def auto_generation(state: GameState, catalog: Catalog) -> float:
    """Oxygen produced per production tick by matured trees."""
    return sum(
        catalog.get_tree(tree.type).base_production
        for tree in state.matured_trees
    )


def tree_multiplier(state: GameState, catalog: Catalog) -> float:
    """Sum of the multiplier bonuses of matured trees."""
    return sum(
        catalog.get_tree(tree.type).base_multiplier
        for tree in state.matured_trees
    )


def total_multiplier(state: GameState, catalog: Catalog) -> float:
    """The global display multiplier: trees, special event and click power combined."""
    return (
        (1 + tree_multiplier(state, catalog))
        * state.special_event_multiplier
        * state.click_power
    )


def growth_progress(state: GameState, catalog: Catalog, tree_id: str, now: int) -> float:
    """Fraction in [0, 1] of a tree's growth time that has elapsed."""
    tree = state.get_tree(tree_id)
    if tree is None:
        return 0.0
    if tree.is_mature:
        return 1.0
    growth_time = catalog.get_tree(tree.type).growth_time_ms
    return min(1.0, max(0, now - tree.planted_at) / growth_time)
