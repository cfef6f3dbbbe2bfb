"""
Pytest fixtures for Oxygrove tests.
"""

import pytest

from ..catalog import Catalog, create_default_catalog
from ..config import EngineSettings
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState
from ..session import GroveEngine, ShopFlow


class StubRandom:
    """Deterministic stand-in for random.Random in special event tests."""

    def __init__(self, rolls=(), choice=2):
        self.rolls = list(rolls)
        self.choice_value = choice
        self.choices_seen = []

    def random(self):
        return self.rolls.pop(0) if self.rolls else 1.0

    def choice(self, seq):
        self.choices_seen.append(tuple(seq))
        return self.choice_value


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def catalog() -> Catalog:
    """The built-in catalog, achievements included."""
    return create_default_catalog()


@pytest.fixture
def bare_catalog(catalog: Catalog) -> Catalog:
    """Default content without achievements, so rewards never muddy oxygen counts."""
    return Catalog(
        trees=catalog.trees,
        upgrades=catalog.upgrades,
        achievements=(),
        shop_items=catalog.shop_items,
    )


@pytest.fixture
def fresh_state(bare_catalog: Catalog) -> GameState:
    """A new game: one oxygen, nothing tilled, upgrades at zero."""
    return GameState.create(upgrades=bare_catalog.upgrades, achievements=bare_catalog.achievements)


@pytest.fixture
def tilled_state(fresh_state: GameState) -> GameState:
    """Positions 0 (needs 30) and 1 (needs 45) fully tilled."""
    return fresh_state.with_tilling(0, 30).with_tilling(1, 45)


@pytest.fixture
def reducer(bare_catalog: Catalog) -> Reducer:
    return Reducer(catalog=bare_catalog)


@pytest.fixture
def engine(bare_catalog: Catalog) -> GroveEngine:
    """An engine whose special event roll never fires."""
    return GroveEngine(catalog=bare_catalog, rng=StubRandom())


@pytest.fixture
def full_engine(catalog: Catalog) -> GroveEngine:
    """An engine with the built-in achievements."""
    return GroveEngine(catalog=catalog, rng=StubRandom())


@pytest.fixture
def shop(engine: GroveEngine) -> ShopFlow:
    return ShopFlow(engine)


def till_fully(engine: GroveEngine, position: int) -> int:
    """Till a position to its requirement. Returns the number of successful tills."""
    count = 0
    while engine.till_box(position):
        engine.increment_clicks()
        count += 1
    return count
