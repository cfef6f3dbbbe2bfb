"""
Game State - The canonical tree farm snapshot.

Design principles:
- Immutable-friendly: all mutations return new state
- Copy-on-write containers: an older snapshot is never touched
- Derived values (tilling power) are recomputed, never set directly
- Catalog data (species, prices, predicates) is referenced, not owned
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable


class TreeType(Enum):
    """Tree species that can be planted."""
    OAK = "oak"
    PINE = "pine"
    WILLOW = "willow"


class UpgradeType(Enum):
    """What an upgrade's power applies to."""
    TOOL = "tool"  # Adds to tilling power
    AUTOMATION = "automation"  # Drives an auto-tiller bound to a position
    POWERUP = "powerup"
    SPECIAL = "special"


@dataclass(frozen=True)
class PlantedTree:
    """
    A tree living on the board.

    matured_at stays None while the tree is growing and is set exactly once.
    """
    id: str
    type: TreeType
    planted_at: int  # ms, engine clock
    position: int
    matured_at: int | None = None

    @property
    def is_mature(self) -> bool:
        return self.matured_at is not None

    def mature(self, now: int) -> PlantedTree:
        """Return the matured tree. Already matured trees are returned as-is."""
        if self.matured_at is not None:
            return self
        return PlantedTree(
            id=self.id,
            type=self.type,
            planted_at=self.planted_at,
            position=self.position,
            matured_at=now,
        )


@dataclass(frozen=True)
class Upgrade:
    """
    A workshop upgrade with its owned count.

    The id, type, price and power come from the catalog; only
    `owned` changes during play.
    """
    id: str
    name: str
    type: UpgradeType
    price: int
    power: float
    description: str = ""
    unlock_threshold: int = 0
    owned: int = 0

    def with_owned(self, owned: int) -> Upgrade:
        return Upgrade(
            id=self.id,
            name=self.name,
            type=self.type,
            price=self.price,
            power=self.power,
            description=self.description,
            unlock_threshold=self.unlock_threshold,
            owned=owned,
        )


@dataclass(frozen=True)
class Achievement:
    """
    A one-time goal with an oxygen reward.

    `condition` is a pure predicate over GameState. `unlocked` flips
    from False to True once and never reverts.
    """
    id: str
    title: str
    reward: int
    condition: Callable[[GameState], bool]
    description: str = ""
    unlocked: bool = False

    def unlock(self) -> Achievement:
        return Achievement(
            id=self.id,
            title=self.title,
            reward=self.reward,
            condition=self.condition,
            description=self.description,
            unlocked=True,
        )


def compute_tilling_power(upgrades: dict[str, Upgrade]) -> float:
    """Base power 1 plus owned * power over every tool upgrade."""
    power = 1
    for upgrade in upgrades.values():
        if upgrade.type == UpgradeType.TOOL:
            power += upgrade.owned * upgrade.power
    return power


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    # Resources
    oxygen: float = 1
    total_oxygen_generated: float = 0
    highest_oxygen_reached: int = 1

    # Multipliers
    click_power: float = 1
    tilling_power: float = 1

    # Board
    tilled_boxes: dict[int, float] = field(default_factory=dict)  # position -> progress
    planted_trees: list[PlantedTree] = field(default_factory=list)
    recently_matured_trees: dict[str, int] = field(default_factory=dict)  # tree id -> matured at
    auto_tillers: dict[int, str] = field(default_factory=dict)  # position -> upgrade id

    # Workshop and goals
    upgrades: dict[str, Upgrade] = field(default_factory=dict)
    achievements: list[Achievement] = field(default_factory=list)

    # Special event
    special_event_active: bool = False
    special_event_multiplier: float = 1

    total_clicks: int = 0

    @classmethod
    def create(
        cls,
        upgrades: Iterable[Upgrade] = (),
        achievements: Iterable[Achievement] = (),
        starting_oxygen: int = 1,
    ) -> GameState:
        """
        Factory for a fresh game.

        Upgrades are seeded at owned=0 and tilling power is derived
        from that seed.
        """
        seeded = {u.id: u.with_owned(0) for u in upgrades}
        return cls(
            oxygen=starting_oxygen,
            highest_oxygen_reached=starting_oxygen,
            tilling_power=compute_tilling_power(seeded),
            upgrades=seeded,
            achievements=list(achievements),
        )

    def tilling_progress(self, position: int) -> float:
        """Progress at a position; an absent key means untouched ground."""
        return self.tilled_boxes.get(position, 0)

    def tree_at(self, position: int) -> PlantedTree | None:
        for tree in self.planted_trees:
            if tree.position == position:
                return tree
        return None

    def get_tree(self, tree_id: str) -> PlantedTree | None:
        for tree in self.planted_trees:
            if tree.id == tree_id:
                return tree
        return None

    @property
    def matured_trees(self) -> list[PlantedTree]:
        return [t for t in self.planted_trees if t.is_mature]

    @property
    def unlocked_achievements(self) -> list[Achievement]:
        return [a for a in self.achievements if a.unlocked]

    def with_tilling(self, position: int, progress: float) -> GameState:
        """Return new state with one position's progress replaced."""
        new_boxes = self.tilled_boxes.copy()
        new_boxes[position] = progress
        return self._copy_with(tilled_boxes=new_boxes)

    def with_trees(self, trees: list[PlantedTree]) -> GameState:
        """Return new state with a replaced tree list."""
        return self._copy_with(planted_trees=list(trees))

    def with_upgrade(self, upgrade: Upgrade) -> GameState:
        """
        Return new state with an updated upgrade.

        Tilling power is recomputed from the full upgrade set.
        """
        new_upgrades = self.upgrades.copy()
        new_upgrades[upgrade.id] = upgrade
        return self._copy_with(
            upgrades=new_upgrades,
            tilling_power=compute_tilling_power(new_upgrades),
        )

    def with_oxygen_credit(self, amount: float) -> GameState:
        """
        Return new state with oxygen credited.

        Oxygen is floored to an integer, lifetime oxygen grows by the
        raw amount and the running maximum is kept.
        """
        new_oxygen = math.floor(self.oxygen + amount)
        return self._copy_with(
            oxygen=new_oxygen,
            total_oxygen_generated=self.total_oxygen_generated + amount,
            highest_oxygen_reached=max(self.highest_oxygen_reached, new_oxygen),
        )

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            oxygen=kwargs.get("oxygen", self.oxygen),
            total_oxygen_generated=kwargs.get("total_oxygen_generated", self.total_oxygen_generated),
            highest_oxygen_reached=kwargs.get("highest_oxygen_reached", self.highest_oxygen_reached),
            click_power=kwargs.get("click_power", self.click_power),
            tilling_power=kwargs.get("tilling_power", self.tilling_power),
            tilled_boxes=kwargs.get("tilled_boxes", self.tilled_boxes),
            planted_trees=kwargs.get("planted_trees", self.planted_trees),
            recently_matured_trees=kwargs.get("recently_matured_trees", self.recently_matured_trees),
            auto_tillers=kwargs.get("auto_tillers", self.auto_tillers),
            upgrades=kwargs.get("upgrades", self.upgrades),
            achievements=kwargs.get("achievements", self.achievements),
            special_event_active=kwargs.get("special_event_active", self.special_event_active),
            special_event_multiplier=kwargs.get("special_event_multiplier", self.special_event_multiplier),
            total_clicks=kwargs.get("total_clicks", self.total_clicks),
        )
