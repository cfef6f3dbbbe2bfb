"""
Shop Items - Seeds, powerups and specials sold by the shopkeeper.

Items are locked until the player's highest oxygen reaches their
unlock threshold.
"""

from dataclasses import dataclass
from enum import Enum

from ..engine_core.state import TreeType


class ShopItemKind(Enum):
    SEED = "seed"  # Plants a tree
    POWERUP = "powerup"  # Temporary click power multiplier
    SPECIAL = "special"  # One-shot effect


@dataclass(frozen=True)
class ShopItem:
    id: str
    name: str
    kind: ShopItemKind
    price: int
    unlock_threshold: int = 0
    description: str = ""
    tree_type: TreeType | None = None
    multiplier: float | None = None


GROWTH_CRYSTAL = "growth-crystal"

SHOP_ITEMS: list[ShopItem] = [
    ShopItem(
        id="oak-seed",
        name="Oak Seed",
        kind=ShopItemKind.SEED,
        price=10,
        description="Grows into a Mighty Oak.",
        tree_type=TreeType.OAK,
    ),
    ShopItem(
        id="pine-seed",
        name="Pine Seed",
        kind=ShopItemKind.SEED,
        price=50,
        unlock_threshold=50,
        description="Grows into a Whispering Pine.",
        tree_type=TreeType.PINE,
    ),
    ShopItem(
        id="willow-seed",
        name="Willow Seed",
        kind=ShopItemKind.SEED,
        price=250,
        unlock_threshold=200,
        description="Grows into an Ancient Willow.",
        tree_type=TreeType.WILLOW,
    ),
    ShopItem(
        id="gust-charm",
        name="Gust Charm",
        kind=ShopItemKind.POWERUP,
        price=100,
        unlock_threshold=100,
        description="Doubles click power for five minutes.",
        multiplier=2,
    ),
    ShopItem(
        id="gale-totem",
        name="Gale Totem",
        kind=ShopItemKind.POWERUP,
        price=500,
        unlock_threshold=500,
        description="Triples click power for five minutes.",
        multiplier=3,
    ),
    ShopItem(
        id=GROWTH_CRYSTAL,
        name="Growth Crystal",
        kind=ShopItemKind.SPECIAL,
        price=300,
        unlock_threshold=250,
        description="Instantly matures every planted tree.",
    ),
]
