"""
Catalog - Immutable game content.

Loaded once at startup and never mutated by the engine:
- Tree species (growth time, production, multiplier, title)
- Workshop upgrades (type, price, power)
- Achievements (predicate, reward)
- Shop items (seeds, powerups, specials)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.state import Achievement, TreeType, Upgrade
from .trees import TREES, TreeSpec
from .upgrades import UPGRADES
from .achievements import ACHIEVEMENTS
from .shop import SHOP_ITEMS, GROWTH_CRYSTAL, ShopItem, ShopItemKind


@dataclass(frozen=True)
class Catalog:
    """All content the engine reads but never writes."""
    trees: dict[TreeType, TreeSpec] = field(default_factory=dict)
    upgrades: tuple[Upgrade, ...] = ()
    achievements: tuple[Achievement, ...] = ()
    shop_items: tuple[ShopItem, ...] = ()

    def get_tree(self, tree_type: TreeType) -> TreeSpec:
        """Species entry; raises KeyError for an unknown type."""
        return self.trees[tree_type]

    def has_tree(self, tree_type: object) -> bool:
        return tree_type in self.trees

    def get_upgrade(self, upgrade_id: str) -> Upgrade | None:
        for upgrade in self.upgrades:
            if upgrade.id == upgrade_id:
                return upgrade
        return None

    def get_shop_item(self, item_id: str) -> ShopItem | None:
        for item in self.shop_items:
            if item.id == item_id:
                return item
        return None


def create_default_catalog() -> Catalog:
    """The built-in tree farm content."""
    return Catalog(
        trees=dict(TREES),
        upgrades=tuple(UPGRADES),
        achievements=tuple(ACHIEVEMENTS),
        shop_items=tuple(SHOP_ITEMS),
    )


from .validation import validate_catalog, CatalogValidationError, ValidationResult  # noqa: E402

__all__ = [
    "Catalog",
    "create_default_catalog",
    "TreeSpec",
    "ShopItem",
    "ShopItemKind",
    "GROWTH_CRYSTAL",
    "validate_catalog",
    "CatalogValidationError",
    "ValidationResult",
]
