"""
Shop Flow - What happens when the player buys something.

The shopkeeper and workshop dialogs are presentation; the purchase
rules they follow live here so every front end behaves the same:
- Items unlock once the highest oxygen ever held reaches their threshold
- Seeds need a tilled plot; the price is reserved up front and
  refunded if planting fails
- Powerups apply a timed click power boost
- The growth crystal matures every planted tree

Unlock thresholds are advisory: the engine itself only enforces price.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from ..catalog import GROWTH_CRYSTAL, ShopItem, ShopItemKind
from ..engine_core.action import Action
from ..engine_core.state import Upgrade

if TYPE_CHECKING:
    from .engine import GroveEngine

logger = logging.getLogger(__name__)


@dataclass
class ShopResult:
    """Outcome of a purchase attempt."""
    success: bool
    item_id: str
    reason: str | None = None
    refunded: bool = False

    @classmethod
    def failure(cls, item_id: str, reason: str, refunded: bool = False) -> ShopResult:
        return cls(success=False, item_id=item_id, reason=reason, refunded=refunded)


class ShopFlow:
    """Purchase rules for the shop and the workshop, on top of an engine."""

    def __init__(self, engine: GroveEngine):
        self.engine = engine

    def is_unlocked(self, threshold: int) -> bool:
        return self.engine.state.highest_oxygen_reached >= threshold

    def available_items(self) -> list[ShopItem]:
        """Shop items the player has unlocked."""
        return [
            item for item in self.engine.catalog.shop_items
            if self.is_unlocked(item.unlock_threshold)
        ]

    def available_upgrades(self) -> list[Upgrade]:
        """Workshop upgrades the player has unlocked, with owned counts."""
        return [
            upgrade for upgrade in self.engine.state.upgrades.values()
            if self.is_unlocked(upgrade.unlock_threshold)
        ]

    def purchase(self, item_id: str, position: int | None = None) -> ShopResult:
        """
        Buy a shop item.

        Seeds are planted at `position`. If planting fails after the
        price was spent, the price is credited back.
        """
        item = self.engine.catalog.get_shop_item(item_id)
        if item is None:
            return ShopResult.failure(item_id, f"Unknown shop item: {item_id}")

        if not self.is_unlocked(item.unlock_threshold):
            return ShopResult.failure(item_id, f"Unlocks at {item.unlock_threshold} oxygen")

        if item.kind == ShopItemKind.SEED:
            return self._purchase_seed(item, position)

        if not self.engine.spend_oxygen(item.price):
            return ShopResult.failure(item_id, f"Costs {item.price} oxygen")

        if item.kind == ShopItemKind.POWERUP:
            self.engine.add_click_power_boost(item.multiplier)
        elif item.kind == ShopItemKind.SPECIAL and item.id == GROWTH_CRYSTAL:
            self.engine.mature_all_trees()

        logger.info("Bought %s for %d oxygen", item.name, item.price)
        return ShopResult(success=True, item_id=item_id)

    def _purchase_seed(self, item: ShopItem, position: int | None) -> ShopResult:
        if not self.engine.has_tilled_plots():
            return ShopResult.failure(item.id, "No tilled plots available, till some land first")
        if position is None:
            return ShopResult.failure(item.id, "Choose a tilled plot to plant on")

        if not self.engine.spend_oxygen(item.price):
            return ShopResult.failure(item.id, f"Costs {item.price} oxygen")

        if not self.engine.plant_tree(item.tree_type, position):
            self.engine.refund_oxygen(item.price)
            logger.info("Could not plant %s at %d, refunded %d oxygen", item.name, position, item.price)
            return ShopResult.failure(item.id, f"Position {position} is not ready for planting", refunded=True)

        logger.info("Planted %s at position %d", item.name, position)
        return ShopResult(success=True, item_id=item.id)

    def buy_upgrade(self, upgrade_id: str, position: int | None = None) -> ShopResult:
        """Buy a workshop upgrade once it is unlocked."""
        upgrade = self.engine.state.upgrades.get(upgrade_id)
        if upgrade is None:
            return ShopResult.failure(upgrade_id, f"Unknown upgrade: {upgrade_id}")
        if not self.is_unlocked(upgrade.unlock_threshold):
            return ShopResult.failure(upgrade_id, f"Unlocks at {upgrade.unlock_threshold} oxygen")
        result = self.engine.dispatch(Action.purchase_upgrade(upgrade_id, position))
        if not result.success:
            return ShopResult.failure(upgrade_id, result.error)
        return ShopResult(success=True, item_id=upgrade_id)
