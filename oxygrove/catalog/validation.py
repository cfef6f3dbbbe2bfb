"""
Catalog Validation - Sanity checks for game content.

Validates that:
1. Ids are present and unique
2. Numbers are in range (positive growth times, non-negative prices)
3. References are valid (seeds name a known species)
4. Each shop item kind carries the fields it needs
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.state import UpgradeType
from .shop import ShopItemKind

if TYPE_CHECKING:
    from . import Catalog


class CatalogValidationError(Exception):
    """Raised when catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(catalog: Catalog, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a complete catalog.

    Returns ValidationResult with errors and warnings.
    Raises CatalogValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not catalog.trees:
        errors.append("catalog must define at least one tree species")

    for tree_type, spec in catalog.trees.items():
        if spec.type != tree_type:
            errors.append(f"Tree entry {tree_type.value} is keyed under the wrong type")
        if spec.growth_time_ms <= 0:
            errors.append(f"Tree {tree_type.value}: growth_time_ms must be > 0")
        if spec.base_production < 0:
            errors.append(f"Tree {tree_type.value}: base_production must be >= 0")
        if spec.base_multiplier < 0:
            errors.append(f"Tree {tree_type.value}: base_multiplier must be >= 0")

    _check_unique_ids("upgrade", [u.id for u in catalog.upgrades], errors)
    for upgrade in catalog.upgrades:
        if not upgrade.id:
            errors.append("Upgrade id is required")
        if upgrade.price < 0:
            errors.append(f"Upgrade {upgrade.id}: price must be >= 0")
        if upgrade.power < 0:
            errors.append(f"Upgrade {upgrade.id}: power must be >= 0")
        if upgrade.owned != 0:
            warnings.append(f"Upgrade {upgrade.id}: owned count is reset to 0 at game start")
        if upgrade.type not in (UpgradeType.TOOL, UpgradeType.AUTOMATION):
            warnings.append(f"Upgrade {upgrade.id}: type {upgrade.type.value} has no workshop effect")

    _check_unique_ids("achievement", [a.id for a in catalog.achievements], errors)
    for achievement in catalog.achievements:
        if achievement.reward < 0:
            errors.append(f"Achievement {achievement.id}: reward must be >= 0")
        if not callable(achievement.condition):
            errors.append(f"Achievement {achievement.id}: condition must be callable")
        if achievement.unlocked:
            errors.append(f"Achievement {achievement.id}: must start locked")

    _check_unique_ids("shop item", [i.id for i in catalog.shop_items], errors)
    for item in catalog.shop_items:
        if item.price < 0:
            errors.append(f"Shop item {item.id}: price must be >= 0")
        if item.kind == ShopItemKind.SEED:
            if item.tree_type is None:
                errors.append(f"Seed {item.id} has no tree_type")
            elif item.tree_type not in catalog.trees:
                errors.append(f"Seed {item.id} references unknown tree {item.tree_type.value}")
        elif item.kind == ShopItemKind.POWERUP:
            if not item.multiplier or item.multiplier <= 0:
                errors.append(f"Powerup {item.id} needs a positive multiplier")

    result = ValidationResult(valid=not errors, errors=errors, warnings=warnings)
    if errors and raise_on_error:
        raise CatalogValidationError(errors)
    return result


def _check_unique_ids(kind: str, ids: list[str], errors: list[str]) -> None:
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            errors.append(f"Duplicate {kind} id: {item_id}")
        seen.add(item_id)
