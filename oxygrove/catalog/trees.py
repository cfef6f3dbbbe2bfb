"""
Tree Species - Growth and production figures per species.

Growth times are in milliseconds of engine time. Production is oxygen
per production tick once mature; the multiplier is the bonus a mature
tree adds to the display multiplier.
"""

from dataclasses import dataclass

from ..engine_core.state import TreeType


@dataclass(frozen=True)
class TreeSpec:
    """Immutable catalog entry for one species."""
    type: TreeType
    title: str
    growth_time_ms: int
    base_production: float
    base_multiplier: float
    description: str = ""


TREES: dict[TreeType, TreeSpec] = {
    TreeType.OAK: TreeSpec(
        type=TreeType.OAK,
        title="Mighty Oak",
        growth_time_ms=60000,
        base_production=1,
        base_multiplier=0.1,
        description="Slow and steady, the backbone of any grove.",
    ),
    TreeType.PINE: TreeSpec(
        type=TreeType.PINE,
        title="Whispering Pine",
        growth_time_ms=120000,
        base_production=3,
        base_multiplier=0.25,
        description="Evergreen needles that breathe all year round.",
    ),
    TreeType.WILLOW: TreeSpec(
        type=TreeType.WILLOW,
        title="Ancient Willow",
        growth_time_ms=300000,
        base_production=10,
        base_multiplier=0.5,
        description="Takes its time, then fills the air.",
    ),
}
