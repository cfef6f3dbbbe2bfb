"""
Workshop Upgrades - Tools and automations.

Tool upgrades add their power to tilling power for every copy owned.
Automation upgrades are bound to a single board position and till it
by their power on every auto-till tick.
"""

from ..engine_core.state import Upgrade, UpgradeType


UPGRADES: list[Upgrade] = [
    # Tools
    Upgrade(
        id="wooden-hoe",
        name="Wooden Hoe",
        type=UpgradeType.TOOL,
        price=25,
        power=1,
        description="+1 tilling power per click.",
        unlock_threshold=10,
    ),
    Upgrade(
        id="iron-hoe",
        name="Iron Hoe",
        type=UpgradeType.TOOL,
        price=150,
        power=3,
        description="+3 tilling power per click.",
        unlock_threshold=100,
    ),
    Upgrade(
        id="enchanted-plough",
        name="Enchanted Plough",
        type=UpgradeType.TOOL,
        price=1000,
        power=10,
        description="+10 tilling power per click.",
        unlock_threshold=750,
    ),
    # Automation
    Upgrade(
        id="sprout-golem",
        name="Sprout Golem",
        type=UpgradeType.AUTOMATION,
        price=100,
        power=1,
        description="Tills one plot by 1 every second.",
        unlock_threshold=50,
    ),
    Upgrade(
        id="root-engine",
        name="Root Engine",
        type=UpgradeType.AUTOMATION,
        price=750,
        power=5,
        description="Tills one plot by 5 every second.",
        unlock_threshold=500,
    ),
]
