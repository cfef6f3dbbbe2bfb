"""
Tests for the shop and workshop purchase flow.
"""

from ..engine_core.state import TreeType
from .conftest import till_fully


class TestUnlocks:
    """Tests for the highest-oxygen unlock gate."""

    def test_fresh_game_sees_only_oak_seed(self, shop):
        assert [i.id for i in shop.available_items()] == ["oak-seed"]
        assert shop.available_upgrades() == []

    def test_unlocks_follow_highest_oxygen(self, engine, shop):
        engine.add_oxygen(99)
        engine.spend_oxygen(90)

        items = {i.id for i in shop.available_items()}
        upgrades = {u.id for u in shop.available_upgrades()}
        assert {"oak-seed", "pine-seed", "gust-charm"} <= items
        assert "willow-seed" not in items
        assert upgrades == {"wooden-hoe", "iron-hoe", "sprout-golem"}

    def test_locked_item_refused(self, engine, shop):
        result = shop.purchase("pine-seed", 0)

        assert not result.success
        assert "Unlocks at 50" in result.reason

    def test_unknown_item(self, shop):
        result = shop.purchase("magic-bean")

        assert not result.success
        assert "Unknown shop item" in result.reason


class TestSeeds:
    """Tests for buying and planting seeds."""

    def test_seed_needs_tilled_land(self, engine, shop):
        engine.add_oxygen(20)

        result = shop.purchase("oak-seed", 0)

        assert not result.success
        assert "till some land first" in result.reason
        assert engine.state.oxygen == 21

    def test_seed_needs_position(self, engine, shop):
        till_fully(engine, 0)
        engine.add_oxygen(20)

        result = shop.purchase("oak-seed")

        assert not result.success
        assert engine.state.oxygen == 21

    def test_seed_planted(self, engine, shop):
        till_fully(engine, 0)
        engine.add_oxygen(9)

        result = shop.purchase("oak-seed", 0)

        assert result.success
        assert engine.state.oxygen == 0
        tree = engine.state.tree_at(0)
        assert tree.type == TreeType.OAK

    def test_seed_unaffordable(self, engine, shop):
        till_fully(engine, 0)

        result = shop.purchase("oak-seed", 0)

        assert not result.success
        assert "Costs 10" in result.reason
        assert not result.refunded

    def test_failed_planting_refunds_price(self, engine, shop):
        till_fully(engine, 0)
        engine.add_oxygen(19)

        result = shop.purchase("oak-seed", 5)

        assert not result.success
        assert result.refunded
        assert engine.state.oxygen == 20
        assert engine.state.planted_trees == []
        assert engine.state.total_oxygen_generated == 19


class TestPowerupsAndSpecials:
    def test_powerup_boosts_click_power(self, engine, shop):
        engine.add_oxygen(199)

        result = shop.purchase("gust-charm")

        assert result.success
        assert engine.state.oxygen == 100
        assert engine.state.click_power == 2

        engine.advance(300000)
        assert engine.state.click_power == 1

    def test_growth_crystal_matures_everything(self, engine, shop):
        till_fully(engine, 0)
        engine.plant_tree("willow", 0)
        engine.add_oxygen(399)

        result = shop.purchase("growth-crystal")

        assert result.success
        assert engine.state.oxygen == 100
        assert all(t.is_mature for t in engine.state.planted_trees)

    def test_unaffordable_powerup(self, engine, shop):
        engine.add_oxygen(199)
        engine.spend_oxygen(150)

        result = shop.purchase("gust-charm")

        assert not result.success
        assert engine.state.click_power == 1


class TestWorkshop:
    """Tests for buying upgrades through the shop flow."""

    def test_locked_upgrade_refused(self, shop):
        result = shop.buy_upgrade("wooden-hoe")

        assert not result.success
        assert "Unlocks at 10" in result.reason

    def test_unaffordable_reports_price(self, engine, shop):
        engine.add_oxygen(9)

        result = shop.buy_upgrade("wooden-hoe")

        assert not result.success
        assert "costs 25" in result.reason

    def test_automation_bound_to_position(self, engine, shop):
        engine.add_oxygen(99)

        result = shop.buy_upgrade("sprout-golem", 3)

        assert result.success
        assert engine.state.auto_tillers == {3: "sprout-golem"}

    def test_unknown_upgrade(self, shop):
        result = shop.buy_upgrade("golden-spoon")

        assert not result.success
