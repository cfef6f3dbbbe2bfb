"""
Oxygrove CLI - Command-line interface for the engine.

Usage:
    oxygrove simulate [--seconds N] [--seed S]   Run a headless autoplayed farm
    oxygrove catalog                             List trees, upgrades and shop items
    oxygrove serve [--host H] [--port P]         Start the HTTP API
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Oxygrove - Idle Tree Farm Engine",
        prog="oxygrove",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Run a headless autoplayed farm")
    simulate_parser.add_argument("--seconds", type=int, default=600, help="Simulated seconds to run")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed for special events")
    simulate_parser.add_argument("--clicks", type=int, default=5, help="Manual tills per second")

    # Catalog command
    subparsers.add_parser("catalog", help="List trees, upgrades and shop items")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Autoplay a farm: till, plant the best affordable seed, buy tools."""
    from .config import EngineSettings
    from .session import GroveEngine, ShopFlow
    from .catalog import ShopItemKind
    from .engine_core.state import UpgradeType

    engine = GroveEngine(settings=EngineSettings.from_env(), seed=args.seed)
    shop = ShopFlow(engine)

    for _ in range(args.seconds):
        state = engine.state
        empty = [
            p for p in range(engine.settings.board_size)
            if state.tree_at(p) is None
        ]
        untilled = [p for p in empty if state.tilling_progress(p) < engine.required_tilling(p)]
        tilled = [p for p in empty if p not in untilled]

        if untilled:
            for _ in range(args.clicks):
                if engine.till_box(untilled[0]):
                    engine.increment_clicks()

        seeds = sorted(
            (i for i in shop.available_items() if i.kind == ShopItemKind.SEED),
            key=lambda i: i.price,
            reverse=True,
        )
        for position in tilled:
            for seed in seeds:
                if engine.state.oxygen >= seed.price:
                    shop.purchase(seed.id, position)
                    break

        for upgrade in shop.available_upgrades():
            if upgrade.type == UpgradeType.TOOL and engine.state.oxygen >= upgrade.price * 2:
                shop.buy_upgrade(upgrade.id)

        engine.advance(1000)

    state = engine.state
    print(f"Simulated {args.seconds}s")
    print(f"Oxygen: {state.oxygen} (lifetime {state.total_oxygen_generated:.0f}, peak {state.highest_oxygen_reached})")
    print(f"Trees: {len(state.planted_trees)} ({len(state.matured_trees)} mature)")
    print(f"Tilling power: {state.tilling_power}  Clicks: {state.total_clicks}")
    print(f"Multiplier: x{engine.total_multiplier():.1f}  Generation: {engine.auto_generation()}/s")
    print(f"Achievements: {len(state.unlocked_achievements)}/{len(state.achievements)}")
    for achievement in state.unlocked_achievements:
        print(f"  - {achievement.title}")


def cmd_catalog(args):
    """Print the built-in catalog."""
    from .catalog import create_default_catalog

    catalog = create_default_catalog()

    print("Trees:")
    for spec in catalog.trees.values():
        print(
            f"  {spec.type.value:8} {spec.title:18} grows {spec.growth_time_ms // 1000}s, "
            f"{spec.base_production} oxygen/s, +{spec.base_multiplier}x"
        )

    print("\nUpgrades:")
    for upgrade in catalog.upgrades:
        print(f"  {upgrade.id:18} {upgrade.type.value:10} {upgrade.price:>6} oxygen  power {upgrade.power}")

    print("\nShop:")
    for item in catalog.shop_items:
        print(f"  {item.id:18} {item.kind.value:8} {item.price:>6} oxygen  unlocks at {item.unlock_threshold}")


def cmd_serve(args):
    """Start the HTTP API with uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
