"""
Oxygrove - Idle Tree Farm Simulation Engine

An idle-clicker engine where a player tills plots of land, plants trees
that mature over time and breathe out oxygen, and buys upgrades that
speed the whole thing up. The package provides:
- An immutable-snapshot game state
- A pure reducer for every state transition
- A cooperative scheduler driving the periodic ticks
- Catalog data for trees, upgrades, shop items and achievements
"""

__version__ = "0.1.0"
