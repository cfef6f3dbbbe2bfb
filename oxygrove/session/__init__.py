"""
Session Module - Running tree farms.

A session wraps one GroveEngine:
- The engine owns the state snapshot and the tick scheduler
- The shop flow applies purchase rules on top of the engine
- The manager keeps sessions in memory and ends them

Nothing is persisted.
"""

from .engine import GroveEngine
from .shop import ShopFlow, ShopResult
from .manager import SessionManager, Session

__all__ = [
    "GroveEngine",
    "ShopFlow",
    "ShopResult",
    "SessionManager",
    "Session",
]
