"""
Session Manager - Creates and tracks running tree farms.

A session is one play-through:
- Created when the player starts a farm
- Holds the engine and its shop flow
- Lives in memory only; ending it discards everything

Sessions are either simulated (time moves only when advance() is
called) or realtime (engine time follows the wall clock and is caught
up on every access).
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import time
import uuid

from ..catalog import Catalog
from ..config import EngineSettings
from .engine import GroveEngine
from .shop import ShopFlow

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """An in-memory tree farm session."""
    session_id: str
    engine: GroveEngine
    shop: ShopFlow
    created_at: float
    realtime: bool = False
    active: bool = True

    def sync(self) -> int:
        """Bring a realtime session up to the wall clock. Returns tasks run."""
        if not self.realtime or not self.active:
            return 0
        return self.engine.catch_up()


class SessionManager:
    """
    Manages tree farm sessions.

    Responsibilities:
    - Create sessions with their own engine
    - Track active sessions
    - Clean up ended or stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: Catalog | None = None, settings: EngineSettings | None = None):
        """Without explicit settings, OXYGROVE_* environment overrides apply."""
        self.catalog = catalog
        self.settings = settings if settings is not None else EngineSettings.from_env()
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None, realtime: bool = False) -> Session:
        """
        Create a new session.

        Args:
            seed: Seed for the special event rolls (None for entropy)
            realtime: Follow the wall clock instead of manual advancing

        Returns:
            New Session with a fresh farm
        """
        session_id = str(uuid.uuid4())
        engine = GroveEngine(catalog=self.catalog, settings=self.settings, seed=seed)
        session = Session(
            session_id=session_id,
            engine=engine,
            shop=ShopFlow(engine),
            created_at=time.time(),
            realtime=realtime,
        )
        self._sessions[session_id] = session
        logger.info("Created session %s (realtime=%s)", session_id, realtime)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """End a session and drop it from memory. False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.active = False
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [sid for sid, session in self._sessions.items() if session.active]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """End sessions older than max_age. Returns how many were ended."""
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
