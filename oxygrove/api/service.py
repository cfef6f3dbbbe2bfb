"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Keeps realtime sessions in step with the wall clock
4. Formats snapshots for front ends

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .. import __version__
from ..catalog import Catalog, create_default_catalog
from ..session import Session, SessionManager
from .schemas import (
    # Requests
    CreateSessionRequest,
    TillRequest,
    PlantRequest,
    PurchaseRequest,
    AdvanceRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    SessionResponse,
    CatalogResponse,
    SessionListResponse,
    EndSessionResponse,
    CleanupResponse,
    HealthResponse,
    # Shared
    PlotInfo,
    TreeInfo,
    UpgradeInfo,
    AchievementInfo,
    ShopItemInfo,
    TreeSpeciesInfo,
)

logger = logging.getLogger(__name__)


class SessionNotFoundError(ValueError):
    """Raised when a session id is unknown or has ended."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest(seed=1))
        service.till(session.session_id, TillRequest(position=0))
        service.advance(session.session_id, AdvanceRequest(ms=1000))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    catalog: Catalog = field(default_factory=create_default_catalog)

    def __post_init__(self):
        if self.session_manager.catalog is None:
            self.session_manager.catalog = self.catalog

    # =========================================================================
    # Sessions
    # =========================================================================

    def health(self) -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(self.session_manager.list_active_sessions()),
        )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        session = self.session_manager.create_session(seed=request.seed, realtime=request.realtime)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse:
        return self._session_to_response(self._get(session_id))

    def get_state(self, session_id: str) -> GameStateResponse:
        return self._state_to_response(self._get(session_id))

    def end_session(self, session_id: str, reason: str = "user_ended") -> EndSessionResponse:
        success = self.session_manager.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    def list_sessions(self) -> SessionListResponse:
        sessions = self.session_manager.list_active_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    def cleanup_sessions(self, max_age_seconds: int = 3600) -> CleanupResponse:
        """End every session older than `max_age_seconds`."""
        ended = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        return CleanupResponse(
            ended=ended,
            active_sessions=len(self.session_manager.list_active_sessions()),
        )

    # =========================================================================
    # Player operations
    # =========================================================================

    def till(self, session_id: str, request: TillRequest) -> ActionResponse:
        """Till a plot; a click only counts when the plot advanced."""
        session = self._get(session_id)
        engine = session.engine
        advanced = engine.till_box(request.position)
        if advanced:
            engine.increment_clicks()
        message = None if advanced else f"Position {request.position} cannot be tilled right now"
        return self._action_response(session, advanced, message)

    def plant(self, session_id: str, request: PlantRequest) -> ActionResponse:
        session = self._get(session_id)
        planted = session.engine.plant_tree(request.tree_type, request.position)
        message = None if planted else f"Cannot plant {request.tree_type} at {request.position}"
        return self._action_response(session, planted, message)

    def remove_tree(self, session_id: str, tree_id: str) -> ActionResponse:
        session = self._get(session_id)
        session.engine.remove_tree(tree_id)
        return self._action_response(session, True)

    def buy_item(self, session_id: str, item_id: str, request: PurchaseRequest) -> ActionResponse:
        session = self._get(session_id)
        result = session.shop.purchase(item_id, request.position)
        return self._action_response(session, result.success, result.reason, refunded=result.refunded)

    def buy_upgrade(self, session_id: str, upgrade_id: str, request: PurchaseRequest) -> ActionResponse:
        session = self._get(session_id)
        result = session.shop.buy_upgrade(upgrade_id, request.position)
        return self._action_response(session, result.success, result.reason)

    def advance(self, session_id: str, request: AdvanceRequest) -> GameStateResponse:
        """Run a simulated session forward. Realtime sessions only follow the clock."""
        session = self._get(session_id)
        if not session.realtime:
            ran = session.engine.advance(request.ms)
            logger.debug("Session %s advanced %d ms (%d tasks)", session_id, request.ms, ran)
        return self._state_to_response(session)

    # =========================================================================
    # Catalog
    # =========================================================================

    def get_catalog(self) -> CatalogResponse:
        catalog = self.catalog
        return CatalogResponse(
            trees=[
                TreeSpeciesInfo(
                    type=spec.type.value,
                    title=spec.title,
                    growth_time_ms=spec.growth_time_ms,
                    base_production=spec.base_production,
                    base_multiplier=spec.base_multiplier,
                    description=spec.description,
                )
                for spec in catalog.trees.values()
            ],
            upgrades=[
                UpgradeInfo(
                    id=u.id,
                    name=u.name,
                    type=u.type.value,
                    price=u.price,
                    power=u.power,
                    description=u.description,
                )
                for u in catalog.upgrades
            ],
            shop_items=[
                ShopItemInfo(
                    id=item.id,
                    name=item.name,
                    kind=item.kind.value,
                    price=item.price,
                    unlock_threshold=item.unlock_threshold,
                    description=item.description,
                    tree_type=item.tree_type.value if item.tree_type else None,
                    multiplier=item.multiplier,
                )
                for item in catalog.shop_items
            ],
            achievements=[
                AchievementInfo(
                    id=a.id,
                    title=a.title,
                    description=a.description,
                    reward=a.reward,
                )
                for a in catalog.achievements
            ],
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.sync()
        return session

    def _action_response(
        self,
        session: Session,
        success: bool,
        message: str | None = None,
        refunded: bool = False,
    ) -> ActionResponse:
        return ActionResponse(
            success=success,
            session_id=session.session_id,
            message=message,
            refunded=refunded,
            state=self._state_to_response(session),
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            realtime=session.realtime,
            created_at=session.created_at,
            state=self._state_to_response(session),
        )

    def _state_to_response(self, session: Session) -> GameStateResponse:
        """Convert an engine snapshot to the API response."""
        engine = session.engine
        state = engine.state
        trees_by_position = {tree.position: tree for tree in state.planted_trees}
        unlocked = {u.id for u in session.shop.available_upgrades()}

        plots = [
            PlotInfo(
                position=position,
                progress=state.tilling_progress(position),
                required=engine.required_tilling(position),
                tree_id=trees_by_position[position].id if position in trees_by_position else None,
                auto_tiller=state.auto_tillers.get(position),
            )
            for position in range(engine.settings.board_size)
        ]

        trees = [
            TreeInfo(
                id=tree.id,
                type=tree.type.value,
                title=engine.catalog.get_tree(tree.type).title,
                position=tree.position,
                planted_at=tree.planted_at,
                matured_at=tree.matured_at,
                growth_progress=engine.growth_progress(tree.id),
                recently_matured=tree.id in state.recently_matured_trees,
            )
            for tree in state.planted_trees
        ]

        return GameStateResponse(
            session_id=session.session_id,
            now_ms=engine.now,
            oxygen=state.oxygen,
            total_oxygen_generated=state.total_oxygen_generated,
            highest_oxygen_reached=state.highest_oxygen_reached,
            click_power=state.click_power,
            tilling_power=state.tilling_power,
            total_multiplier=engine.total_multiplier(),
            auto_generation=engine.auto_generation(),
            total_clicks=state.total_clicks,
            special_event_active=state.special_event_active,
            special_event_multiplier=state.special_event_multiplier,
            plots=plots,
            trees=trees,
            upgrades=[
                UpgradeInfo(
                    id=u.id,
                    name=u.name,
                    type=u.type.value,
                    price=u.price,
                    power=u.power,
                    owned=u.owned,
                    unlocked=u.id in unlocked,
                    description=u.description,
                )
                for u in state.upgrades.values()
            ],
            achievements=[
                AchievementInfo(
                    id=a.id,
                    title=a.title,
                    description=a.description,
                    reward=a.reward,
                    unlocked=a.unlocked,
                )
                for a in state.achievements
            ],
        )
