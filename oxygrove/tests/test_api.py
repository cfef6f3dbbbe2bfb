"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- Request/response validation
- Route registration
"""

import pytest
from pydantic import ValidationError

from .. import __version__
from ..api import APIService, SessionNotFoundError, create_app
from ..api.schemas import (
    AdvanceRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    PlantRequest,
    PurchaseRequest,
    TillRequest,
)


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    @pytest.fixture
    def session_id(self, service):
        return service.create_session(CreateSessionRequest(seed=1)).session_id

    def test_health(self, service, session_id):
        response = service.health()

        assert response.status == "ok"
        assert response.version == __version__
        assert response.active_sessions == 1

    def test_create_session_snapshot(self, service):
        response = service.create_session(CreateSessionRequest(seed=3))

        state = response.state
        assert response.realtime is False
        assert state.oxygen == 1
        assert state.now_ms == 0
        assert len(state.plots) == 16
        assert state.plots[0].required == 30
        assert state.plots[15].required == 10000
        assert state.total_multiplier == 1

    def test_unknown_session_raises(self, service):
        with pytest.raises(SessionNotFoundError) as exc_info:
            service.get_state("nonexistent-id")

        assert exc_info.value.session_id == "nonexistent-id"

    def test_till_counts_click(self, service, session_id):
        response = service.till(session_id, TillRequest(position=0))

        assert response.success
        assert response.message is None
        assert response.state.total_clicks == 1
        assert response.state.plots[0].progress == 1
        # First Furrow reward
        assert response.state.oxygen == 6

    def test_failed_till_counts_nothing(self, service, session_id):
        response = service.till(session_id, TillRequest(position=40))

        assert not response.success
        assert response.message
        assert response.state.total_clicks == 0

    def test_plant_after_tilling(self, service, session_id):
        for _ in range(30):
            service.till(session_id, TillRequest(position=0))

        response = service.plant(session_id, PlantRequest(tree_type="oak", position=0))

        assert response.success
        tree = response.state.trees[0]
        assert tree.title == "Mighty Oak"
        assert tree.growth_progress == 0.0
        assert response.state.plots[0].tree_id == tree.id

        removed = service.remove_tree(session_id, tree.id)
        assert removed.state.trees == []

    def test_plant_untilled(self, service, session_id):
        response = service.plant(session_id, PlantRequest(tree_type="oak", position=0))

        assert not response.success

    def test_buy_item_failure_reason(self, service, session_id):
        response = service.buy_item(session_id, "oak-seed", PurchaseRequest(position=0))

        assert not response.success
        assert "till some land first" in response.message

    def test_buy_upgrade_locked(self, service, session_id):
        response = service.buy_upgrade(session_id, "root-engine", PurchaseRequest(position=1))

        assert not response.success
        assert "Unlocks at" in response.message

    def test_advance_simulated_session(self, service, session_id):
        response = service.advance(session_id, AdvanceRequest(ms=5000))

        assert response.now_ms == 5000

    def test_realtime_session_ignores_advance(self, service):
        session_id = service.create_session(CreateSessionRequest(realtime=True)).session_id

        response = service.advance(session_id, AdvanceRequest(ms=3_600_000))

        assert response.now_ms < 3_600_000

    def test_end_session(self, service, session_id):
        assert service.end_session(session_id).success
        assert not service.end_session(session_id).success
        assert service.list_sessions().count == 0

        with pytest.raises(SessionNotFoundError):
            service.get_session(session_id)

    def test_list_sessions(self, service):
        first = service.create_session(CreateSessionRequest()).session_id
        second = service.create_session(CreateSessionRequest()).session_id

        listing = service.list_sessions()

        assert listing.count == 2
        assert set(listing.sessions) == {first, second}

    def test_environment_settings_reach_sessions(self, monkeypatch):
        monkeypatch.setenv("OXYGROVE_BOARD_SIZE", "9")
        monkeypatch.setenv("OXYGROVE_STARTING_OXYGEN", "40")

        response = APIService().create_session(CreateSessionRequest())

        assert len(response.state.plots) == 9
        assert response.state.oxygen == 40

    def test_cleanup_ends_stale_sessions(self, service, session_id):
        fresh_id = service.create_session(CreateSessionRequest()).session_id
        service.session_manager.get_session(session_id).created_at -= 7200

        response = service.cleanup_sessions(max_age_seconds=3600)

        assert response.ended == 1
        assert response.active_sessions == 1
        assert service.list_sessions().sessions == [fresh_id]
        with pytest.raises(SessionNotFoundError):
            service.get_state(session_id)

    def test_cleanup_keeps_young_sessions(self, service, session_id):
        assert service.cleanup_sessions().ended == 0
        assert service.list_sessions().count == 1

    def test_catalog(self, service):
        response = service.get_catalog()

        assert [t.type for t in response.trees] == ["oak", "pine", "willow"]
        assert len(response.upgrades) == 5
        assert len(response.shop_items) == 6
        assert len(response.achievements) == 7


class TestSchemas:
    """Tests for Pydantic schema validation."""

    def test_advance_bounds(self):
        with pytest.raises(ValidationError):
            AdvanceRequest(ms=0)
        with pytest.raises(ValidationError):
            AdvanceRequest(ms=86_400_001)

    def test_negative_position_rejected(self):
        with pytest.raises(ValidationError):
            TillRequest(position=-1)
        with pytest.raises(ValidationError):
            PurchaseRequest(position=-1)

    def test_error_response_serializes_code(self):
        response = ErrorResponse(
            error="Session not found: x",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": "x"},
        )

        data = response.model_dump(mode="json")
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] == {"session_id": "x"}


class TestApp:
    def test_routes_registered(self):
        app = create_app(APIService())
        paths = {route.path for route in app.routes}

        assert "/api/v1/health" in paths
        assert "/api/v1/sessions/{session_id}/till" in paths
        assert "/api/v1/sessions/{session_id}/shop/{item_id}" in paths
        assert "/api/v1/sessions/{session_id}/advance" in paths
        assert "/api/v1/sessions/cleanup" in paths
