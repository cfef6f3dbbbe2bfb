"""
FastAPI Application - REST API for tree farm front ends.

Endpoints:
    GET    /api/v1/health                           Service health
    GET    /api/v1/catalog                          Trees, upgrades, shop items, achievements
    POST   /api/v1/sessions                         Start a farm
    GET    /api/v1/sessions                         List active farms
    GET    /api/v1/sessions/{id}                    Session info and snapshot
    DELETE /api/v1/sessions/{id}                    End a farm
    POST   /api/v1/sessions/cleanup                   End farms older than max_age_seconds
    GET    /api/v1/sessions/{id}/state              Current snapshot
    POST   /api/v1/sessions/{id}/till               Till a plot
    POST   /api/v1/sessions/{id}/plant              Plant a tree on a tilled plot
    DELETE /api/v1/sessions/{id}/trees/{tree_id}    Remove a tree
    POST   /api/v1/sessions/{id}/shop/{item_id}     Buy a shop item
    POST   /api/v1/sessions/{id}/upgrades/{id}      Buy a workshop upgrade
    POST   /api/v1/sessions/{id}/advance            Run a simulated farm forward

Gameplay failures (not enough oxygen, plot not ready) are normal
responses with success=false. Only unknown sessions are errors.
"""

from typing import Annotated
import os

# Environment configuration
OXYGROVE_ENV = os.getenv("OXYGROVE_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body, Query, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import APIService, SessionNotFoundError
    from .schemas import (
        CreateSessionRequest,
        TillRequest,
        PlantRequest,
        PurchaseRequest,
        AdvanceRequest,
        GameStateResponse,
        ActionResponse,
        SessionResponse,
        CatalogResponse,
        SessionListResponse,
        EndSessionResponse,
        CleanupResponse,
        ErrorResponse,
        HealthResponse,
        ErrorCode,
    )

    app = FastAPI(
        title="Oxygrove Engine API",
        description="""
Idle tree farm engine.

Till plots, plant trees, buy upgrades and watch the oxygen roll in.
Simulated sessions move only when `POST /advance` is called; realtime
sessions follow the wall clock and catch up on every request.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error handling
    # =========================================================================

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(
                error=str(exc),
                error_code=ErrorCode.SESSION_NOT_FOUND,
                details={"session_id": exc.session_id},
            ).model_dump(mode="json"),
        )

    # =========================================================================
    # Service Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Service"])
    async def health() -> HealthResponse:
        return api_service.health()

    @app.get("/api/v1/catalog", response_model=CatalogResponse, tags=["Service"])
    async def catalog() -> CatalogResponse:
        """Everything that can be planted, bought or achieved."""
        return api_service.get_catalog()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post("/api/v1/sessions", response_model=SessionResponse, tags=["Sessions"])
    async def create_session(
        request: Annotated[CreateSessionRequest, Body()] = CreateSessionRequest(),
    ) -> SessionResponse:
        """Start a new farm."""
        return api_service.create_session(request)

    @app.get("/api/v1/sessions", response_model=SessionListResponse, tags=["Sessions"])
    async def list_sessions() -> SessionListResponse:
        return api_service.list_sessions()

    @app.post("/api/v1/sessions/cleanup", response_model=CleanupResponse, tags=["Sessions"])
    async def cleanup_sessions(
        max_age_seconds: Annotated[int, Query(ge=0, description="End sessions older than this")] = 3600,
    ) -> CleanupResponse:
        """End stale farms."""
        return api_service.cleanup_sessions(max_age_seconds)

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
    )
    async def get_session(session_id: str) -> SessionResponse:
        return api_service.get_session(session_id)

    @app.delete("/api/v1/sessions/{session_id}", response_model=EndSessionResponse, tags=["Sessions"])
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        return api_service.end_session(session_id, reason)

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
    )
    async def get_state(session_id: str) -> GameStateResponse:
        return api_service.get_state(session_id)

    # =========================================================================
    # Gameplay Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/till",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
    )
    async def till(session_id: str, request: TillRequest) -> ActionResponse:
        return api_service.till(session_id, request)

    @app.post(
        "/api/v1/sessions/{session_id}/plant",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
    )
    async def plant(session_id: str, request: PlantRequest) -> ActionResponse:
        return api_service.plant(session_id, request)

    @app.delete(
        "/api/v1/sessions/{session_id}/trees/{tree_id}",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
    )
    async def remove_tree(session_id: str, tree_id: str) -> ActionResponse:
        return api_service.remove_tree(session_id, tree_id)

    @app.post(
        "/api/v1/sessions/{session_id}/shop/{item_id}",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Shop"],
    )
    async def buy_item(
        session_id: str,
        item_id: str,
        request: Annotated[PurchaseRequest, Body()] = PurchaseRequest(),
    ) -> ActionResponse:
        """Buy a seed, powerup or special. Seeds need a position to plant on."""
        return api_service.buy_item(session_id, item_id, request)

    @app.post(
        "/api/v1/sessions/{session_id}/upgrades/{upgrade_id}",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Shop"],
    )
    async def buy_upgrade(
        session_id: str,
        upgrade_id: str,
        request: Annotated[PurchaseRequest, Body()] = PurchaseRequest(),
    ) -> ActionResponse:
        """Buy a workshop upgrade. Automations are bound to the given position."""
        return api_service.buy_upgrade(session_id, upgrade_id, request)

    @app.post(
        "/api/v1/sessions/{session_id}/advance",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
    )
    async def advance(session_id: str, request: AdvanceRequest) -> GameStateResponse:
        return api_service.advance(session_id, request)

    return app
