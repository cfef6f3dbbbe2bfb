"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.
Every response is an explicit type so the OpenAPI schema is complete.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlotInfo(BaseModel):
    """One board position."""
    position: int
    progress: float = 0
    required: int
    tree_id: Optional[str] = None
    auto_tiller: Optional[str] = Field(None, description="Upgrade id driving this plot")


class TreeInfo(BaseModel):
    """A planted tree."""
    id: str
    type: str
    title: str
    position: int
    planted_at: int
    matured_at: Optional[int] = None
    growth_progress: float = Field(0.0, ge=0.0, le=1.0)
    recently_matured: bool = False


class UpgradeInfo(BaseModel):
    """A workshop upgrade and how many are owned."""
    id: str
    name: str
    type: str
    price: int
    power: float
    owned: int = 0
    unlocked: bool = False
    description: str = ""


class AchievementInfo(BaseModel):
    id: str
    title: str
    description: str = ""
    reward: int
    unlocked: bool = False


class ShopItemInfo(BaseModel):
    id: str
    name: str
    kind: str
    price: int
    unlock_threshold: int = 0
    unlocked: bool = False
    description: str = ""
    tree_type: Optional[str] = None
    multiplier: Optional[float] = None


class TreeSpeciesInfo(BaseModel):
    type: str
    title: str
    growth_time_ms: int
    base_production: float
    base_multiplier: float
    description: str = ""


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new farm."""
    seed: Optional[int] = Field(None, description="Seed for special event rolls")
    realtime: bool = Field(False, description="Follow the wall clock")


class TillRequest(BaseModel):
    position: int = Field(ge=0)


class PlantRequest(BaseModel):
    tree_type: str = Field(description="oak, pine or willow")
    position: int = Field(ge=0)


class PurchaseRequest(BaseModel):
    """Buy a shop item or upgrade. Seeds and automations use the position."""
    position: Optional[int] = Field(None, ge=0)


class AdvanceRequest(BaseModel):
    """Run a simulated session forward."""
    ms: int = Field(gt=0, le=86_400_000)


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Complete snapshot of a farm for rendering."""
    session_id: str
    now_ms: int

    oxygen: float
    total_oxygen_generated: float
    highest_oxygen_reached: int

    click_power: float
    tilling_power: float
    total_multiplier: float
    auto_generation: float
    total_clicks: int

    special_event_active: bool = False
    special_event_multiplier: float = 1

    plots: list[PlotInfo] = Field(default_factory=list)
    trees: list[TreeInfo] = Field(default_factory=list)
    upgrades: list[UpgradeInfo] = Field(default_factory=list)
    achievements: list[AchievementInfo] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Outcome of a player operation plus the resulting snapshot."""
    success: bool
    session_id: str
    message: Optional[str] = None
    refunded: bool = False
    state: GameStateResponse


class SessionResponse(BaseModel):
    session_id: str
    realtime: bool
    created_at: float
    state: GameStateResponse


class CatalogResponse(BaseModel):
    trees: list[TreeSpeciesInfo] = Field(default_factory=list)
    upgrades: list[UpgradeInfo] = Field(default_factory=list)
    shop_items: list[ShopItemInfo] = Field(default_factory=list)
    achievements: list[AchievementInfo] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class CleanupResponse(BaseModel):
    """Sessions ended by a stale-session sweep."""
    ended: int = 0
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_sessions: int = 0
