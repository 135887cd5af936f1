"""
Pydantic Schemas for API - Request/response models for match adapters.

These models define the contract between any transport (HTTP, websocket,
a test harness) and the engine. The engine itself never sees them.

Error Codes:
- MATCH_NOT_FOUND: Match id does not exist or has been ended
- INVALID_PHASE: Command issued outside the phase it requires
- INVALID_REQUEST: Request is malformed or names cards the player cannot offer
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchPhase(str, Enum):
    """Externally visible phases."""
    PLAY_TWO_CARDS = "play_two_cards"
    OPPONENT_PICK = "opponent_pick"
    RESOLUTION = "resolution"
    END_STEP = "end_step"


class MatchStatusValue(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    INVALID_PHASE = "INVALID_PHASE"
    INVALID_REQUEST = "INVALID_REQUEST"


# =============================================================================
# Requests
# =============================================================================

class CreateMatchRequest(BaseModel):
    """Request to create and start a match."""
    seed: Optional[int] = Field(None, description="Match seed; generated if omitted")
    player_a_name: Optional[str] = None
    player_b_name: Optional[str] = None


class SubmitCardsRequest(BaseModel):
    """The active player's two offered cards."""
    face_up_id: str = Field(..., min_length=1)
    face_down_id: str = Field(..., min_length=1)


class PickRequest(BaseModel):
    """The opponent's blind pick."""
    choose_face_up: bool


# =============================================================================
# Shared Models
# =============================================================================

class StatusInfo(BaseModel):
    kind: str
    magnitude: int = 0
    duration: int = Field(..., description="-1 means until consumed")


class FeedbackInfo(BaseModel):
    """One effect feed entry."""
    player_name: str
    card_name: str
    description: str
    momentum_delta: int
    timestamp: float

    model_config = {"from_attributes": True}


class PlayerView(BaseModel):
    """
    One side of the table as seen by the viewer.

    hand is only filled in for the viewer's own seat.
    """
    seat: int
    name: str
    hand: Optional[list[str]] = None
    hand_count: int = 0
    deck_count: int = 0
    tableau: list[str] = Field(default_factory=list)
    discard_count: int = 0
    max_hand_size: int = 0
    skip_next_turn: bool = False
    draw_block_count: int = 0
    extra_face_down_plays: int = 0
    extra_turns: int = 0
    statuses: list[StatusInfo] = Field(default_factory=list)
    revealed: list[str] = Field(default_factory=list)
    recently_added: list[str] = Field(default_factory=list)


class CardInfo(BaseModel):
    """Card definition for catalog export."""
    id: str
    name: str
    tags: list[str] = Field(default_factory=list)
    tiers: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Responses
# =============================================================================

class MatchStateResponse(BaseModel):
    """
    Full match view.

    momentum is from side A's perspective; self_momentum is from the
    viewer's (positive means the viewer is ahead). face_down_id is hidden
    from everyone but the active player while the pick is pending.
    """
    match_id: str
    status: MatchStatusValue
    phase: MatchPhase
    momentum: int
    self_momentum: Optional[int] = None
    win_threshold: int
    active_index: int
    winner_index: Optional[int] = None
    viewer_seat: Optional[int] = None
    can_submit: bool = False
    can_pick: bool = False
    face_up_id: Optional[str] = None
    face_down_id: Optional[str] = None
    players: list[PlayerView] = Field(default_factory=list)
    feedback: list[FeedbackInfo] = Field(default_factory=list)
    api_version: str = Field("v1", description="API version")


class CardCatalogResponse(BaseModel):
    schema_version: int
    cards: list[CardInfo] = Field(default_factory=list)
    api_version: str = Field("v1", description="API version")


class ReplayResponse(BaseModel):
    seed: int
    deck_a: list[str] = Field(default_factory=list)
    deck_b: list[str] = Field(default_factory=list)
    history: list[str] = Field(default_factory=list)
    final_momentum: int = 0
    winner_index: Optional[int] = None


class MatchListResponse(BaseModel):
    matches: list[str] = Field(default_factory=list)
    count: int = 0
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "officeduel"
    version: str
    active_matches: int = 0


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")
