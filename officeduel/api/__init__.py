"""
API Module - Transport-agnostic match interface.

Any adapter (HTTP, websocket, tests) uses the service to:
1. Create matches
2. Submit offers and picks
3. Read per-seat match views and the effect feed
4. Export the card catalog and replays

All state lives in the in-memory match registry. create_app() wraps the
service in a FastAPI application.
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    SubmitCardsRequest,
    PickRequest,
    # Responses
    MatchStateResponse,
    MatchListResponse,
    CardCatalogResponse,
    ReplayResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    FeedbackInfo,
    PlayerView,
    StatusInfo,
    # Enums
    ErrorCode,
    MatchPhase,
    MatchStatusValue,
)
from .service import MatchService, build_state_response
from .app import create_app

__all__ = [
    # Requests
    "CreateMatchRequest",
    "SubmitCardsRequest",
    "PickRequest",
    # Responses
    "MatchStateResponse",
    "MatchListResponse",
    "CardCatalogResponse",
    "ReplayResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "FeedbackInfo",
    "PlayerView",
    "StatusInfo",
    # Enums
    "ErrorCode",
    "MatchPhase",
    "MatchStatusValue",
    # Service
    "MatchService",
    "build_state_response",
    "create_app",
]
