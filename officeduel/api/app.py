"""
FastAPI Application - Thin HTTP adapter over MatchService.

Endpoints:
    POST   /api/v1/matches                   Create and start a match
    GET    /api/v1/matches                   List active matches
    GET    /api/v1/matches/{id}              Match view (?seat=0|1 for a player view)
    DELETE /api/v1/matches/{id}              End a match, returns its replay
    POST   /api/v1/matches/{id}/offer        Active player offers two cards
    POST   /api/v1/matches/{id}/offer/random Offer two random hand slots
    POST   /api/v1/matches/{id}/pick         Opponent picks face-up or face-down
    POST   /api/v1/matches/{id}/pick/random  Pick at random
    GET    /api/v1/matches/{id}/replay       Replay snapshot
    GET    /api/v1/cards                     Card catalog export

Seats are trusted as given; authentication belongs to the deployment.
All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import os

from ..config import EngineConfig

# Environment configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

_STATUS_BY_CODE = {
    "MATCH_NOT_FOUND": 404,
    "INVALID_PHASE": 409,
    "INVALID_REQUEST": 400,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional MatchService instance (built from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from ..session import MatchManager
    from .service import MatchService
    from .schemas import (
        CreateMatchRequest,
        SubmitCardsRequest,
        PickRequest,
        MatchStateResponse,
        MatchListResponse,
        CardCatalogResponse,
        ReplayResponse,
        ErrorResponse,
        HealthResponse,
    )
    from .. import __version__

    app = FastAPI(
        title="Office Duel API",
        description="""
Two-player card duel over a single momentum counter.

## Turn flow

1. The active seat offers a face-up and a face-down card (`POST /offer`)
2. The other seat picks one blind (`POST /pick`)
3. Both cards resolve and the turn passes

Pass `?seat=0` or `?seat=1` to read a match as that player; without it
you get the spectator view (no hands, face-down card hidden).

## Error Codes

| Code | HTTP | Description |
|------|------|-------------|
| `MATCH_NOT_FOUND` | 404 | Match does not exist or has been ended |
| `INVALID_PHASE` | 409 | Command issued outside the phase it requires |
| `INVALID_REQUEST` | 400 | Wrong seat, duplicate offer, or card not in hand |
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

    match_service = service or MatchService(manager=MatchManager(config=EngineConfig.from_env()))

    Seat = Annotated[Optional[int], Query(ge=0, le=1, description="Viewing seat")]

    # =========================================================================
    # Error helpers
    # =========================================================================

    def as_http(response):
        """Pass models through; wrap ErrorResponse with its HTTP status."""
        if isinstance(response, ErrorResponse):
            return JSONResponse(
                status_code=_STATUS_BY_CODE.get(response.error_code.value, 400),
                content=response.model_dump(mode="json"),
            )
        return response

    error_responses = {
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchStateResponse,
        tags=["Matches"],
        summary="Create and start a match",
    )
    async def create_match(request: CreateMatchRequest) -> MatchStateResponse:
        """Deal both decks from the seed (generated if omitted) and draw opening hands."""
        return match_service.create_match(request)

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List active matches",
    )
    async def list_matches() -> MatchListResponse:
        matches = match_service.manager.list_active_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchStateResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Get a match view",
    )
    async def get_match(match_id: str, seat: Seat = None) -> Union[MatchStateResponse, JSONResponse]:
        return as_http(match_service.get_state(match_id, viewer_seat=seat))

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=ReplayResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="End a match",
    )
    async def end_match(match_id: str) -> Union[ReplayResponse, JSONResponse]:
        """End a match and return its replay. The match id is invalid afterwards."""
        return as_http(match_service.end_match(match_id))

    @app.get(
        "/api/v1/matches/{match_id}/replay",
        response_model=ReplayResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Get a replay snapshot",
    )
    async def get_replay(match_id: str) -> Union[ReplayResponse, JSONResponse]:
        return as_http(match_service.get_replay(match_id))

    # =========================================================================
    # Turn Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches/{match_id}/offer",
        response_model=MatchStateResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Offer two cards",
    )
    async def offer(
        match_id: str,
        request: SubmitCardsRequest,
        seat: Seat = None,
    ) -> Union[MatchStateResponse, JSONResponse]:
        """
        Offer a face-up and a face-down card from the active seat's hand.

        If the active seat must skip, or has no cards, the turn ends
        without an offer and the response shows the next turn.
        """
        return as_http(match_service.submit_cards(match_id, request, viewer_seat=seat))

    @app.post(
        "/api/v1/matches/{match_id}/offer/random",
        response_model=MatchStateResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Offer two random cards",
    )
    async def offer_random(match_id: str) -> Union[MatchStateResponse, JSONResponse]:
        return as_http(match_service.submit_random(match_id))

    @app.post(
        "/api/v1/matches/{match_id}/pick",
        response_model=MatchStateResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Pick one offered card",
    )
    async def pick(
        match_id: str,
        request: PickRequest,
        seat: Seat = None,
    ) -> Union[MatchStateResponse, JSONResponse]:
        """Take the face-up or the face-down card; both cards then resolve."""
        return as_http(match_service.pick(match_id, request, viewer_seat=seat))

    @app.post(
        "/api/v1/matches/{match_id}/pick/random",
        response_model=MatchStateResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Pick at random",
    )
    async def pick_random(match_id: str) -> Union[MatchStateResponse, JSONResponse]:
        return as_http(match_service.pick_random(match_id))

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get(
        "/api/v1/cards",
        response_model=CardCatalogResponse,
        tags=["Cards"],
        summary="Export the card catalog",
    )
    async def get_cards() -> CardCatalogResponse:
        return match_service.get_catalog()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="officeduel",
            version=__version__,
            active_matches=len(match_service.manager),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Office Duel API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
