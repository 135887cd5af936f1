"""
API Service - Business logic layer between a transport and the engine.

The service:
1. Translates requests to match commands
2. Checks what the engine leaves to its caller (offering two different
   cards that are actually in hand, acting from the right seat)
3. Converts engine errors into ErrorResponse models
4. Builds per-seat views of a match

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Callable

from .schemas import (
    # Requests
    CreateMatchRequest,
    SubmitCardsRequest,
    PickRequest,
    # Responses
    MatchStateResponse,
    CardCatalogResponse,
    ReplayResponse,
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
from ..engine_core.errors import CatalogConsistencyError, InvalidPhaseError
from ..engine_core.state import MatchState, Phase
from ..games.office.setup import resolve_definitions
from ..session import MatchManager, MatchNotFoundError, MatchSession

logger = logging.getLogger(__name__)


@dataclass
class MatchService:
    """
    Match API for any transport.

    Usage:
        service = MatchService()

        state = service.create_match(CreateMatchRequest(seed=42))
        service.submit_cards(state.match_id, SubmitCardsRequest(...), viewer_seat=0)
        service.pick(state.match_id, PickRequest(choose_face_up=True), viewer_seat=1)
    """
    manager: MatchManager = field(default_factory=MatchManager)

    def create_match(self, request: CreateMatchRequest) -> MatchStateResponse:
        names = None
        if request.player_a_name or request.player_b_name:
            names = (request.player_a_name, request.player_b_name)
        session = self.manager.create_match(seed=request.seed, player_names=names)
        return self._state_response(session, viewer_seat=None)

    def get_state(
        self,
        match_id: str,
        viewer_seat: int | None = None,
    ) -> MatchStateResponse | ErrorResponse:
        return self._guarded(
            match_id, lambda session: self._state_response(session, viewer_seat)
        )

    def submit_cards(
        self,
        match_id: str,
        request: SubmitCardsRequest,
        viewer_seat: int | None = None,
    ) -> MatchStateResponse | ErrorResponse:
        """Offer two cards for the active player."""
        def run(session: MatchSession):
            with session.lock:
                state = session.state
                if viewer_seat is not None and viewer_seat != state.active_index:
                    return _invalid("It is not this seat's turn to offer cards")
                if request.face_up_id == request.face_down_id:
                    return _invalid("Face-up and face-down cards must differ")
                active = state.active_player
                if state.phase is Phase.PLAY_TWO_CARDS and not active.skip_next_turn and active.hand:
                    missing = [
                        cid for cid in (request.face_up_id, request.face_down_id)
                        if cid not in active.hand
                    ]
                    if missing:
                        return _invalid(
                            f"Cards not in hand: {', '.join(missing)}",
                            details={"missing": missing},
                        )
                session.submit_two_cards(request.face_up_id, request.face_down_id)
                return self._state_response(session, viewer_seat)

        return self._guarded(match_id, run)

    def submit_random(self, match_id: str) -> MatchStateResponse | ErrorResponse:
        """Offer two random hand slots for the active player (timeouts, bots)."""
        def run(session: MatchSession):
            session.submit_random()
            return self._state_response(session, None)

        return self._guarded(match_id, run)

    def pick(
        self,
        match_id: str,
        request: PickRequest,
        viewer_seat: int | None = None,
    ) -> MatchStateResponse | ErrorResponse:
        """The opponent's pick; resolves the turn."""
        def run(session: MatchSession):
            with session.lock:
                if viewer_seat is not None and viewer_seat == session.state.active_index:
                    return _invalid("The offering player cannot pick")
                session.pick(request.choose_face_up)
                return self._state_response(session, viewer_seat)

        return self._guarded(match_id, run)

    def pick_random(self, match_id: str) -> MatchStateResponse | ErrorResponse:
        def run(session: MatchSession):
            session.pick_random()
            return self._state_response(session, None)

        return self._guarded(match_id, run)

    def get_replay(self, match_id: str) -> ReplayResponse | ErrorResponse:
        return self._guarded(
            match_id, lambda session: ReplayResponse(**session.replay().to_dict())
        )

    def end_match(self, match_id: str) -> ReplayResponse | ErrorResponse:
        """End a match and hand back its replay."""
        try:
            session = self.manager.end_match(match_id)
        except MatchNotFoundError as e:
            return _not_found(e)
        return ReplayResponse(**session.replay().to_dict())

    def get_catalog(self) -> CardCatalogResponse:
        """Export every card definition."""
        definitions = self.manager.definitions or resolve_definitions(self.manager.config)
        return CardCatalogResponse(
            schema_version=definitions.schema_version,
            cards=[CardInfo(**card.to_dict()) for card in definitions.cards],
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _guarded(self, match_id: str, fn: Callable[[MatchSession], object]):
        try:
            session = self.manager.get_match(match_id)
            return fn(session)
        except MatchNotFoundError as e:
            return _not_found(e)
        except InvalidPhaseError as e:
            logger.info("Rejected command on match %s: %s", match_id, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_PHASE,
                details={"expected": e.expected.value, "actual": e.actual.value},
            )
        except CatalogConsistencyError as e:
            logger.error("Match %s referenced unknown card %s", match_id, e.card_id)
            return _invalid(str(e), details={"card_id": e.card_id})

    def _state_response(
        self,
        session: MatchSession,
        viewer_seat: int | None,
    ) -> MatchStateResponse:
        return session.read(
            lambda state: build_state_response(
                session.match_id, session.status.value, state, viewer_seat
            )
        )


def build_state_response(
    match_id: str,
    status: str,
    state: MatchState,
    viewer_seat: int | None = None,
) -> MatchStateResponse:
    """Project a MatchState into the view seen from viewer_seat (None for spectators)."""
    pick_pending = state.phase is Phase.OPPONENT_PICK
    hide_face_down = pick_pending and viewer_seat != state.active_index

    players = []
    for player in state.players:
        players.append(PlayerView(
            seat=player.seat,
            name=player.name,
            hand=list(player.hand) if viewer_seat == player.seat else None,
            hand_count=len(player.hand),
            deck_count=len(player.deck),
            tableau=list(player.tableau),
            discard_count=len(player.discard),
            max_hand_size=player.max_hand_size,
            skip_next_turn=player.skip_next_turn,
            draw_block_count=player.draw_block_count,
            extra_face_down_plays=player.extra_face_down_plays,
            extra_turns=player.extra_turns,
            statuses=[
                StatusInfo(kind=kind.value, magnitude=e.magnitude, duration=e.duration)
                for kind, e in player.statuses.entries.items()
            ],
            revealed=list(state.revealed[player.seat]),
            recently_added=list(state.recently_added[player.seat]),
        ))

    self_momentum = None
    if viewer_seat is not None:
        self_momentum = state.momentum if viewer_seat == 0 else -state.momentum

    return MatchStateResponse(
        match_id=match_id,
        status=MatchStatusValue(status),
        phase=MatchPhase(state.phase.value),
        momentum=state.momentum,
        self_momentum=self_momentum,
        win_threshold=state.win_threshold,
        active_index=state.active_index,
        winner_index=state.winner_index(),
        viewer_seat=viewer_seat,
        can_submit=state.phase is Phase.PLAY_TWO_CARDS and viewer_seat == state.active_index,
        can_pick=pick_pending and viewer_seat is not None and viewer_seat != state.active_index,
        face_up_id=state.face_up_id,
        face_down_id=None if hide_face_down else state.face_down_id,
        players=players,
        feedback=[FeedbackInfo.model_validate(f) for f in state.feedback],
    )


def _invalid(message: str, details: dict | None = None) -> ErrorResponse:
    return ErrorResponse(error=message, error_code=ErrorCode.INVALID_REQUEST, details=details)


def _not_found(e: MatchNotFoundError) -> ErrorResponse:
    return ErrorResponse(
        error=str(e),
        error_code=ErrorCode.MATCH_NOT_FOUND,
        details={"match_id": e.match_id},
    )
