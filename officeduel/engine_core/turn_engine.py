"""
Turn Engine - Phase state machine for a match.

A turn runs:
1. PLAY_TWO_CARDS: the active player offers a face-up and a face-down card
2. OPPONENT_PICK: the opponent takes one of them blind
3. RESOLUTION (internal): the remaining card resolves for the active
   player, then the picked card for the opponent; both land in their
   recipients' tableaus and the active player refills
4. END_STEP (internal): statuses decay and the active player flips

Momentum is read live after every card, but the winner is only announced
at the end step, so a turn whose second card pulls momentum back from the
threshold does not end the match. Once a side has won the engine
stops flipping turns and decaying statuses, but it does not refuse
further commands; callers check winner_index() first.
"""

from __future__ import annotations
import logging

from .catalog import CardCatalog
from .effect_resolver import EffectResolver
from .errors import InvalidPhaseError
from .state import MatchState, Phase, PlayerState, DEFAULT_PLAYER_NAMES
from .telemetry import CardPlayed, MatchEnd, MatchStart, Telemetry

logger = logging.getLogger(__name__)


class TurnEngine:
    """Drives one MatchState. Not thread-safe; see session.MatchSession."""

    def __init__(
        self,
        state: MatchState,
        catalog: CardCatalog,
        telemetry: Telemetry | None = None,
    ):
        self.state = state
        self.catalog = catalog
        self.telemetry = telemetry
        self.resolver = EffectResolver(state)
        self._winner_reported = False

    def set_player_names(self, name_a: str | None = None, name_b: str | None = None) -> None:
        """Set the names used in feedback. None restores the default."""
        self.state.player_a.name = name_a or DEFAULT_PLAYER_NAMES[0]
        self.state.player_b.name = name_b or DEFAULT_PLAYER_NAMES[1]

    def winner_index(self) -> int | None:
        return self.state.winner_index()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start_match(self) -> None:
        """
        Reset both players and deal opening hands.

        Call once per match. The decks as they stand before the opening
        draw are kept for replays.
        """
        state = self.state
        state.initial_decks = [list(p.deck) for p in state.players]
        for player in state.players:
            player.reset()
        for player in state.players:
            player.draw_up_to_max()
        state.phase = Phase.PLAY_TWO_CARDS
        state.log(f"Match started (seed {state.seed})")
        logger.info(
            "Match started: seed=%d threshold=%d decks=%d/%d",
            state.seed, state.win_threshold,
            len(state.initial_decks[0]), len(state.initial_decks[1]),
        )
        self._emit(MatchStart(seed=state.seed))

    def submit_two_cards(self, face_up_id: str, face_down_id: str) -> None:
        """
        Offer two cards from the active player's hand.

        Offering the same id twice is allowed here; rejecting it is up to
        the caller. If the active player must skip this turn, or has no
        cards, the turn ends without a pick.
        """
        if not self._begin_submission():
            return
        self._offer(face_up_id, face_down_id)

    def submit_random(self) -> tuple[str, str] | None:
        """
        Offer two distinct hand slots chosen by the match generator.

        Returns the (face_up, face_down) ids offered, or None if the turn
        ended without an offer.
        """
        if not self._begin_submission():
            return None
        hand = self.state.active_player.hand
        h = len(hand)
        idx_up = self.state.rng.next_int(h)
        idx_down = (idx_up + 1 + self.state.rng.next_int(h - 1)) % h if h > 1 else idx_up
        self._offer(hand[idx_up], hand[idx_down])
        return hand[idx_up], hand[idx_down]

    def pick(self, choose_face_up: bool) -> None:
        """The opponent takes the face-up card (True) or the face-down card (False)."""
        self._require_phase(Phase.OPPONENT_PICK)
        face_up, face_down = self.state.face_up_id, self.state.face_down_id
        if choose_face_up:
            self.resolve_pick(face_up, face_down)
        else:
            self.resolve_pick(face_down, face_up)

    def pick_random(self) -> bool:
        """Pick with the match generator. Returns whether the face-up card was taken."""
        self._require_phase(Phase.OPPONENT_PICK)
        choose_face_up = self.state.rng.next_boolean()
        self.pick(choose_face_up)
        return choose_face_up

    def resolve_pick(self, picked_id: str, remaining_id: str) -> None:
        """
        Resolve both offered cards and finish the turn.

        The remaining card resolves first, credited to the active player,
        then the picked card, credited to the opponent.
        """
        self._require_phase(Phase.OPPONENT_PICK)
        state = self.state
        state.phase = Phase.RESOLUTION
        active = state.active_player
        opponent = state.inactive_player

        self._resolve_card(remaining_id, active, opponent)
        self._resolve_card(picked_id, opponent, active)

        active.tableau.append(remaining_id)
        opponent.tableau.append(picked_id)
        state.recently_added[active.seat].append(remaining_id)
        state.recently_added[opponent.seat].append(picked_id)

        active.remove_first_from_hand(state.face_up_id)
        if state.face_down_id != state.face_up_id:
            active.remove_first_from_hand(state.face_down_id)
        active.draw_up_to_max()

        state.phase = Phase.PLAY_TWO_CARDS
        state.clear_pending()
        self._end_step()

    def play_turn_auto(self) -> None:
        """Random offer and random pick, as one command."""
        self.submit_random()
        if self.state.phase is Phase.OPPONENT_PICK:
            self.pick_random()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _begin_submission(self) -> bool:
        """Common start of a submission. Returns False if the turn already ended."""
        self._require_phase(Phase.PLAY_TWO_CARDS)
        self.state.clear_recently_added()
        active = self.state.active_player

        if active.skip_next_turn:
            active.skip_next_turn = False
            self.state.log(f"{active.name} skips the turn")
            logger.debug("%s skips the turn", active.name)
            self._end_step()
            return False

        if not active.hand:
            self.state.log(f"{active.name} has no cards to play")
            logger.debug("%s has an empty hand, turn ends", active.name)
            self._end_step()
            return False

        return True

    def _offer(self, face_up_id: str, face_down_id: str) -> None:
        self.state.face_up_id = face_up_id
        self.state.face_down_id = face_down_id
        self.state.phase = Phase.OPPONENT_PICK
        logger.debug(
            "%s offers %s (up) / %s (down)",
            self.state.active_player.name, face_up_id, face_down_id,
        )

    def _resolve_card(self, card_id: str, recipient: PlayerState, other: PlayerState) -> None:
        card = self.catalog.get(card_id)
        tier_index, tier = self.catalog.tier_for(card_id, recipient.copies_in_tableau(card_id))
        self.state.log(f"{recipient.name} plays {card.name} (tier {tier_index + 1})")
        self.resolver.apply_actions(tier.actions, recipient, other, card_name=card.name)
        self._emit(CardPlayed(player_index=recipient.seat, card_id=card_id, tier=tier_index + 1))

    def _check_winner(self) -> int | None:
        winner = self.state.winner_index()
        if winner is None:
            self._winner_reported = False
        elif not self._winner_reported:
            self._winner_reported = True
            name = self.state.players[winner].name
            self.state.log(f"{name} wins (momentum {self.state.momentum})")
            logger.info("Winner: %s (momentum %d)", name, self.state.momentum)
            self._emit(MatchEnd(winner_index=winner, momentum=self.state.momentum))
        return winner

    def _end_step(self) -> None:
        state = self.state
        state.phase = Phase.END_STEP
        if self._check_winner() is not None:
            state.phase = Phase.PLAY_TWO_CARDS
            return
        for player in state.players:
            player.statuses.tick_end_of_turn()
        state.swap_active()
        state.phase = Phase.PLAY_TWO_CARDS
        logger.debug("Turn passes to %s", state.active_player.name)

    def _require_phase(self, expected: Phase) -> None:
        if self.state.phase is not expected:
            raise InvalidPhaseError(expected, self.state.phase)

    def _emit(self, event) -> None:
        if self.telemetry is not None:
            self.telemetry.emit(event)
