"""
Match State - Mutable containers for one match in progress.

Design principles:
- Single writer: a match is mutated only by its TurnEngine and the
  EffectResolver it drives
- Fixed sides: seat 0 is side A, seat 1 is side B; momentum is always
  expressed from A's perspective (+threshold means A has won)
- Observable: effect feedback, reveals, recently-added cards and a
  textual history are recorded but never read back by the engine
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
import time
from typing import Callable, Sequence

from ..card_schema.effect_dsl import CardAction
from ..config import (
    DEFAULT_FEEDBACK_CAPACITY,
    DEFAULT_MAX_HAND_SIZE,
    DEFAULT_WIN_THRESHOLD,
)
from .rng import DeterministicRng
from .statuses import StatusLedger

SIDE_A = 0
SIDE_B = 1
DEFAULT_PLAYER_NAMES = ("Player A", "Player B")


class Phase(Enum):
    """Turn phases. RESOLUTION and END_STEP are only held during a command."""
    PLAY_TWO_CARDS = "play_two_cards"
    OPPONENT_PICK = "opponent_pick"
    RESOLUTION = "resolution"
    END_STEP = "end_step"


@dataclass
class PlayerState:
    """
    One side of the table.

    The deck is drawn from the front. The hand is an unordered bag that
    may hold several copies of one id. The tableau keeps play order.
    """
    seat: int
    name: str
    deck: deque[str] = field(default_factory=deque)
    hand: list[str] = field(default_factory=list)
    tableau: list[str] = field(default_factory=list)
    discard: list[str] = field(default_factory=list)
    max_hand_size: int = DEFAULT_MAX_HAND_SIZE
    skip_next_turn: bool = False
    draw_block_count: int = 0
    extra_face_down_plays: int = 0
    extra_turns: int = 0
    statuses: StatusLedger = field(default_factory=StatusLedger)

    @property
    def hand_full(self) -> bool:
        return len(self.hand) >= self.max_hand_size

    def consume_draw_block(self) -> bool:
        """Use up one pending draw-block charge, if any."""
        if self.draw_block_count > 0:
            self.draw_block_count -= 1
            return True
        return False

    def draw_one(self) -> str | None:
        """Move the top deck card into the hand. None if the deck is empty."""
        if not self.deck:
            return None
        card_id = self.deck.popleft()
        self.hand.append(card_id)
        return card_id

    def draw_up_to_max(self) -> int:
        """
        Refill the hand to max_hand_size.

        Each pending draw block swallows one draw. Stops when the hand is
        full or the deck runs out. Returns the number of cards drawn.
        """
        drawn = 0
        while len(self.hand) < self.max_hand_size and self.deck:
            if self.consume_draw_block():
                continue
            self.draw_one()
            drawn += 1
        return drawn

    def remove_first_from_hand(self, card_id: str) -> bool:
        try:
            self.hand.remove(card_id)
        except ValueError:
            return False
        return True

    def copies_in_tableau(self, card_id: str) -> int:
        return self.tableau.count(card_id)

    def reset(self) -> None:
        """Clear everything except the deck and hand size, ready for a new match."""
        self.hand.clear()
        self.tableau.clear()
        self.discard.clear()
        self.skip_next_turn = False
        self.draw_block_count = 0
        self.extra_face_down_plays = 0
        self.extra_turns = 0
        self.statuses.clear()


@dataclass
class EffectFeedback:
    """One entry in the bounded effect feed."""
    player_name: str
    card_name: str
    description: str
    momentum_delta: int
    timestamp: float

    def to_dict(self) -> dict:
        return {
            "player_name": self.player_name,
            "card_name": self.card_name,
            "description": self.description,
            "momentum_delta": self.momentum_delta,
            "timestamp": self.timestamp,
        }


@dataclass
class MatchState:
    """
    Complete state of one match.

    last_actions holds, per seat, the most recent action batch that seat
    applied; copy_last_card_effect replays it.
    """
    rng: DeterministicRng
    players: list[PlayerState]
    win_threshold: int = DEFAULT_WIN_THRESHOLD
    momentum: int = 0
    active_index: int = SIDE_A
    phase: Phase = Phase.PLAY_TWO_CARDS
    face_up_id: str | None = None
    face_down_id: str | None = None
    last_actions: list[tuple[CardAction, ...]] = field(default_factory=lambda: [(), ()])
    feedback_capacity: int = DEFAULT_FEEDBACK_CAPACITY
    feedback: deque[EffectFeedback] = field(default_factory=deque)
    recently_added: list[list[str]] = field(default_factory=lambda: [[], []])
    revealed: list[list[str]] = field(default_factory=lambda: [[], []])
    history: list[str] = field(default_factory=list)
    initial_decks: list[list[str]] = field(default_factory=lambda: [[], []])
    clock: Callable[[], float] = time.time
    _feedback_baseline: int = field(default=0, init=False, repr=False)

    def __post_init__(self):
        if len(self.players) != 2:
            raise ValueError("A match has exactly two players")
        self.feedback = deque(self.feedback, maxlen=self.feedback_capacity)

    @classmethod
    def new(
        cls,
        seed: int,
        deck_a: list[str] | None = None,
        deck_b: list[str] | None = None,
        win_threshold: int = DEFAULT_WIN_THRESHOLD,
        max_hand_size: int = DEFAULT_MAX_HAND_SIZE,
        feedback_capacity: int = DEFAULT_FEEDBACK_CAPACITY,
    ) -> MatchState:
        """Create a match with the given seed and pre-built decks."""
        players = [
            PlayerState(
                seat=seat,
                name=DEFAULT_PLAYER_NAMES[seat],
                deck=deque(deck or []),
                max_hand_size=max_hand_size,
            )
            for seat, deck in ((SIDE_A, deck_a), (SIDE_B, deck_b))
        ]
        return cls(
            rng=DeterministicRng(seed),
            players=players,
            win_threshold=win_threshold,
            feedback_capacity=feedback_capacity,
        )

    def deal(self, card_ids: Sequence[str], deck_size: int) -> None:
        """
        Fill both decks from the match generator.

        Each slot draws one id for A, then one for B, and puts it on the
        front of that deck, so dealing is replayable from the seed.
        """
        for _ in range(deck_size):
            idx_a = self.rng.next_int(len(card_ids))
            idx_b = self.rng.next_int(len(card_ids))
            self.player_a.deck.appendleft(card_ids[idx_a])
            self.player_b.deck.appendleft(card_ids[idx_b])

    @property
    def seed(self) -> int:
        return self.rng.seed

    @property
    def player_a(self) -> PlayerState:
        return self.players[SIDE_A]

    @property
    def player_b(self) -> PlayerState:
        return self.players[SIDE_B]

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.active_index]

    @property
    def inactive_player(self) -> PlayerState:
        return self.players[1 - self.active_index]

    def other(self, player: PlayerState) -> PlayerState:
        return self.players[1 - player.seat]

    # -------------------------------------------------------------------------
    # Momentum
    # -------------------------------------------------------------------------

    def add_momentum(self, delta: int) -> int:
        """Add delta and clamp to the threshold. Returns the change actually applied."""
        before = self.momentum
        self.momentum = max(-self.win_threshold, min(self.win_threshold, before + delta))
        return self.momentum - before

    def set_momentum(self, value: int) -> None:
        self.momentum = max(-self.win_threshold, min(self.win_threshold, value))

    def winner_index(self) -> int | None:
        """SIDE_A at +threshold, SIDE_B at -threshold, otherwise None."""
        if self.momentum >= self.win_threshold:
            return SIDE_A
        if self.momentum <= -self.win_threshold:
            return SIDE_B
        return None

    # -------------------------------------------------------------------------
    # Turn bookkeeping
    # -------------------------------------------------------------------------

    def swap_active(self) -> None:
        self.active_index = 1 - self.active_index

    def clear_pending(self) -> None:
        self.face_up_id = None
        self.face_down_id = None

    def clear_recently_added(self) -> None:
        for cards in self.recently_added:
            cards.clear()

    # -------------------------------------------------------------------------
    # Observability
    # -------------------------------------------------------------------------

    def add_feedback(self, player_name: str, card_name: str, description: str) -> EffectFeedback:
        """Append to the effect feed. momentum_delta covers everything since the previous entry."""
        entry = EffectFeedback(
            player_name=player_name,
            card_name=card_name,
            description=description,
            momentum_delta=self.momentum - self._feedback_baseline,
            timestamp=self.clock(),
        )
        self._feedback_baseline = self.momentum
        self.feedback.append(entry)
        return entry

    def log(self, message: str) -> None:
        self.history.append(message)
