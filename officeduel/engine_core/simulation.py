"""
Simulation - Seeded batches of auto-vs-auto matches.

Match m of a batch is seeded with seed + m, so any single match can be
reproduced on its own. Useful for balancing a card set: a heavily
lopsided win split or many unfinished matches point at a problem.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..card_schema.definitions import CardDefinitionSet
from ..config import DEFAULT_DECK_SIZE, DEFAULT_MAX_HAND_SIZE, DEFAULT_WIN_THRESHOLD
from .catalog import CardCatalog
from .state import MatchState, SIDE_A, SIDE_B
from .turn_engine import TurnEngine

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 200


@dataclass
class SimulationResult:
    a_wins: int = 0
    b_wins: int = 0
    unfinished: int = 0
    matches: int = 0
    total_turns: int = 0

    @property
    def average_turns(self) -> float:
        return self.total_turns / self.matches if self.matches else 0.0


def simulate_match(
    catalog: CardCatalog,
    seed: int,
    deck_size: int = DEFAULT_DECK_SIZE,
    max_turns: int = DEFAULT_MAX_TURNS,
    win_threshold: int = DEFAULT_WIN_THRESHOLD,
    max_hand_size: int = DEFAULT_MAX_HAND_SIZE,
) -> tuple[MatchState, int]:
    """
    Play one match with random offers and random picks.

    Stops at a winner, after max_turns turns, or once neither player can
    ever play again. Returns the final state and the number of turns.
    """
    state = MatchState.new(seed, win_threshold=win_threshold, max_hand_size=max_hand_size)
    state.deal(catalog.card_ids(), deck_size)
    engine = TurnEngine(state, catalog)
    engine.start_match()

    turns = 0
    while turns < max_turns and engine.winner_index() is None:
        if not any(p.hand or p.deck for p in state.players):
            break
        engine.play_turn_auto()
        turns += 1
    return state, turns


def run_simulation(
    definitions: CardDefinitionSet,
    seed: int,
    matches: int,
    deck_size: int = DEFAULT_DECK_SIZE,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> SimulationResult:
    """Run a batch of matches and tally the outcomes."""
    catalog = CardCatalog(definitions)
    result = SimulationResult()
    for m in range(matches):
        state, turns = simulate_match(catalog, seed + m, deck_size=deck_size, max_turns=max_turns)
        winner = state.winner_index()
        if winner == SIDE_A:
            result.a_wins += 1
        elif winner == SIDE_B:
            result.b_wins += 1
        else:
            result.unfinished += 1
        result.matches += 1
        result.total_turns += turns
        logger.debug("match %d seed=%d winner=%s turns=%d", m, seed + m, winner, turns)

    logger.info(
        "Simulated %d matches: A=%d B=%d unfinished=%d",
        result.matches, result.a_wins, result.b_wins, result.unfinished,
    )
    return result
