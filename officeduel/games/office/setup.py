"""
Office Duel Setup - Creates a ready-to-play match.

This module handles:
- Choosing the card set (built-in or a JSON file from the config)
- Dealing both decks from the match seed
- Wiring the catalog, state and turn engine together
- The opening draw
"""

from __future__ import annotations
import logging

from ...card_schema.definitions import CardDefinitionSet
from ...card_schema.loader import load_definition_set
from ...config import EngineConfig
from ...engine_core.catalog import CardCatalog
from ...engine_core.state import MatchState
from ...engine_core.telemetry import Telemetry
from ...engine_core.turn_engine import TurnEngine
from .cards import get_definition_set

logger = logging.getLogger(__name__)


def resolve_definitions(config: EngineConfig) -> CardDefinitionSet:
    """The configured card file if there is one, otherwise the built-in set."""
    if config.cards_path:
        return load_definition_set(config.cards_path)
    return get_definition_set()


def setup_office_match(
    seed: int,
    config: EngineConfig | None = None,
    definitions: CardDefinitionSet | None = None,
    player_names: tuple[str, str] | None = None,
    telemetry: Telemetry | None = None,
    start: bool = True,
) -> TurnEngine:
    """
    Set up a new match.

    Args:
        seed: Seed for dealing and every later random choice
        config: Match tunables (defaults if not provided)
        definitions: Card set (resolved from config if not provided)
        player_names: Names for side A and side B
        telemetry: Optional event sink
        start: Deal opening hands immediately

    Returns:
        TurnEngine driving the new match; its state is engine.state
    """
    config = config or EngineConfig()
    definitions = definitions or resolve_definitions(config)
    catalog = CardCatalog(definitions)

    state = MatchState.new(
        seed,
        win_threshold=config.win_threshold,
        max_hand_size=config.max_hand_size,
        feedback_capacity=config.feedback_capacity,
    )
    state.deal(catalog.card_ids(), config.deck_size)

    engine = TurnEngine(state, catalog, telemetry=telemetry)
    if player_names:
        engine.set_player_names(*player_names)
    logger.debug("Set up match seed=%d with %d card types", seed, len(catalog))
    if start:
        engine.start_match()
    return engine
