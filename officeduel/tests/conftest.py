"""
Pytest fixtures for Office Duel tests.
"""

import pytest

from ..card_schema.definitions import CardDefinition, CardDefinitionSet, Tier
from ..card_schema.effect_dsl import (
    DamageAction,
    NoopAction,
    PushAction,
    SkipNextTurnAction,
    Target,
)
from ..engine_core.catalog import CardCatalog
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.state import MatchState
from ..engine_core.telemetry import Telemetry
from ..engine_core.turn_engine import TurnEngine


def make_card(card_id: str, *tiers: list, name: str | None = None) -> CardDefinition:
    """Build a card from lists of actions, one list per tier."""
    return CardDefinition(
        id=card_id,
        name=name or card_id.title(),
        tiers=tuple(Tier(actions=tuple(t)) for t in tiers),
    )


class RecordingTelemetry(Telemetry):
    """Collects emitted events in order."""

    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)


@pytest.fixture
def test_definitions() -> CardDefinitionSet:
    """Small card set with predictable effects."""
    return CardDefinitionSet(
        schema_version=1,
        cards=(
            make_card("NOOP", [NoopAction()]),
            make_card("PUSH1", [PushAction(target=Target.SELF, amount=1)]),
            make_card("PUSH_OPP", [PushAction(target=Target.OPPONENT, amount=1)]),
            make_card(
                "TIERED",
                [PushAction(target=Target.SELF, amount=1)],
                [PushAction(target=Target.SELF, amount=2)],
                [PushAction(target=Target.SELF, amount=3)],
            ),
            make_card("BIG", [PushAction(target=Target.SELF, amount=10)]),
            make_card("HIT", [DamageAction(target=Target.OPPONENT, amount=1)]),
            make_card("SLEEP", [SkipNextTurnAction(target=Target.OPPONENT)]),
        ),
    )


@pytest.fixture
def catalog(test_definitions) -> CardCatalog:
    return CardCatalog(test_definitions)


@pytest.fixture
def state() -> MatchState:
    """A fresh match with empty decks, seed 1, threshold 5."""
    return MatchState.new(seed=1)


@pytest.fixture
def resolver(state) -> EffectResolver:
    return EffectResolver(state)


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    return RecordingTelemetry()


@pytest.fixture
def make_engine(catalog, telemetry):
    """Factory: engine over a match with the given decks (front of list is top of deck)."""
    def factory(deck_a=(), deck_b=(), seed=1, **kwargs) -> TurnEngine:
        match = MatchState.new(seed, list(deck_a), list(deck_b), **kwargs)
        return TurnEngine(match, catalog, telemetry=telemetry)
    return factory
