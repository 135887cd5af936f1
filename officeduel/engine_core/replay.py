"""
Replay snapshot - what an external serializer needs to reconstruct a match.

The engine never writes files. A replay is the seed, the decks as they
stood before the opening draw, the textual history and the outcome.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .state import MatchState


@dataclass(frozen=True)
class Replay:
    seed: int
    deck_a: list[str] = field(default_factory=list)
    deck_b: list[str] = field(default_factory=list)
    history: list[str] = field(default_factory=list)
    final_momentum: int = 0
    winner_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "deck_a": list(self.deck_a),
            "deck_b": list(self.deck_b),
            "history": list(self.history),
            "final_momentum": self.final_momentum,
            "winner_index": self.winner_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Replay:
        return cls(
            seed=data["seed"],
            deck_a=list(data.get("deck_a", [])),
            deck_b=list(data.get("deck_b", [])),
            history=list(data.get("history", [])),
            final_momentum=data.get("final_momentum", 0),
            winner_index=data.get("winner_index"),
        )


def build_replay(state: MatchState) -> Replay:
    """Snapshot a match (finished or not) for replay storage."""
    return Replay(
        seed=state.seed,
        deck_a=list(state.initial_decks[0]),
        deck_b=list(state.initial_decks[1]),
        history=list(state.history),
        final_momentum=state.momentum,
        winner_index=state.winner_index(),
    )
