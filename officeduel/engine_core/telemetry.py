"""
Telemetry - Match lifecycle events for an optional observer.

The turn engine emits:
- MatchStart when a match begins
- CardPlayed after each card resolves (tier is 1-based)
- MatchEnd once, when a winner is first detected
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchStart:
    seed: int


@dataclass(frozen=True)
class CardPlayed:
    player_index: int
    card_id: str
    tier: int


@dataclass(frozen=True)
class MatchEnd:
    winner_index: int
    momentum: int


TelemetryEvent = Union[MatchStart, CardPlayed, MatchEnd]


class Telemetry(ABC):
    """Receiver for match events. Implementations must not touch match state."""

    @abstractmethod
    def emit(self, event: TelemetryEvent) -> None:
        pass


class LoggingTelemetry(Telemetry):
    """Writes every event to the module logger at INFO."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def emit(self, event: TelemetryEvent) -> None:
        if isinstance(event, MatchStart):
            self.log.info("match start seed=%d", event.seed)
        elif isinstance(event, CardPlayed):
            self.log.info(
                "card played player=%d card=%s tier=%d",
                event.player_index, event.card_id, event.tier,
            )
        elif isinstance(event, MatchEnd):
            self.log.info(
                "match end winner=%d momentum=%d", event.winner_index, event.momentum,
            )
