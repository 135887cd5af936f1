"""
Match Manager - Creates and serializes access to matches.

A match is a single-writer state machine: two commands interleaving on
the same match would interleave generator draws and break replay. Each
MatchSession therefore owns its engine together with a lock, and every
command runs under that lock. Distinct matches share nothing and may be
driven from different threads freely.

PERSISTENCE RULES:
- Matches live in memory only
- Ending a match drops it from the registry
- A finished match can be exported with replay() before it is ended
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
import time
from typing import Callable, TypeVar
import uuid

from ..card_schema.definitions import CardDefinitionSet
from ..config import EngineConfig
from ..engine_core.replay import Replay, build_replay
from ..engine_core.state import MatchState
from ..engine_core.telemetry import Telemetry
from ..engine_core.turn_engine import TurnEngine
from ..games.office.setup import setup_office_match

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MatchNotFoundError(KeyError):
    """No match with that id is registered."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(match_id)

    def __str__(self) -> str:
        return f"Match not found: {self.match_id}"


class MatchStatus(Enum):
    """Lifecycle of a match session."""
    ACTIVE = "active"  # Turns are being played
    FINISHED = "finished"  # A side reached the threshold
    ENDED = "ended"  # Removed from the registry


@dataclass
class MatchSession:
    """
    One match and the lock that guards it.

    All reads and writes of engine.state should go through the command
    methods or read(), never directly from another thread.
    """
    match_id: str
    engine: TurnEngine
    created_at: float
    status: MatchStatus = MatchStatus.ACTIVE
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def state(self) -> MatchState:
        return self.engine.state

    @property
    def lock(self) -> threading.RLock:
        """The match lock. Re-entrant, so commands may be issued while holding it."""
        return self._lock

    def is_active(self) -> bool:
        return self.status is MatchStatus.ACTIVE

    def _command(self, fn: Callable[[], T]) -> T:
        with self._lock:
            result = fn()
            if self.status is MatchStatus.ACTIVE and self.engine.winner_index() is not None:
                self.status = MatchStatus.FINISHED
                logger.info("Match %s finished, winner %d", self.match_id, self.engine.winner_index())
            return result

    def submit_two_cards(self, face_up_id: str, face_down_id: str) -> None:
        self._command(lambda: self.engine.submit_two_cards(face_up_id, face_down_id))

    def submit_random(self) -> tuple[str, str] | None:
        return self._command(self.engine.submit_random)

    def pick(self, choose_face_up: bool) -> None:
        self._command(lambda: self.engine.pick(choose_face_up))

    def pick_random(self) -> bool:
        return self._command(self.engine.pick_random)

    def play_turn_auto(self) -> None:
        self._command(self.engine.play_turn_auto)

    def set_player_names(self, name_a: str | None, name_b: str | None) -> None:
        with self._lock:
            self.engine.set_player_names(name_a, name_b)

    def read(self, fn: Callable[[MatchState], T]) -> T:
        """Run fn against the state under the match lock."""
        with self._lock:
            return fn(self.engine.state)

    def replay(self) -> Replay:
        with self._lock:
            return build_replay(self.engine.state)


class MatchManager:
    """
    In-memory registry of matches.

    Responsibilities:
    - Create matches from a config and card set
    - Look matches up by id
    - Clean up ended or stale matches
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        definitions: CardDefinitionSet | None = None,
        telemetry: Telemetry | None = None,
    ):
        self.config = config or EngineConfig()
        self.definitions = definitions
        self.telemetry = telemetry
        self._sessions: dict[str, MatchSession] = {}
        self._lock = threading.Lock()

    def create_match(
        self,
        seed: int | None = None,
        player_names: tuple[str, str] | None = None,
    ) -> MatchSession:
        """
        Create and start a new match.

        Args:
            seed: Match seed; a fresh one is generated if not given
            player_names: Names for side A and side B

        Returns:
            The registered MatchSession
        """
        if seed is None:
            seed = uuid.uuid4().int & 0x7FFFFFFF
        engine = setup_office_match(
            seed,
            config=self.config,
            definitions=self.definitions,
            player_names=player_names,
            telemetry=self.telemetry,
        )
        session = MatchSession(
            match_id=str(uuid.uuid4()),
            engine=engine,
            created_at=time.time(),
        )
        with self._lock:
            self._sessions[session.match_id] = session
        logger.info("Created match %s (seed %d)", session.match_id, seed)
        return session

    def get_match(self, match_id: str) -> MatchSession:
        """Get a match by ID. Raises MatchNotFoundError if unknown."""
        with self._lock:
            session = self._sessions.get(match_id)
        if session is None:
            raise MatchNotFoundError(match_id)
        return session

    def end_match(self, match_id: str) -> MatchSession:
        """Remove a match from the registry and return it."""
        with self._lock:
            session = self._sessions.pop(match_id, None)
        if session is None:
            raise MatchNotFoundError(match_id)
        session.status = MatchStatus.ENDED
        logger.info("Ended match %s", match_id)
        return session

    def list_active_matches(self) -> list[str]:
        """List IDs of matches still being played."""
        with self._lock:
            return [mid for mid, s in self._sessions.items() if s.is_active()]

    def cleanup_stale_matches(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End finished matches older than max_age_seconds.

        Returns the ids that were removed.
        """
        now = time.time()
        with self._lock:
            stale = [
                mid for mid, s in self._sessions.items()
                if now - s.created_at > max_age_seconds and not s.is_active()
            ]
        for match_id in stale:
            self.end_match(match_id)
        return stale

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
