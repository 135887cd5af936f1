"""
Engine Core - Deterministic match state and effect resolution.

The engine is the runtime that:
1. Indexes a validated card definition set (CardCatalog)
2. Holds MatchState and both PlayerStates
3. Resolves card actions (EffectResolver)
4. Drives the turn/phase machine (TurnEngine)
"""

from .rng import DeterministicRng
from .catalog import CardCatalog
from .statuses import StatusLedger, StatusEntry
from .state import MatchState, PlayerState, Phase, EffectFeedback, SIDE_A, SIDE_B
from .errors import EngineError, InvalidPhaseError, CatalogConsistencyError
from .effect_resolver import EffectResolver
from .turn_engine import TurnEngine
from .telemetry import Telemetry, LoggingTelemetry, MatchStart, CardPlayed, MatchEnd
from .replay import Replay, build_replay
from .simulation import SimulationResult, run_simulation, simulate_match

__all__ = [
    "DeterministicRng",
    "CardCatalog",
    "StatusLedger",
    "StatusEntry",
    "MatchState",
    "PlayerState",
    "Phase",
    "EffectFeedback",
    "SIDE_A",
    "SIDE_B",
    "EngineError",
    "InvalidPhaseError",
    "CatalogConsistencyError",
    "EffectResolver",
    "TurnEngine",
    "Telemetry",
    "LoggingTelemetry",
    "MatchStart",
    "CardPlayed",
    "MatchEnd",
    "Replay",
    "build_replay",
    "SimulationResult",
    "run_simulation",
    "simulate_match",
]
