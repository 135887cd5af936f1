"""
Session Module - One lock-guarded actor per match.

A session represents one match:
- Created with a seed (generated if not supplied)
- Serializes every command on its match
- Dropped from memory when ended

Sessions are EPHEMERAL:
- No persistence
- Export a replay before ending if the match should be kept
"""

from .manager import MatchManager, MatchNotFoundError, MatchSession, MatchStatus

__all__ = [
    "MatchManager",
    "MatchNotFoundError",
    "MatchSession",
    "MatchStatus",
]
