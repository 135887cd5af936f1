"""
Engine Configuration - Tunables for matches and the runtime around them.

Values come from (in order of precedence):
1. Explicit constructor arguments / from_dict()
2. OFFICEDUEL_* environment variables (from_env())
3. Defaults below

Environment variables:
    OFFICEDUEL_WIN_THRESHOLD       Momentum needed to win (default 5)
    OFFICEDUEL_MAX_HAND_SIZE       Starting hand size limit (default 4)
    OFFICEDUEL_DECK_SIZE           Cards dealt per deck at setup (default 50)
    OFFICEDUEL_FEEDBACK_CAPACITY   Effect feedback entries kept (default 10)
    OFFICEDUEL_CARDS_PATH          Optional JSON card definition file
    OFFICEDUEL_LOG_LEVEL           Logging level name (default INFO)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

DEFAULT_WIN_THRESHOLD = 5
DEFAULT_MAX_HAND_SIZE = 4
DEFAULT_DECK_SIZE = 50
DEFAULT_FEEDBACK_CAPACITY = 10


@dataclass
class EngineConfig:
    """
    Match configuration.

    Attributes:
        win_threshold: Absolute momentum value that ends the match
        max_hand_size: Hand size limit each player starts with
        deck_size: Number of cards dealt into each deck at setup
        feedback_capacity: Size of the bounded effect feedback log
        cards_path: Card definition file; built-in set when None
        log_level: Level passed to configure_logging()
    """
    win_threshold: int = DEFAULT_WIN_THRESHOLD
    max_hand_size: int = DEFAULT_MAX_HAND_SIZE
    deck_size: int = DEFAULT_DECK_SIZE
    feedback_capacity: int = DEFAULT_FEEDBACK_CAPACITY
    cards_path: str | None = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.win_threshold < 1:
            raise ValueError("win_threshold must be >= 1")
        if self.max_hand_size < 0:
            raise ValueError("max_hand_size must be >= 0")
        if self.deck_size < 0:
            raise ValueError("deck_size must be >= 0")
        if self.feedback_capacity < 1:
            raise ValueError("feedback_capacity must be >= 1")

    @classmethod
    def from_dict(cls, d: dict) -> EngineConfig:
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from OFFICEDUEL_* environment variables."""
        return cls(
            win_threshold=int(os.getenv("OFFICEDUEL_WIN_THRESHOLD", DEFAULT_WIN_THRESHOLD)),
            max_hand_size=int(os.getenv("OFFICEDUEL_MAX_HAND_SIZE", DEFAULT_MAX_HAND_SIZE)),
            deck_size=int(os.getenv("OFFICEDUEL_DECK_SIZE", DEFAULT_DECK_SIZE)),
            feedback_capacity=int(
                os.getenv("OFFICEDUEL_FEEDBACK_CAPACITY", DEFAULT_FEEDBACK_CAPACITY)
            ),
            cards_path=os.getenv("OFFICEDUEL_CARDS_PATH") or None,
            log_level=os.getenv("OFFICEDUEL_LOG_LEVEL", "INFO"),
        )


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging for processes embedding the engine."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
