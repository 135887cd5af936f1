"""
Engine errors.

Only two conditions are raised to callers: a command issued in the wrong
phase, and a card id the catalog does not know. Degenerate resource
states (empty hand, deck or tableau) are handled inside the resolver
and never raise.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Phase


class EngineError(Exception):
    """Base class for engine errors."""


class InvalidPhaseError(EngineError):
    """A command was issued outside the phase it requires."""

    def __init__(self, expected: Phase, actual: Phase):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected phase {expected.value}, match is in {actual.value}")


class CatalogConsistencyError(EngineError, LookupError):
    """A card id reached the engine that the catalog does not contain."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Unknown card id: {card_id}")
