"""
Office Duel - The built-in game.

Two coworkers fight over a single momentum counter. Each turn one offers
two cards, the other takes one blind, and both cards resolve.

This module contains:
- The built-in card set
- Seeded match setup
"""

from .cards import OFFICE_CARDS, get_card_by_id, get_definition_set
from .setup import resolve_definitions, setup_office_match

__all__ = [
    "OFFICE_CARDS",
    "get_card_by_id",
    "get_definition_set",
    "resolve_definitions",
    "setup_office_match",
]
