"""
Office Duel - Deterministic Card Duel Engine

A seeded, replayable engine for a two-player card duel driven by a
single shared momentum counter. The engine provides:
- Card definition loading and validation
- Deterministic sequence generation
- Card effect resolution
- A turn/phase state machine with mid-turn win detection
"""

__version__ = "0.1.0"
