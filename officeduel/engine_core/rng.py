"""
Deterministic sequence generator.

Every random choice a match makes (deck dealing, random discards,
steals, reveals, auto-submit and auto-pick) goes through one of these,
so a seed plus the ordered list of commands reproduces a match exactly.
"""

from __future__ import annotations
import random


class DeterministicRng:
    """Seeded source of bounded integers and booleans."""

    def __init__(self, seed: int):
        self.seed = seed
        self._random = random.Random(seed)

    def next_int(self, bound: int) -> int:
        """Uniform int in [0, bound). bound must be positive."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return self._random.randrange(bound)

    def next_boolean(self) -> bool:
        return self._random.getrandbits(1) == 1

    def __repr__(self) -> str:
        return f"DeterministicRng(seed={self.seed})"
