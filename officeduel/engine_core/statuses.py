"""
Status ledger - per-player timed and one-shot buffs.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..card_schema.effect_dsl import StatusKind

INDEFINITE = -1


@dataclass
class StatusEntry:
    magnitude: int = 0
    duration: int = 1


@dataclass
class StatusLedger:
    """
    Active statuses for one player, keyed by kind.

    A duration of INDEFINITE (-1) lasts until the status is consumed or
    removed. Any other duration is decremented at each end of turn and the
    entry is dropped once it reaches zero.
    """
    entries: dict[StatusKind, StatusEntry] = field(default_factory=dict)

    def apply(self, kind: StatusKind, amount: int = 0, duration: int = 1) -> None:
        """Install or overwrite a status. A zero amount keeps any earlier magnitude."""
        entry = self.entries.get(kind)
        if entry is None:
            entry = StatusEntry()
            self.entries[kind] = entry
        if amount != 0:
            entry.magnitude = amount
        entry.duration = duration

    def has(self, kind: StatusKind) -> bool:
        return kind in self.entries

    def magnitude(self, kind: StatusKind) -> int:
        entry = self.entries.get(kind)
        return entry.magnitude if entry else 0

    def remove(self, kind: StatusKind) -> None:
        self.entries.pop(kind, None)

    def consume(self, kind: StatusKind) -> bool:
        """Remove the status if present. Returns whether it was there."""
        return self.entries.pop(kind, None) is not None

    def tick_end_of_turn(self) -> list[StatusKind]:
        """Decay timed statuses. Returns the kinds that expired."""
        expired = []
        for kind, entry in list(self.entries.items()):
            if entry.duration == INDEFINITE:
                continue
            entry.duration -= 1
            if entry.duration <= 0:
                del self.entries[kind]
                expired.append(kind)
        return expired

    def clear(self) -> None:
        self.entries.clear()

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {
            kind.value: {"magnitude": e.magnitude, "duration": e.duration}
            for kind, e in self.entries.items()
        }
