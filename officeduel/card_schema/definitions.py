"""
Card definitions - the immutable, validated card set shared across matches.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .effect_dsl import CardAction, action_to_dict


@dataclass(frozen=True)
class Tier:
    """One copy-count level of a card: the actions it resolves, in order."""
    actions: tuple[CardAction, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"actions": [action_to_dict(a) for a in self.actions]}


@dataclass(frozen=True)
class CardDefinition:
    """
    A card as printed.

    Tiers are ordered: tiers[0] resolves for the first copy a recipient
    holds, tiers[1] for the second, and so on, clamped to the last tier.
    """
    id: str
    name: str
    tags: tuple[str, ...] = ()
    tiers: tuple[Tier, ...] = ()

    @property
    def tier_count(self) -> int:
        return len(self.tiers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tags": list(self.tags),
            "tiers": [t.to_dict() for t in self.tiers],
        }


@dataclass(frozen=True)
class RulesAssumptions:
    """Catalog-level rule notes carried through from the definition file."""
    max_lp: int = 0
    copies_above_three_treated_as_three: bool = False
    tier_calculation: str | None = None


@dataclass(frozen=True)
class CardDefinitionSet:
    """A versioned set of card definitions."""
    schema_version: int
    cards: tuple[CardDefinition, ...]
    rules_assumptions: RulesAssumptions = field(default_factory=RulesAssumptions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "rules_assumptions": {
                "max_lp": self.rules_assumptions.max_lp,
                "copies_above_three_treated_as_three":
                    self.rules_assumptions.copies_above_three_treated_as_three,
                "tier_calculation": self.rules_assumptions.tier_calculation,
            },
            "cards": [c.to_dict() for c in self.cards],
        }
