"""
Card catalog - id to definition index, built once per definition set.
"""

from __future__ import annotations

from ..card_schema.definitions import CardDefinition, CardDefinitionSet, Tier
from .errors import CatalogConsistencyError


class CardCatalog:
    """Read-only lookup over a validated CardDefinitionSet."""

    def __init__(self, definitions: CardDefinitionSet):
        self.definitions = definitions
        self._by_id: dict[str, CardDefinition] = {c.id: c for c in definitions.cards}

    def get(self, card_id: str) -> CardDefinition:
        card = self._by_id.get(card_id)
        if card is None:
            raise CatalogConsistencyError(card_id)
        return card

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def all(self) -> list[CardDefinition]:
        """All definitions, in definition-set order."""
        return list(self.definitions.cards)

    def card_ids(self) -> list[str]:
        return [c.id for c in self.definitions.cards]

    def tier_for(self, card_id: str, copies_held: int) -> tuple[int, Tier]:
        """
        Pick the tier a card resolves at.

        copies_held is the number of copies already in the recipient's
        tableau; the card being played counts as one more. Returns the
        0-based tier index and the tier.
        """
        card = self.get(card_id)
        if not card.tiers:
            return 0, Tier()
        tier_number = min(max(copies_held + 1, 1), card.tier_count)
        index = tier_number - 1
        return index, card.tiers[index]
