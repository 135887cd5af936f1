"""
Definition Validation - Consistency checks for card definition sets.

Validates that:
1. The schema version is positive and the set is non-empty
2. Card ids and names are present and ids are unique
3. Every card has at least one tier
4. Actions are well-formed for their kind
"""

from __future__ import annotations
from dataclasses import dataclass

from .definitions import CardDefinitionSet, CardDefinition
from .effect_dsl import (
    CopyLastEffectAction,
    StatusAction,
    UnknownAction,
    WinIfConditionAction,
)


class DefinitionValidationError(ValueError):
    """Raised when a definition set fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Definition validation failed with {len(errors)} error(s): "
            + "; ".join(errors[:5])
        )


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_definition_set(definitions: CardDefinitionSet) -> ValidationResult:
    """
    Validate a complete definition set.

    Errors make the set unusable by the engine. Warnings flag data the
    engine will tolerate (unknown action kinds or statuses) but that is
    probably a catalog mistake.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if definitions.schema_version <= 0:
        errors.append("schema_version must be > 0")
    if not definitions.cards:
        errors.append("cards must not be empty")

    seen: set[str] = set()
    for card in definitions.cards:
        if card.id in seen:
            errors.append(f"Duplicate card id: {card.id}")
        seen.add(card.id)
        card_errors, card_warnings = _validate_card(card)
        errors.extend(card_errors)
        warnings.extend(card_warnings)

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_card(card: CardDefinition) -> tuple[list[str], list[str]]:
    """Validate a single card definition."""
    errors: list[str] = []
    warnings: list[str] = []
    label = card.id or "<missing id>"

    if not card.id:
        errors.append("Card id is required")
    if not card.name:
        errors.append(f"Card {label}: name is required")
    if not card.tiers:
        errors.append(f"Card {label}: at least one tier is required")

    for tier_num, tier in enumerate(card.tiers, start=1):
        for action in tier.actions:
            where = f"Card {label} tier {tier_num}"
            if isinstance(action, UnknownAction):
                warnings.append(f"{where}: unknown action type '{action.raw_type}'")
            elif isinstance(action, StatusAction) and action.status is None:
                warnings.append(f"{where}: status action with unknown status")
            elif isinstance(action, WinIfConditionAction) and action.copies_equal is None:
                warnings.append(f"{where}: win_if_condition without a condition")
            elif isinstance(action, CopyLastEffectAction) and action.times < 0:
                errors.append(f"{where}: copy_last_card_effect times must be >= 0")

    return errors, warnings
