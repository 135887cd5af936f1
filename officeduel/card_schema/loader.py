"""
Definition Loader - Parse card definition JSON into a validated CardDefinitionSet.

The raw document shape is described with pydantic models; unknown
properties are ignored so newer catalog files still load. After parsing,
the typed set goes through validate_definition_set() and any error
aborts the load.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from .definitions import CardDefinition, CardDefinitionSet, RulesAssumptions, Tier
from .effect_dsl import parse_action
from .validation import DefinitionValidationError, validate_definition_set

logger = logging.getLogger(__name__)


# =============================================================================
# Raw document models
# =============================================================================

class RawCondition(BaseModel):
    copies_of_this_card_equals: Optional[int] = None

    model_config = {"extra": "ignore"}


class RawAction(BaseModel):
    type: str
    target: Optional[str] = None
    amount: Optional[int] = None
    count: Optional[int] = None
    duration_turns: Optional[int] = None
    status: Optional[str] = None
    still_draws: Optional[bool] = None
    delta: Optional[int] = None
    times: Optional[int] = None
    condition: Optional[RawCondition] = None
    source: Optional[str] = None
    on_empty: Optional[str] = None
    fallback_amount: Optional[int] = None

    model_config = {"extra": "ignore"}


class RawTier(BaseModel):
    actions: list[RawAction] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class RawCard(BaseModel):
    id: str
    name: str
    tags: list[str] = Field(default_factory=list)
    tiers: list[RawTier] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class RawRulesAssumptions(BaseModel):
    max_lp: int = 0
    copies_above_three_treated_as_three: bool = False
    tier_calculation: Optional[str] = None

    model_config = {"extra": "ignore"}


class RawDefinitionSet(BaseModel):
    schema_version: int
    rules_assumptions: Optional[RawRulesAssumptions] = None
    cards: list[RawCard] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


# =============================================================================
# Conversion
# =============================================================================

def _to_card(raw: RawCard) -> CardDefinition:
    tiers = tuple(
        Tier(actions=tuple(
            parse_action(a.model_dump(exclude_none=True)) for a in raw_tier.actions
        ))
        for raw_tier in raw.tiers
    )
    return CardDefinition(id=raw.id, name=raw.name, tags=tuple(raw.tags), tiers=tiers)


def _to_definition_set(raw: RawDefinitionSet) -> CardDefinitionSet:
    assumptions = RulesAssumptions()
    if raw.rules_assumptions is not None:
        assumptions = RulesAssumptions(**raw.rules_assumptions.model_dump())
    return CardDefinitionSet(
        schema_version=raw.schema_version,
        cards=tuple(_to_card(c) for c in raw.cards),
        rules_assumptions=assumptions,
    )


def definition_set_from_dict(data: dict[str, Any]) -> CardDefinitionSet:
    """
    Build and validate a definition set from an already-decoded document.

    Raises:
        DefinitionValidationError: If the document is malformed or fails validation
    """
    try:
        raw = RawDefinitionSet.model_validate(data)
    except ValidationError as e:
        raise DefinitionValidationError(
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        ) from e
    return _checked(_to_definition_set(raw))


def parse_definition_set(text: str) -> CardDefinitionSet:
    """Parse and validate a JSON definition document."""
    try:
        raw = RawDefinitionSet.model_validate_json(text)
    except ValidationError as e:
        raise DefinitionValidationError(
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        ) from e
    return _checked(_to_definition_set(raw))


def load_definition_set(path: str | Path) -> CardDefinitionSet:
    """Load a definition set from a JSON file."""
    path = Path(path)
    logger.info("Loading card definitions from %s", path)
    return parse_definition_set(path.read_text(encoding="utf-8"))


def _checked(definitions: CardDefinitionSet) -> CardDefinitionSet:
    result = validate_definition_set(definitions)
    for warning in result.warnings:
        logger.warning("Card definitions: %s", warning)
    if not result.valid:
        raise DefinitionValidationError(result.errors)
    logger.debug(
        "Loaded %d card definitions (schema v%d)",
        len(definitions.cards), definitions.schema_version,
    )
    return definitions
