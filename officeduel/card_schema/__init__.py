"""
Card Schema - Card definitions, the action language, and their loader.
"""

from .effect_dsl import (
    Action,
    ActionKind,
    CardAction,
    OnEmpty,
    StatusKind,
    Target,
    UnknownAction,
    action_to_dict,
    parse_action,
    parse_actions,
)
from .definitions import CardDefinition, CardDefinitionSet, RulesAssumptions, Tier
from .validation import DefinitionValidationError, ValidationResult, validate_definition_set
from .loader import definition_set_from_dict, load_definition_set, parse_definition_set

__all__ = [
    "Action",
    "ActionKind",
    "CardAction",
    "OnEmpty",
    "StatusKind",
    "Target",
    "UnknownAction",
    "action_to_dict",
    "parse_action",
    "parse_actions",
    "CardDefinition",
    "CardDefinitionSet",
    "RulesAssumptions",
    "Tier",
    "DefinitionValidationError",
    "ValidationResult",
    "validate_definition_set",
    "definition_set_from_dict",
    "load_definition_set",
    "parse_definition_set",
]
