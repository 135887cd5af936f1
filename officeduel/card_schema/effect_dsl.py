"""
Effect DSL - Card action language.

Every tier of a card is an ordered list of actions. Each action is one
variant of a closed union: a frozen dataclass per kind carrying only the
fields that kind reads. Catalog data may contain kinds this engine does
not know yet; those parse into UnknownAction and are ignored at
resolution time.

Wire format (one JSON object per action):
    {"type": "damage", "target": "opponent", "amount": 2}
    {"type": "status", "status": "shield", "duration_turns": -1, "target": "self"}
    {"type": "win_if_condition", "condition": {"copies_of_this_card_equals": 3}}
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Union


class ActionKind(Enum):
    """Kinds of card actions, named as they appear in catalog files."""
    PUSH = "push"
    DAMAGE = "damage"
    HEAL = "heal"
    DRAW = "draw"
    SKIP_NEXT_TURN = "skip_next_turn"
    BLOCK_NEXT_DRAW = "block_next_draw"
    DISCARD_RANDOM = "discard_random"
    DISCARD_HAND = "discard_hand"
    SET_TO_FULL = "set_lp_to_full"
    STATUS = "status"
    REVEAL_RANDOM = "reveal_random_cards"
    STEAL_RANDOM_FROM_HAND = "steal_random_card_from_hand"
    DESTROY_RANDOM_IN_TABLEAU = "destroy_random_cards_in_tableau"
    MODIFY_MAX_HAND_SIZE = "modify_max_hand_size"
    GRANT_EXTRA_FACE_DOWN_PLAY = "grant_extra_face_down_play"
    WIN_IF_CONDITION = "win_if_condition"
    COPY_LAST_EFFECT = "copy_last_card_effect"
    STEAL_FROM_TABLEAU_AND_PLAY = "steal_card_from_tableau_and_play"
    CONDITIONAL_PUSH_IF_OPPONENT_HAND_EMPTY = "conditional_push_if_opponent_hand_empty"
    FALLBACK_PUSH = "fallback_push_if_no_trigger"
    LOSE_IF_CONDITION_WHEN_BLOCKED = "lose_if_condition_when_blocked"
    GRANT_EXTRA_TURNS = "grant_extra_turns"
    NOOP = "noop"


# Short names accepted in addition to the catalog names
KIND_ALIASES: dict[str, ActionKind] = {
    "set_to_full": ActionKind.SET_TO_FULL,
    "reveal_random": ActionKind.REVEAL_RANDOM,
    "steal_random_from_hand": ActionKind.STEAL_RANDOM_FROM_HAND,
    "destroy_random_in_tableau": ActionKind.DESTROY_RANDOM_IN_TABLEAU,
    "copy_last_effect": ActionKind.COPY_LAST_EFFECT,
    "steal_from_tableau_and_play": ActionKind.STEAL_FROM_TABLEAU_AND_PLAY,
    "fallback_push": ActionKind.FALLBACK_PUSH,
}


class Target(Enum):
    """Who an action applies to, relative to the acting player."""
    SELF = "self"
    OPPONENT = "opponent"
    BOTH = "both"


class StatusKind(Enum):
    """Status ledger entry kinds."""
    SHIELD = "shield"
    THORNS = "thorns"
    REFLECT_ALL_DAMAGE = "reflect_all_damage"
    SHIELD_NEXT_PUSH_AGAINST_YOU = "shield_next_push_against_you"
    REFLECT_NEXT_PUSH = "reflect_next_push"
    RANDOMIZE_NEXT_CARD_EFFECT = "randomize_next_card_effect"
    GLOBAL_RANDOM_EFFECTS = "global_random_effects"


class OnEmpty(Enum):
    """What a tableau steal does when the victim's tableau is empty."""
    PUSH_NEGATIVE = "push_negative"
    NOOP = "noop"


@dataclass(frozen=True)
class Action:
    """Base for all action variants."""
    kind: ClassVar[ActionKind | None] = None

    target: Target = Target.SELF

    @property
    def type_name(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class PushAction(Action):
    """Move momentum toward the target's side by amount."""
    kind: ClassVar[ActionKind] = ActionKind.PUSH
    amount: int = 0


@dataclass(frozen=True)
class DamageAction(Action):
    """Move momentum away from the target's side, subject to shields."""
    kind: ClassVar[ActionKind] = ActionKind.DAMAGE
    amount: int = 0


@dataclass(frozen=True)
class HealAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.HEAL
    amount: int = 0


@dataclass(frozen=True)
class DrawAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.DRAW
    count: int = 0


@dataclass(frozen=True)
class SkipNextTurnAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.SKIP_NEXT_TURN


@dataclass(frozen=True)
class BlockNextDrawAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.BLOCK_NEXT_DRAW
    count: int = 1


@dataclass(frozen=True)
class DiscardRandomAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.DISCARD_RANDOM
    count: int = 1


@dataclass(frozen=True)
class DiscardHandAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.DISCARD_HAND


@dataclass(frozen=True)
class SetToFullAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.SET_TO_FULL


@dataclass(frozen=True)
class StatusAction(Action):
    """
    Install a status ledger entry on the target.

    status is None when the catalog names a status this engine does not
    know; such actions do nothing.
    """
    kind: ClassVar[ActionKind] = ActionKind.STATUS
    status: StatusKind | None = None
    amount: int = 0
    duration: int = 1


@dataclass(frozen=True)
class RevealRandomAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.REVEAL_RANDOM
    count: int = 1


@dataclass(frozen=True)
class StealRandomFromHandAction(Action):
    """Move random cards from the source player's hand into the actor's hand."""
    kind: ClassVar[ActionKind] = ActionKind.STEAL_RANDOM_FROM_HAND
    source: Target = Target.SELF
    count: int = 1


@dataclass(frozen=True)
class DestroyRandomInTableauAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.DESTROY_RANDOM_IN_TABLEAU
    count: int = 1


@dataclass(frozen=True)
class ModifyMaxHandSizeAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.MODIFY_MAX_HAND_SIZE
    delta: int = 0


@dataclass(frozen=True)
class GrantExtraFaceDownPlayAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.GRANT_EXTRA_FACE_DOWN_PLAY
    count: int = 1


@dataclass(frozen=True)
class WinIfConditionAction(Action):
    """Win outright when the actor holds exactly copies_equal copies of its last card."""
    kind: ClassVar[ActionKind] = ActionKind.WIN_IF_CONDITION
    copies_equal: int | None = None


@dataclass(frozen=True)
class CopyLastEffectAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.COPY_LAST_EFFECT
    times: int = 1


@dataclass(frozen=True)
class StealFromTableauAndPlayAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.STEAL_FROM_TABLEAU_AND_PLAY
    on_empty: OnEmpty | None = None
    fallback_amount: int = -1


@dataclass(frozen=True)
class ConditionalPushIfOpponentHandEmptyAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.CONDITIONAL_PUSH_IF_OPPONENT_HAND_EMPTY
    amount: int = 0


@dataclass(frozen=True)
class FallbackPushAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.FALLBACK_PUSH
    amount: int = 0


@dataclass(frozen=True)
class LoseIfConditionWhenBlockedAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.LOSE_IF_CONDITION_WHEN_BLOCKED
    copies_equal: int | None = None


@dataclass(frozen=True)
class GrantExtraTurnsAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.GRANT_EXTRA_TURNS
    count: int = 1


@dataclass(frozen=True)
class NoopAction(Action):
    kind: ClassVar[ActionKind] = ActionKind.NOOP


@dataclass(frozen=True)
class UnknownAction(Action):
    """An action kind this engine does not recognize. Kept so the data round-trips."""
    raw_type: str = ""

    @property
    def type_name(self) -> str:
        return self.raw_type


CardAction = Union[
    PushAction,
    DamageAction,
    HealAction,
    DrawAction,
    SkipNextTurnAction,
    BlockNextDrawAction,
    DiscardRandomAction,
    DiscardHandAction,
    SetToFullAction,
    StatusAction,
    RevealRandomAction,
    StealRandomFromHandAction,
    DestroyRandomInTableauAction,
    ModifyMaxHandSizeAction,
    GrantExtraFaceDownPlayAction,
    WinIfConditionAction,
    CopyLastEffectAction,
    StealFromTableauAndPlayAction,
    ConditionalPushIfOpponentHandEmptyAction,
    FallbackPushAction,
    LoseIfConditionWhenBlockedAction,
    GrantExtraTurnsAction,
    NoopAction,
    UnknownAction,
]

ACTION_CLASSES: dict[ActionKind, type[Action]] = {
    cls.kind: cls
    for cls in (
        PushAction, DamageAction, HealAction, DrawAction, SkipNextTurnAction,
        BlockNextDrawAction, DiscardRandomAction, DiscardHandAction,
        SetToFullAction, StatusAction, RevealRandomAction,
        StealRandomFromHandAction, DestroyRandomInTableauAction,
        ModifyMaxHandSizeAction, GrantExtraFaceDownPlayAction,
        WinIfConditionAction, CopyLastEffectAction,
        StealFromTableauAndPlayAction, ConditionalPushIfOpponentHandEmptyAction,
        FallbackPushAction, LoseIfConditionWhenBlockedAction,
        GrantExtraTurnsAction, NoopAction,
    )
}

# dataclass field name -> catalog property name, where they differ
_WIRE_NAMES = {
    "duration": "duration_turns",
}


def resolve_kind(type_name: str) -> ActionKind | None:
    """Map a catalog type string (or one of its short aliases) to an ActionKind."""
    try:
        return ActionKind(type_name)
    except ValueError:
        return KIND_ALIASES.get(type_name)


def _parse_target(value: Any) -> Target:
    # Anything other than an explicit opponent/both applies to the actor
    try:
        return Target(value)
    except ValueError:
        return Target.SELF


def _parse_enum(enum_cls: type[Enum], value: Any) -> Enum | None:
    if value is None:
        return None
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return None


def parse_action(data: dict[str, Any]) -> CardAction:
    """
    Parse one action from its catalog dictionary form.

    Missing optional fields take the per-kind defaults declared on the
    variant classes. Unknown properties are ignored.

    Raises:
        ValueError: If the "type" field is missing
    """
    type_name = data.get("type")
    if not type_name:
        raise ValueError("Action missing 'type' field")

    kind = resolve_kind(type_name)
    target = _parse_target(data.get("target"))
    if kind is None:
        return UnknownAction(target=target, raw_type=type_name)

    cls = ACTION_CLASSES[kind]
    kwargs: dict[str, Any] = {"target": target}
    for f in fields(cls):
        if f.name == "target":
            continue
        if f.name == "copies_equal":
            condition = data.get("condition") or {}
            kwargs["copies_equal"] = condition.get("copies_of_this_card_equals")
            continue
        raw = data.get(_WIRE_NAMES.get(f.name, f.name))
        if raw is None:
            continue
        if f.name == "status":
            kwargs["status"] = _parse_enum(StatusKind, raw)
        elif f.name == "on_empty":
            kwargs["on_empty"] = _parse_enum(OnEmpty, raw)
        elif f.name == "source":
            kwargs["source"] = _parse_target(raw)
        else:
            kwargs[f.name] = int(raw)
    return cls(**kwargs)


def parse_actions(data: list[dict[str, Any]]) -> list[CardAction]:
    """Parse a list of actions from dictionaries."""
    return [parse_action(d) for d in data]


def action_to_dict(action: Action) -> dict[str, Any]:
    """Serialize an action back to its catalog dictionary form."""
    result: dict[str, Any] = {"type": action.type_name}
    for f in fields(action):
        if f.name == "raw_type":
            continue
        value = getattr(action, f.name)
        if value is None:
            continue
        if f.name == "copies_equal":
            result["condition"] = {"copies_of_this_card_equals": value}
            continue
        if isinstance(value, Enum):
            value = value.value
        result[_WIRE_NAMES.get(f.name, f.name)] = value
    return result
