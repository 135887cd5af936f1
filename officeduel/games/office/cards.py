"""
Office Cards - The built-in card set.

Card structure:
- id (C001...), name, tags
- Tiers: the first tier resolves for the first copy a player holds,
  later tiers for further copies

Together the set uses every action kind at least once.
"""

from __future__ import annotations

from ...card_schema.definitions import CardDefinition, CardDefinitionSet, RulesAssumptions, Tier
from ...card_schema.effect_dsl import (
    BlockNextDrawAction,
    ConditionalPushIfOpponentHandEmptyAction,
    CopyLastEffectAction,
    DamageAction,
    DestroyRandomInTableauAction,
    DiscardHandAction,
    DiscardRandomAction,
    DrawAction,
    FallbackPushAction,
    GrantExtraFaceDownPlayAction,
    GrantExtraTurnsAction,
    HealAction,
    LoseIfConditionWhenBlockedAction,
    ModifyMaxHandSizeAction,
    NoopAction,
    OnEmpty,
    PushAction,
    RevealRandomAction,
    SetToFullAction,
    SkipNextTurnAction,
    StatusAction,
    StatusKind,
    StealFromTableauAndPlayAction,
    StealRandomFromHandAction,
    Target,
    WinIfConditionAction,
)

SCHEMA_VERSION = 1

SELF = Target.SELF
OPPONENT = Target.OPPONENT
BOTH = Target.BOTH


def _card(card_id: str, name: str, tags: list[str], *tiers: list) -> CardDefinition:
    return CardDefinition(
        id=card_id,
        name=name,
        tags=tuple(tags),
        tiers=tuple(Tier(actions=tuple(actions)) for actions in tiers),
    )


# ============================================================================
# Momentum cards
# ============================================================================

SLAP_ATTACK = _card(
    "C001", "Slap Attack", ["attack"],
    [DamageAction(target=OPPONENT, amount=1)],
    [DamageAction(target=OPPONENT, amount=2)],
    [DamageAction(target=OPPONENT, amount=3)],
)

COFFEE_BREAK = _card(
    "C002", "Coffee Break", ["recovery"],
    [HealAction(target=SELF, amount=1)],
    [HealAction(target=SELF, amount=2), DrawAction(target=SELF, count=1)],
)

QUICK_MEMO = _card(
    "C003", "Quick Memo", ["push"],
    [PushAction(target=SELF, amount=1)],
    [PushAction(target=SELF, amount=2)],
)

EMPTY_INBOX = _card(
    "C004", "Empty Inbox", ["push", "conditional"],
    [ConditionalPushIfOpponentHandEmptyAction(target=SELF, amount=2)],
)

BACKUP_PLAN = _card(
    "C005", "Backup Plan", ["push"],
    [FallbackPushAction(target=SELF, amount=1)],
)

DOUBLE_ESPRESSO = _card(
    "C010", "Double Espresso", ["push", "recovery"],
    [PushAction(target=SELF, amount=2)],
    # the second cup makes you jittery
    [PushAction(target=OPPONENT, amount=1)],
)

# ============================================================================
# Hand and deck cards
# ============================================================================

REPLY_ALL = _card(
    "C006", "Reply All", ["draw"],
    [DrawAction(target=BOTH, count=1)],
)

PRINTER_JAM = _card(
    "C007", "Printer Jam", ["control"],
    [BlockNextDrawAction(target=OPPONENT, count=1)],
    [BlockNextDrawAction(target=OPPONENT, count=2)],
)

SHREDDER = _card(
    "C008", "Shredder", ["control"],
    [DiscardRandomAction(target=OPPONENT, count=1)],
    [DiscardHandAction(target=OPPONENT)],
)

GOSSIP = _card(
    "C011", "Office Gossip", ["info"],
    [RevealRandomAction(target=OPPONENT, count=2)],
)

CREDIT_THIEF = _card(
    "C012", "Credit Thief", ["steal"],
    [StealRandomFromHandAction(source=OPPONENT, count=1)],
)

OPEN_FLOOR_PLAN = _card(
    "C014", "Open Floor Plan", ["control"],
    [ModifyMaxHandSizeAction(target=OPPONENT, delta=-1)],
    [ModifyMaxHandSizeAction(target=OPPONENT, delta=-1),
     ModifyMaxHandSizeAction(target=SELF, delta=1)],
)

# ============================================================================
# Tableau cards
# ============================================================================

RESTRUCTURING = _card(
    "C013", "Restructuring", ["tableau"],
    [DestroyRandomInTableauAction(target=OPPONENT, count=1)],
)

IDEA_THEFT = _card(
    "C018", "Idea Theft", ["steal", "tableau"],
    [StealFromTableauAndPlayAction(on_empty=OnEmpty.PUSH_NEGATIVE, fallback_amount=-1)],
)

EMPLOYEE_OF_THE_MONTH = _card(
    "C016", "Employee Of The Month", ["win"],
    [NoopAction()],
    [NoopAction()],
    [WinIfConditionAction(copies_equal=3)],
)

# ============================================================================
# Status and turn cards
# ============================================================================

OUT_OF_OFFICE = _card(
    "C009", "Out Of Office", ["control"],
    [SkipNextTurnAction(target=OPPONENT)],
)

UMBRELLA_POLICY = _card(
    "C015", "Umbrella Policy", ["status", "defense"],
    [StatusAction(target=SELF, status=StatusKind.SHIELD, duration=-1)],
    [StatusAction(target=SELF, status=StatusKind.SHIELD, duration=-1),
     StatusAction(target=SELF, status=StatusKind.THORNS, amount=1, duration=2)],
)

HR_COMPLAINT = _card(
    "C017", "HR Complaint", ["status", "defense"],
    [StatusAction(target=SELF, status=StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU, duration=-1)],
    [StatusAction(target=SELF, status=StatusKind.REFLECT_NEXT_PUSH, duration=-1)],
)

MIRROR_MEMO = _card(
    "C019", "Mirror Memo", ["status", "defense"],
    [StatusAction(target=SELF, status=StatusKind.REFLECT_ALL_DAMAGE, duration=1)],
)

DEJA_VU_MEETING = _card(
    "C020", "Deja Vu Meeting", ["copy"],
    [CopyLastEffectAction(times=1)],
    [CopyLastEffectAction(times=2)],
)

SECRET_AGENDA = _card(
    "C021", "Secret Agenda", ["turn"],
    [GrantExtraFaceDownPlayAction(target=SELF, count=1)],
)

OVERTIME = _card(
    "C022", "Overtime", ["turn"],
    [GrantExtraTurnsAction(target=SELF, count=1), LoseIfConditionWhenBlockedAction()],
)

TEAM_RETREAT = _card(
    "C023", "Team Retreat", ["recovery"],
    [SetToFullAction(target=SELF), HealAction(target=SELF, amount=1)],
)

RESHUFFLE = _card(
    "C024", "Department Reshuffle", ["chaos", "status"],
    [StatusAction(target=OPPONENT, status=StatusKind.RANDOMIZE_NEXT_CARD_EFFECT, duration=1)],
    [StatusAction(target=BOTH, status=StatusKind.GLOBAL_RANDOM_EFFECTS, duration=2)],
)


OFFICE_CARDS: list[CardDefinition] = [
    SLAP_ATTACK,
    COFFEE_BREAK,
    QUICK_MEMO,
    EMPTY_INBOX,
    BACKUP_PLAN,
    REPLY_ALL,
    PRINTER_JAM,
    SHREDDER,
    OUT_OF_OFFICE,
    DOUBLE_ESPRESSO,
    GOSSIP,
    CREDIT_THIEF,
    RESTRUCTURING,
    OPEN_FLOOR_PLAN,
    UMBRELLA_POLICY,
    EMPLOYEE_OF_THE_MONTH,
    HR_COMPLAINT,
    IDEA_THEFT,
    MIRROR_MEMO,
    DEJA_VU_MEETING,
    SECRET_AGENDA,
    OVERTIME,
    TEAM_RETREAT,
    RESHUFFLE,
]


def get_definition_set() -> CardDefinitionSet:
    """The built-in cards as a definition set."""
    return CardDefinitionSet(
        schema_version=SCHEMA_VERSION,
        cards=tuple(OFFICE_CARDS),
        rules_assumptions=RulesAssumptions(tier_calculation="copies_in_tableau_plus_one"),
    )


def get_card_by_id(card_id: str) -> CardDefinition | None:
    """Get a card definition by ID."""
    for card in OFFICE_CARDS:
        if card.id == card_id:
            return card
    return None
