"""
Tests for the effect resolver.

Tests:
- Fixed-side momentum for push, damage and heal
- Clamping at the threshold
- Shield, reflect and thorns interactions
- Hand, deck and tableau manipulation
- Copy-effect replay and its termination
- Feedback records
"""

from collections import deque

import pytest

from ..card_schema.effect_dsl import (
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
    UnknownAction,
    WinIfConditionAction,
)
from ..engine_core.statuses import INDEFINITE

SELF = Target.SELF
OPP = Target.OPPONENT


@pytest.fixture
def a(state):
    return state.player_a


@pytest.fixture
def b(state):
    return state.player_b


class TestMomentum:
    """Push, damage and heal in the fixed A-side frame."""

    def test_push_then_push_opponent(self, state, resolver, a, b):
        """A pushes itself 2 then the opponent 3: 2 - 3 = -1."""
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        assert state.momentum == 2
        resolver.apply_actions([PushAction(target=OPP, amount=3)], a, b)
        assert state.momentum == -1

    def test_push_sign_follows_affected_side(self, state, resolver, a, b):
        resolver.apply_actions([PushAction(target=SELF, amount=2)], b, a)
        assert state.momentum == -2
        resolver.apply_actions([PushAction(target=OPP, amount=2)], b, a)
        assert state.momentum == 0

    def test_push_clamps_high(self, state, resolver, a, b):
        """From 4, a push of 10 stops at the threshold."""
        state.momentum = 4
        resolver.apply_actions([PushAction(target=SELF, amount=10)], a, b)
        assert state.momentum == 5

    def test_push_clamps_low(self, state, resolver, a, b):
        resolver.apply_actions([PushAction(target=SELF, amount=10)], b, a)
        assert state.momentum == -5

    def test_damage_moves_away_from_target(self, state, resolver, a, b):
        resolver.apply_actions([DamageAction(target=OPP, amount=2)], a, b)
        assert state.momentum == 2
        resolver.apply_actions([DamageAction(target=OPP, amount=3)], b, a)
        assert state.momentum == -1

    def test_heal_moves_toward_target(self, state, resolver, a, b):
        resolver.apply_actions([HealAction(target=SELF, amount=2)], a, b)
        assert state.momentum == 2
        resolver.apply_actions([HealAction(target=SELF, amount=3)], b, a)
        assert state.momentum == -1

    def test_both_targets_apply_twice(self, state, resolver, a, b):
        """A push on both sides cancels out in the shared counter."""
        resolver.apply_actions([PushAction(target=Target.BOTH, amount=1)], a, b)
        assert state.momentum == 0
        assert len(state.feedback) == 2

    def test_momentum_never_leaves_bounds(self, state, resolver, a, b):
        actions = [
            PushAction(target=SELF, amount=7),
            DamageAction(target=SELF, amount=20),
            HealAction(target=OPP, amount=9),
            FallbackPushAction(amount=30),
        ]
        for action in actions:
            resolver.apply_actions([action], a, b)
            assert -5 <= state.momentum <= 5


class TestDamageStatuses:
    """Shield, reflect-all-damage and thorns."""

    def test_shield_absorbs_damage(self, state, resolver, a, b):
        """Shield is consumed and momentum does not move."""
        b.statuses.apply(StatusKind.SHIELD, duration=INDEFINITE)
        resolver.apply_actions([DamageAction(target=OPP, amount=5)], a, b)
        assert state.momentum == 0
        assert not b.statuses.has(StatusKind.SHIELD)

    def test_reflect_all_damage(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.REFLECT_ALL_DAMAGE, duration=1)
        resolver.apply_actions([DamageAction(target=OPP, amount=2)], a, b)
        assert state.momentum == -2
        assert not b.statuses.has(StatusKind.REFLECT_ALL_DAMAGE)

    def test_mutual_reflect_terminates(self, state, resolver, a, b):
        """Each reflect is consumed, so the damage settles on B."""
        a.statuses.apply(StatusKind.REFLECT_ALL_DAMAGE, duration=1)
        b.statuses.apply(StatusKind.REFLECT_ALL_DAMAGE, duration=1)
        resolver.apply_actions([DamageAction(target=OPP, amount=2)], a, b)
        assert state.momentum == 2
        assert not a.statuses.has(StatusKind.REFLECT_ALL_DAMAGE)
        assert not b.statuses.has(StatusKind.REFLECT_ALL_DAMAGE)

    def test_thorns_adds_counter_hit(self, state, resolver, a, b):
        """Thorns hits back but the damage still lands."""
        b.statuses.apply(StatusKind.THORNS, amount=1, duration=2)
        resolver.apply_actions([DamageAction(target=OPP, amount=3)], a, b)
        assert state.momentum == 2
        assert not b.statuses.has(StatusKind.THORNS)

    def test_thorns_on_side_a(self, state, resolver, a, b):
        a.statuses.apply(StatusKind.THORNS, amount=2, duration=2)
        resolver.apply_actions([DamageAction(target=OPP, amount=1)], b, a)
        assert state.momentum == 1

    def test_shield_checked_before_thorns(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.SHIELD, duration=INDEFINITE)
        b.statuses.apply(StatusKind.THORNS, amount=1, duration=2)
        resolver.apply_actions([DamageAction(target=OPP, amount=3)], a, b)
        assert state.momentum == 0
        assert b.statuses.has(StatusKind.THORNS)


class TestPushStatuses:
    """shield_next_push_against_you and reflect_next_push."""

    def test_shield_negates_push_against_holder(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU, duration=INDEFINITE)
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        assert state.momentum == 0
        assert not b.statuses.has(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU)
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        assert state.momentum == 2

    def test_shield_ignores_push_in_holders_favor(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU, duration=INDEFINITE)
        resolver.apply_actions([PushAction(target=OPP, amount=2)], a, b)
        assert state.momentum == -2
        assert b.statuses.has(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU)

    def test_reflect_redirects_onto_source(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.REFLECT_NEXT_PUSH, duration=INDEFINITE)
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        assert state.momentum == -2
        assert not b.statuses.has(StatusKind.REFLECT_NEXT_PUSH)

    def test_shield_checked_before_reflect(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU, duration=INDEFINITE)
        b.statuses.apply(StatusKind.REFLECT_NEXT_PUSH, duration=INDEFINITE)
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        assert state.momentum == 0
        assert b.statuses.has(StatusKind.REFLECT_NEXT_PUSH)

    def test_raw_pushes_bypass_shields(self, state, resolver, a, b):
        b.statuses.apply(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU, duration=INDEFINITE)
        resolver.apply_actions([FallbackPushAction(amount=1)], a, b)
        assert state.momentum == 1
        assert b.statuses.has(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU)

    def test_status_action_installs_entry(self, resolver, a, b):
        resolver.apply_actions([
            StatusAction(target=OPP, status=StatusKind.THORNS, amount=2, duration=3),
        ], a, b)
        assert b.statuses.magnitude(StatusKind.THORNS) == 2

    def test_unknown_status_does_nothing(self, resolver, a, b):
        resolver.apply_actions([StatusAction(target=SELF, status=None)], a, b)
        assert a.statuses.entries == {}


class TestHandAndDeck:
    """Draw, discard, reveal, steal."""

    def test_draw_consumes_block_first(self, resolver, a, b):
        """A draw-block charge swallows one iteration."""
        a.deck = deque(["X", "Y", "Z"])
        a.draw_block_count = 1
        resolver.apply_actions([DrawAction(target=SELF, count=2)], a, b)
        assert a.hand == ["X"]
        assert a.draw_block_count == 0

    def test_draw_stops_at_hand_limit(self, resolver, a, b):
        a.deck = deque(["X", "Y", "Z"])
        a.max_hand_size = 1
        resolver.apply_actions([DrawAction(target=SELF, count=3)], a, b)
        assert a.hand == ["X"]
        assert len(a.hand) <= a.max_hand_size

    def test_draw_stops_on_empty_deck(self, resolver, a, b):
        a.deck = deque(["X"])
        resolver.apply_actions([DrawAction(target=SELF, count=3)], a, b)
        assert a.hand == ["X"]

    def test_draw_both(self, resolver, a, b):
        a.deck = deque(["X"])
        b.deck = deque(["Y"])
        resolver.apply_actions([DrawAction(target=Target.BOTH, count=1)], a, b)
        assert a.hand == ["X"]
        assert b.hand == ["Y"]

    def test_discard_random(self, resolver, a, b):
        a.hand = ["p", "q", "r"]
        resolver.apply_actions([DiscardRandomAction(target=SELF, count=2)], a, b)
        assert len(a.hand) == 1
        assert sorted(a.hand + a.discard) == ["p", "q", "r"]

    def test_discard_random_more_than_hand(self, resolver, a, b):
        a.hand = ["p", "q"]
        resolver.apply_actions([DiscardRandomAction(target=SELF, count=5)], a, b)
        assert a.hand == []
        assert sorted(a.discard) == ["p", "q"]

    def test_discard_hand(self, resolver, a, b):
        b.hand = ["p", "q"]
        resolver.apply_actions([DiscardHandAction(target=OPP)], a, b)
        assert b.hand == []
        assert b.discard == ["p", "q"]

    def test_reveal_random(self, state, resolver, a, b):
        """Reveals are recorded per side and never move cards."""
        b.hand = ["p", "q"]
        resolver.apply_actions([RevealRandomAction(target=OPP, count=3)], a, b)
        assert b.hand == ["p", "q"]
        assert len(state.revealed[1]) == 2
        assert all(c in ("p", "q") for c in state.revealed[1])
        assert state.revealed[0] == []

    def test_steal_random_from_hand(self, resolver, a, b):
        b.hand = ["p", "q"]
        resolver.apply_actions([StealRandomFromHandAction(source=OPP, count=1)], a, b)
        assert len(a.hand) == 1
        assert len(b.hand) == 1
        assert sorted(a.hand + b.hand) == ["p", "q"]

    def test_steal_from_empty_hand(self, resolver, a, b):
        resolver.apply_actions([StealRandomFromHandAction(source=OPP, count=2)], a, b)
        assert a.hand == []

    def test_modify_max_hand_size_floors_at_zero(self, resolver, a, b):
        resolver.apply_actions([ModifyMaxHandSizeAction(target=SELF, delta=-10)], a, b)
        assert a.max_hand_size == 0
        resolver.apply_actions([ModifyMaxHandSizeAction(target=SELF, delta=2)], a, b)
        assert a.max_hand_size == 2

    def test_steal_stops_when_hand_full(self, resolver, a, b):
        a.max_hand_size = 2
        a.hand = ["x"]
        b.hand = ["p", "q", "r"]
        resolver.apply_actions([StealRandomFromHandAction(source=OPP, count=3)], a, b)
        assert len(a.hand) == 2
        assert len(b.hand) == 2
        assert sorted(a.hand + b.hand) == ["p", "q", "r", "x"]

    def test_shrinking_max_discards_excess(self, resolver, a, b):
        a.max_hand_size = 4
        a.hand = ["h1", "h2", "h3", "h4"]
        resolver.apply_actions([ModifyMaxHandSizeAction(target=SELF, delta=-2)], a, b)
        assert a.max_hand_size == 2
        assert len(a.hand) == 2
        assert sorted(a.hand + a.discard) == ["h1", "h2", "h3", "h4"]

    def test_growing_max_keeps_hand(self, resolver, a, b):
        a.max_hand_size = 2
        a.hand = ["h1", "h2"]
        resolver.apply_actions([ModifyMaxHandSizeAction(target=SELF, delta=1)], a, b)
        assert a.hand == ["h1", "h2"]
        assert a.discard == []


class TestTableau:
    """Tableau destruction, theft and the win condition."""

    def test_destroy_random(self, resolver, a, b):
        b.tableau = ["t1", "t2"]
        resolver.apply_actions([DestroyRandomInTableauAction(target=OPP, count=1)], a, b)
        assert len(b.tableau) == 1
        assert len(b.discard) == 1

    def test_steal_from_tableau(self, state, resolver, a, b):
        b.tableau = ["s"]
        resolver.apply_actions([StealFromTableauAndPlayAction()], a, b)
        assert a.tableau == ["s"]
        assert b.tableau == []
        assert "Stole and played: s" in state.history

    def test_steal_empty_tableau_push_negative(self, state, resolver, a, b):
        resolver.apply_actions([
            StealFromTableauAndPlayAction(on_empty=OnEmpty.PUSH_NEGATIVE, fallback_amount=-1),
        ], a, b)
        assert state.momentum == -1

    def test_steal_empty_tableau_noop(self, state, resolver, a, b):
        resolver.apply_actions([StealFromTableauAndPlayAction(on_empty=OnEmpty.NOOP)], a, b)
        assert state.momentum == 0
        assert "Steal failed, no effect" in state.history

    def test_win_condition_met(self, state, resolver, a, b):
        a.tableau = ["W", "X", "W", "W"]
        resolver.apply_actions([WinIfConditionAction(copies_equal=3)], a, b)
        assert state.momentum == 5
        assert state.winner_index() == 0

    def test_win_condition_for_side_b(self, state, resolver, a, b):
        b.tableau = ["W", "W"]
        resolver.apply_actions([WinIfConditionAction(copies_equal=2)], b, a)
        assert state.winner_index() == 1

    def test_win_condition_not_met(self, state, resolver, a, b):
        a.tableau = ["W", "X"]
        resolver.apply_actions([WinIfConditionAction(copies_equal=3)], a, b)
        assert state.momentum == 0

    def test_win_condition_empty_tableau(self, state, resolver, a, b):
        resolver.apply_actions([WinIfConditionAction(copies_equal=0)], a, b)
        assert state.momentum == 0


class TestCopyLastEffect:
    """copy_last_card_effect."""

    def test_copy_replays_previous_batch(self, state, resolver, a, b):
        """Damage 2, then copy twice: 2 + 2 + 2 clamps to 5."""
        resolver.apply_actions([DamageAction(target=OPP, amount=2)], a, b)
        resolver.apply_actions([CopyLastEffectAction(times=2)], a, b)
        assert state.momentum == 5

    def test_copy_uses_own_cache_only(self, state, resolver, a, b):
        resolver.apply_actions([PushAction(target=SELF, amount=1)], b, a)
        resolver.apply_actions([CopyLastEffectAction(times=1)], a, b)
        assert state.momentum == -1

    def test_nested_copy_terminates(self, state, resolver, a, b):
        """Copies inside the cached batch are skipped."""
        state.last_actions[0] = (CopyLastEffectAction(times=3), PushAction(target=SELF, amount=1))
        resolver.apply_actions([CopyLastEffectAction(times=2)], a, b)
        assert state.momentum == 2

    def test_copy_of_copy_only_batch(self, state, resolver, a, b):
        state.last_actions[0] = (CopyLastEffectAction(times=1),)
        resolver.apply_actions([CopyLastEffectAction(times=5)], a, b)
        assert state.momentum == 0

    def test_copy_with_nothing_cached(self, state, resolver, a, b):
        resolver.apply_actions([CopyLastEffectAction(times=2)], a, b)
        assert state.momentum == 0

    def test_batch_is_cached_once(self, state, resolver, a, b):
        batch = [PushAction(target=SELF, amount=1), NoopAction()]
        resolver.apply_actions(batch, a, b)
        assert state.last_actions[0] == tuple(batch)
        assert state.last_actions[1] == ()


class TestCountersAndFlags:
    """Single-field mutations."""

    def test_flags(self, resolver, a, b):
        resolver.apply_actions([
            SkipNextTurnAction(target=OPP),
            BlockNextDrawAction(target=OPP, count=2),
            GrantExtraFaceDownPlayAction(target=SELF, count=1),
            GrantExtraTurnsAction(target=SELF, count=2),
        ], a, b)
        assert b.skip_next_turn
        assert b.draw_block_count == 2
        assert a.extra_face_down_plays == 1
        assert a.extra_turns == 2

    def test_conditional_push(self, state, resolver, a, b):
        b.hand = ["x"]
        resolver.apply_actions([ConditionalPushIfOpponentHandEmptyAction(amount=2)], a, b)
        assert state.momentum == 0
        b.hand = []
        resolver.apply_actions([ConditionalPushIfOpponentHandEmptyAction(amount=2)], a, b)
        assert state.momentum == 2

    def test_history_only_kinds(self, state, resolver, a, b):
        resolver.apply_actions([SetToFullAction(), LoseIfConditionWhenBlockedAction()], a, b)
        assert state.momentum == 0
        assert "Lose condition when blocked check" in state.history

    def test_unknown_kind_is_ignored(self, state, resolver, a, b):
        """Unknown kinds are logged, not raised, and leave no feedback."""
        resolver.apply_actions([UnknownAction(raw_type="summon_intern")], a, b)
        assert state.momentum == 0
        assert "Unknown action: summon_intern" in state.history
        assert len(state.feedback) == 0


class TestFeedback:
    """Effect feedback records."""

    def test_record_fields(self, state, resolver, a, b):
        state.clock = lambda: 123.0
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b, card_name="Quick Memo")
        entry = state.feedback[-1]
        assert entry.player_name == "Player A"
        assert entry.card_name == "Quick Memo"
        assert entry.description.startswith("push")
        assert entry.momentum_delta == 2
        assert entry.timestamp == 123.0

    def test_copied_actions_credit_copying_card(self, state, resolver, a, b):
        resolver.apply_actions([DamageAction(target=OPP, amount=1)], a, b, card_name="Hit")
        resolver.apply_actions([CopyLastEffectAction(times=1)], a, b, card_name="Mirror Memo")
        assert [e.card_name for e in list(state.feedback)[-2:]] == ["Mirror Memo", "Mirror Memo"]

    def test_name_does_not_leak_into_next_batch(self, state, resolver, a, b):
        resolver.apply_actions([NoopAction()], a, b, card_name="Quick Memo")
        resolver.apply_actions([NoopAction()], a, b)
        assert state.feedback[-1].card_name == "Effect"

    def test_momentum_delta_since_previous_entry(self, state, resolver, a, b):
        resolver.apply_actions([PushAction(target=SELF, amount=2)], a, b)
        resolver.apply_actions([PushAction(target=SELF, amount=1)], b, a)
        assert [f.momentum_delta for f in state.feedback] == [2, -1]

    def test_capacity_evicts_oldest(self, state, resolver, a, b):
        resolver.apply_actions([PushAction(target=SELF, amount=1)], a, b)
        resolver.apply_actions([NoopAction()] * 12, a, b)
        assert len(state.feedback) == 10
        assert all(f.description == "noop" for f in state.feedback)
