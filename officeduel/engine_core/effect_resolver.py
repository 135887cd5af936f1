"""
Effect Resolver - Interprets card action batches against a match.

The resolver handles:
- Per-action targeting (self, opponent, both)
- Momentum changes in a fixed-side frame (push, damage, heal)
- Status interactions (shields, reflects, thorns)
- Random hand/tableau manipulation through the match generator
- Replaying the previous batch (copy_last_card_effect)

Each action kind maps to one handler. Handlers mutate the match in place
and return a short detail string that becomes the feedback description.
Nothing here raises for degenerate states: an empty hand, deck or
tableau just makes the action a no-op or triggers its fallback.
"""

from __future__ import annotations
import logging
from typing import Callable, Sequence

from ..card_schema.effect_dsl import (
    Action,
    ActionKind,
    CopyLastEffectAction,
    OnEmpty,
    StatusKind,
    Target,
)
from .state import MatchState, PlayerState, SIDE_A

logger = logging.getLogger(__name__)

Handler = Callable[[Action, PlayerState, PlayerState], str]


class EffectResolver:
    """
    Applies actions to a MatchState.

    The per-seat cache of last applied batches lives on the MatchState.
    The resolver only remembers the name of the card whose batch is
    running, so copied effects are credited to the copying card.
    """

    def __init__(self, state: MatchState):
        self.state = state
        self._card_name: str | None = None
        self._handlers: dict[ActionKind, Handler] = {
            ActionKind.PUSH: self._push,
            ActionKind.DAMAGE: self._damage,
            ActionKind.HEAL: self._heal,
            ActionKind.DRAW: self._draw,
            ActionKind.SKIP_NEXT_TURN: self._skip_next_turn,
            ActionKind.BLOCK_NEXT_DRAW: self._block_next_draw,
            ActionKind.DISCARD_RANDOM: self._discard_random,
            ActionKind.DISCARD_HAND: self._discard_hand,
            ActionKind.SET_TO_FULL: self._set_to_full,
            ActionKind.STATUS: self._status,
            ActionKind.REVEAL_RANDOM: self._reveal_random,
            ActionKind.STEAL_RANDOM_FROM_HAND: self._steal_random_from_hand,
            ActionKind.DESTROY_RANDOM_IN_TABLEAU: self._destroy_random_in_tableau,
            ActionKind.MODIFY_MAX_HAND_SIZE: self._modify_max_hand_size,
            ActionKind.GRANT_EXTRA_FACE_DOWN_PLAY: self._grant_extra_face_down_play,
            ActionKind.WIN_IF_CONDITION: self._win_if_condition,
            ActionKind.COPY_LAST_EFFECT: self._copy_last_effect,
            ActionKind.STEAL_FROM_TABLEAU_AND_PLAY: self._steal_from_tableau_and_play,
            ActionKind.CONDITIONAL_PUSH_IF_OPPONENT_HAND_EMPTY: self._conditional_push,
            ActionKind.FALLBACK_PUSH: self._fallback_push,
            ActionKind.LOSE_IF_CONDITION_WHEN_BLOCKED: self._lose_if_condition_when_blocked,
            ActionKind.GRANT_EXTRA_TURNS: self._grant_extra_turns,
            ActionKind.NOOP: self._noop,
        }

    def apply_actions(
        self,
        actions: Sequence[Action],
        source: PlayerState,
        opponent: PlayerState,
        card_name: str | None = None,
    ) -> None:
        """
        Apply a batch of actions on behalf of source.

        An action targeting "both" runs twice: once as source, once with
        the roles swapped. The whole batch is then remembered as source's
        last applied actions. Nested batches without a card_name inherit
        the enclosing one.
        """
        outer = self._card_name
        self._card_name = card_name or outer
        try:
            for action in actions:
                self._apply(action, source, opponent)
                if action.target is Target.BOTH:
                    self._apply(action, opponent, source)
        finally:
            self._card_name = outer
        self.state.last_actions[source.seat] = tuple(actions)

    def _apply(
        self,
        action: Action,
        actor: PlayerState,
        other: PlayerState,
    ) -> None:
        handler = self._handlers.get(action.kind)
        if handler is None:
            logger.warning("Ignoring unknown action type %r", action.type_name)
            self.state.log(f"Unknown action: {action.type_name}")
            return

        detail = handler(action, actor, other)
        logger.debug(
            "%s applied %s (%s); momentum=%d",
            actor.name, action.type_name, detail, self.state.momentum,
        )
        description = f"{action.type_name} {detail}" if detail else action.type_name
        self.state.add_feedback(actor.name, self._card_name or "Effect", description)

    @staticmethod
    def _target_of(target: Target, actor: PlayerState, other: PlayerState) -> PlayerState:
        return other if target is Target.OPPONENT else actor

    # -------------------------------------------------------------------------
    # Momentum
    # -------------------------------------------------------------------------

    def _push(self, action, actor, other) -> str:
        affected = self._target_of(action.target, actor, other)
        delta = action.amount if affected.seat == SIDE_A else -action.amount
        if delta == 0:
            return "0"

        # The side the push moves away from may block or bounce it
        victim = self.state.player_b if delta > 0 else self.state.player_a
        if victim.statuses.consume(StatusKind.SHIELD_NEXT_PUSH_AGAINST_YOU):
            self.state.log(f"Push {delta} blocked by {victim.name}")
            return f"{delta} blocked"
        if victim.statuses.consume(StatusKind.REFLECT_NEXT_PUSH):
            delta = -abs(delta) if actor.seat == SIDE_A else abs(delta)
            applied = self.state.add_momentum(delta)
            self.state.log(f"Push reflected by {victim.name}: {applied}")
            return f"{delta} reflected"

        applied = self.state.add_momentum(delta)
        self.state.log(f"Push {action.amount} by {actor.name} -> {applied}")
        return str(delta)

    def _damage(self, action, actor, other) -> str:
        return self._damage_player(self._target_of(action.target, actor, other), action.amount)

    def _damage_player(self, target: PlayerState, amount: int) -> str:
        ledger = target.statuses
        if ledger.consume(StatusKind.REFLECT_ALL_DAMAGE):
            self.state.log(f"{target.name} reflected {amount} damage")
            return "reflected, " + self._damage_player(self.state.other(target), amount)
        if ledger.consume(StatusKind.SHIELD):
            self.state.log("Shield absorbed damage")
            return f"{amount} absorbed by shield"

        detail = ""
        if ledger.has(StatusKind.THORNS):
            thorns = ledger.magnitude(StatusKind.THORNS)
            ledger.remove(StatusKind.THORNS)
            # counter-hit lands on the attacker's side
            self.state.add_momentum(-thorns if target.seat != SIDE_A else thorns)
            self.state.log(f"Thorns reflected: {thorns}")
            detail = f", thorns {thorns}"

        self.state.add_momentum(-amount if target.seat == SIDE_A else amount)
        self.state.log(f"Damage: {amount} (momentum: {self.state.momentum})")
        return f"{amount} to {target.name}{detail}"

    def _heal(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        self.state.add_momentum(action.amount if target.seat == SIDE_A else -action.amount)
        self.state.log(f"Heal: {action.amount} (momentum: {self.state.momentum})")
        return f"{action.amount} to {target.name}"

    def _conditional_push(self, action, actor, other) -> str:
        if other.hand:
            self.state.log("Conditional push skipped (opponent hand not empty)")
            return "skipped"
        self.state.add_momentum(action.amount)
        self.state.log(f"Conditional push {action.amount} (opponent hand empty)")
        return str(action.amount)

    def _fallback_push(self, action, actor, other) -> str:
        self.state.add_momentum(action.amount)
        self.state.log(f"Fallback push {action.amount}")
        return str(action.amount)

    # -------------------------------------------------------------------------
    # Hand, deck and tableau
    # -------------------------------------------------------------------------

    def _draw(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        drawn = 0
        for _ in range(action.count):
            if target.consume_draw_block():
                self.state.log("Draw blocked")
                continue
            if target.hand_full or not target.deck:
                break
            target.draw_one()
            drawn += 1
        return f"{drawn} for {target.name}"

    def _discard_random(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        discarded = 0
        while discarded < action.count and target.hand:
            index = self.state.rng.next_int(len(target.hand))
            target.discard.append(target.hand.pop(index))
            discarded += 1
        return f"{discarded} from {target.name}"

    def _discard_hand(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        count = len(target.hand)
        target.discard.extend(target.hand)
        target.hand.clear()
        return f"{count} from {target.name}"

    def _reveal_random(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        n = min(action.count, len(target.hand))
        self.state.log(f"Reveal {n} cards")
        for _ in range(n):
            card_id = target.hand[self.state.rng.next_int(len(target.hand))]
            self.state.revealed[target.seat].append(card_id)
            self.state.log(f"Revealed card: {card_id}")
        return f"{n} of {target.name}"

    def _steal_random_from_hand(self, action, actor, other) -> str:
        victim = self._target_of(action.source, actor, other)
        stolen = 0
        while stolen < action.count and victim.hand and not actor.hand_full:
            index = self.state.rng.next_int(len(victim.hand))
            actor.hand.append(victim.hand.pop(index))
            stolen += 1
        return f"{stolen} from {victim.name}"

    def _destroy_random_in_tableau(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        destroyed = 0
        while destroyed < action.count and target.tableau:
            index = self.state.rng.next_int(len(target.tableau))
            target.discard.append(target.tableau.pop(index))
            destroyed += 1
        return f"{destroyed} of {target.name}"

    def _steal_from_tableau_and_play(self, action, actor, other) -> str:
        if not other.tableau:
            if action.on_empty is OnEmpty.PUSH_NEGATIVE:
                self.state.add_momentum(action.fallback_amount)
                self.state.log(f"Steal failed, fallback push: {action.fallback_amount}")
                return f"failed, fallback {action.fallback_amount}"
            if action.on_empty is OnEmpty.NOOP:
                self.state.log("Steal failed, no effect")
            return "failed"

        index = self.state.rng.next_int(len(other.tableau))
        card_id = other.tableau.pop(index)
        actor.tableau.append(card_id)
        # TODO: resolve the stolen card's tier once the intended rule is settled
        self.state.log(f"Stole and played: {card_id}")
        return card_id

    # -------------------------------------------------------------------------
    # Player flags and counters
    # -------------------------------------------------------------------------

    def _skip_next_turn(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        target.skip_next_turn = True
        return target.name

    def _block_next_draw(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        target.draw_block_count += action.count
        return f"{action.count} for {target.name}"

    def _modify_max_hand_size(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        target.max_hand_size = max(0, target.max_hand_size + action.delta)
        while len(target.hand) > target.max_hand_size:
            index = self.state.rng.next_int(len(target.hand))
            card_id = target.hand.pop(index)
            target.discard.append(card_id)
            self.state.log(f"{target.name} discards {card_id} over the hand limit")
        return f"{action.delta} for {target.name}"

    def _grant_extra_face_down_play(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        target.extra_face_down_plays += action.count
        return f"{action.count} for {target.name}"

    def _grant_extra_turns(self, action, actor, other) -> str:
        target = self._target_of(action.target, actor, other)
        target.extra_turns += action.count
        self.state.log(f"Grant {action.count} extra turns")
        return f"{action.count} for {target.name}"

    def _status(self, action, actor, other) -> str:
        if action.status is None:
            return "unknown status"
        target = self._target_of(action.target, actor, other)
        target.statuses.apply(action.status, action.amount, action.duration)
        return f"{action.status.value} on {target.name}"

    def _set_to_full(self, action, actor, other) -> str:
        self.state.log("Set to full has no effect on momentum")
        return ""

    def _lose_if_condition_when_blocked(self, action, actor, other) -> str:
        self.state.log("Lose condition when blocked check")
        return ""

    def _noop(self, action, actor, other) -> str:
        return ""

    # -------------------------------------------------------------------------
    # Match-level effects
    # -------------------------------------------------------------------------

    def _win_if_condition(self, action, actor, other) -> str:
        if action.copies_equal is None or not actor.tableau:
            return "not met"
        last = actor.tableau[-1]
        if actor.tableau.count(last) != action.copies_equal:
            return "not met"
        threshold = self.state.win_threshold
        self.state.set_momentum(threshold if actor.seat == SIDE_A else -threshold)
        self.state.log(f"Win condition met by {actor.name} ({action.copies_equal} x {last})")
        return "met"

    def _copy_last_effect(self, action, actor, other) -> str:
        batch = tuple(
            a for a in self.state.last_actions[actor.seat]
            if not isinstance(a, CopyLastEffectAction)
        )
        if not batch:
            return "nothing to copy"
        for _ in range(action.times):
            self.apply_actions(batch, actor, other)
        return f"{len(batch)} action(s) x{action.times}"
