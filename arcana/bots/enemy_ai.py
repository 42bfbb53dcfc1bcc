"""
Enemy AI - Picks and carries out the enemy's actions.

Each decision point the AI draws one action from the enemy's weighted
action table and turns it into an intent the player can see. Status
effects adjust the intent:
- strength adds to attack values
- weakness scales attack values by max(0.25, 1 - total weakness), rounding down
- stun replaces the whole intent with "stunned"

The intent is re-derived from the drawn action right before it is
carried out, so effects applied during the player's turn still count.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import math
import random

from ..catalog.definitions import EnemyAction, IntentType
from ..catalog.effect_dsl import EffectSpec, EffectType, Side
from ..config import BattleRules
from ..engine_core.combatant import EnemyState
from ..engine_core.effect_engine import EffectEngine, EffectResult
from ..engine_core.presentation import EventKind, EventQueue
from ..engine_core.state import BattleState, EnemyIntent

logger = logging.getLogger(__name__)

# Share of an attack that always gets through weakness
MIN_WEAKENED_DAMAGE = 0.25


def pick_weighted_action(actions: tuple[EnemyAction, ...] | list[EnemyAction], roll: float) -> EnemyAction:
    """
    Pick an action for a roll in [0, 1).

    Walks the table subtracting weights from roll * total weight; falls
    back to the first action if rounding leaves nothing selected.
    """
    remaining = roll * sum(action.weight for action in actions)
    for action in actions:
        remaining -= action.weight
        if remaining <= 0:
            return action
    return actions[0]


@dataclass
class EnemyAI:
    """
    Decision making and execution for the enemy side.

    Usage:
        ai = EnemyAI(effect_engine, rng=random.Random(3))
        ai.decide_next_action(battle)     # declares an intent
        ai.execute_action(battle)         # carries it out, declares the next
    """
    effect_engine: EffectEngine
    rules: BattleRules = field(default_factory=BattleRules)
    rng: random.Random = field(default_factory=random.Random)
    events: EventQueue = field(default_factory=EventQueue)

    def decide_next_action(self, battle: BattleState) -> EnemyIntent | None:
        """Draw the next action from the table and declare it as the intent."""
        enemy = battle.enemy
        if not enemy.actions:
            logger.warning("Enemy %s has no actions", enemy.enemy_id)
            enemy.planned_action = None
            enemy.current_intent = None
            return None

        enemy.planned_action = pick_weighted_action(enemy.actions, self.rng.random())
        intent = self.adjust_intent(enemy, enemy.planned_action)
        enemy.current_intent = intent
        self.events.emit(
            EventKind.INTENT_DECLARED,
            f"{enemy.name} intends to {intent.intent_type.value}",
            intent=intent.to_dict(),
        )
        return intent

    def adjust_intent(self, enemy: EnemyState, action: EnemyAction) -> EnemyIntent:
        """Apply the enemy's active effects to a raw action."""
        if enemy.has_effect(EffectType.STUN):
            return EnemyIntent.stunned()

        intent = EnemyIntent.from_action(action)
        if intent.intent_type.is_attack:
            value = action.value + enemy.effect_total(EffectType.STRENGTH)
            weakness = enemy.effect_total(EffectType.WEAKNESS)
            if weakness > 0:
                value = math.floor(value * max(MIN_WEAKENED_DAMAGE, 1 - weakness))
            intent.value = int(value)
        return intent

    def refresh_intent(self, battle: BattleState) -> EnemyIntent | None:
        """Re-derive the declared intent from the planned action."""
        enemy = battle.enemy
        if enemy.planned_action is None:
            return self.decide_next_action(battle)
        enemy.current_intent = self.adjust_intent(enemy, enemy.planned_action)
        return enemy.current_intent

    def execute_action(self, battle: BattleState) -> EffectResult:
        """
        Carry out the current intent, then declare the next one.

        All hits of a multi-attack land before this returns.
        """
        intent = self.refresh_intent(battle)
        if intent is None:
            return EffectResult.failure("Enemy has no action")

        handlers: dict[IntentType, Callable[[BattleState, EnemyIntent], EffectResult]] = {
            IntentType.ATTACK: self._execute_attack,
            IntentType.ATTACK_MULTI: self._execute_attack,
            IntentType.DEFEND: self._execute_defend,
            IntentType.BUFF: self._execute_buff,
            IntentType.DEBUFF: self._execute_debuff,
            IntentType.STUNNED: self._execute_stunned,
        }
        result = handlers[intent.intent_type](battle, intent)
        self.events.emit(
            EventKind.ENEMY_ACTION,
            result.message,
            delay_ms=self.rules.enemy_action_delay_ms,
            intent=intent.to_dict(),
        )
        logger.info("Enemy %s: %s", battle.enemy.enemy_id, result.message)

        if not battle.is_game_over:
            self.decide_next_action(battle)
        return result

    # =========================================================================
    # Intent handlers
    # =========================================================================

    def _execute_attack(self, battle: BattleState, intent: EnemyIntent) -> EffectResult:
        total = 0
        hits = 0
        times = intent.times if intent.intent_type == IntentType.ATTACK_MULTI else 1
        for hit in range(max(1, times)):
            if battle.is_game_over:
                break
            delay = self.rules.multi_hit_interval_ms if hit else 0
            total += self.effect_engine.deal_damage(
                battle, Side.PLAYER, int(intent.value), battle.enemy.enemy_id, delay
            )
            hits += 1
        return EffectResult.ok(f"{battle.enemy.name} attacks for {total}", damage=total, hits=hits)

    def _execute_defend(self, battle: BattleState, intent: EnemyIntent) -> EffectResult:
        return self.effect_engine.apply_effect(
            battle,
            EffectSpec(EffectType.SHIELD, value=intent.value),
            Side.ENEMY,
            Side.ENEMY,
            battle.enemy.enemy_id,
        )

    def _execute_buff(self, battle: BattleState, intent: EnemyIntent) -> EffectResult:
        return self._apply_intent_effect(battle, intent, Side.ENEMY)

    def _execute_debuff(self, battle: BattleState, intent: EnemyIntent) -> EffectResult:
        return self._apply_intent_effect(battle, intent, Side.PLAYER)

    def _execute_stunned(self, battle: BattleState, intent: EnemyIntent) -> EffectResult:
        return EffectResult.ok(f"{battle.enemy.name} is stunned")

    def _apply_intent_effect(self, battle: BattleState, intent: EnemyIntent, target: Side) -> EffectResult:
        if intent.effect is None:
            return EffectResult.failure(f"{intent.intent_type.value} intent names no effect")
        effect = EffectSpec(intent.effect, value=intent.value, duration=intent.duration)
        return self.effect_engine.apply_effect(battle, effect, target, Side.ENEMY, battle.enemy.enemy_id)
