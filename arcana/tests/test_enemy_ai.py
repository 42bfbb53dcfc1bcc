"""
Tests for enemy decision making and intent resolution.
"""

import random

import pytest

from ..bots.enemy_ai import EnemyAI, pick_weighted_action
from ..catalog.definitions import EnemyAction, IntentType
from ..catalog.effect_dsl import EffectType, Side, strength, stun, weakness
from ..engine_core.presentation import EventKind
from .conftest import make_battle


@pytest.fixture
def enemy_ai(effect_engine, events):
    return EnemyAI(effect_engine, rng=random.Random(3), events=events)


ATTACK = EnemyAction(IntentType.ATTACK, weight=70, value=5)
DEFEND = EnemyAction(IntentType.DEFEND, weight=30, value=5)


class TestPickWeightedAction:
    """Tests for the weighted draw."""

    @pytest.mark.parametrize("roll,expected", [
        (0.0, ATTACK),
        (0.5, ATTACK),
        (0.69, ATTACK),
        (0.71, DEFEND),
        (0.999, DEFEND),
    ])
    def test_roll_selects_by_weight(self, roll, expected):
        """Rolls below 70% pick the attack, the rest pick defend."""
        assert pick_weighted_action((ATTACK, DEFEND), roll) is expected

    def test_zero_weights_fall_back_to_first(self):
        """A table of zero weights still yields an action."""
        table = (EnemyAction(IntentType.ATTACK, weight=0, value=1), EnemyAction(IntentType.DEFEND, weight=0))

        assert pick_weighted_action(table, 0.5) is table[0]


class TestAdjustIntent:
    """Tests for status adjustments of the declared intent."""

    def test_weakness_reduces_attack(self, enemy_ai, effect_engine, battle):
        """A 25% weakness turns an attack of 10 into 7."""
        effect_engine.apply_effect(battle, weakness(0.25, 2), Side.ENEMY)

        intent = enemy_ai.adjust_intent(battle.enemy, EnemyAction(IntentType.ATTACK, 1, value=10))

        assert intent.value == 7

    def test_weakness_has_a_floor(self, enemy_ai, effect_engine, battle):
        """Stacked weakness never cuts an attack below a quarter."""
        effect_engine.apply_effect(battle, weakness(0.5, 2), Side.ENEMY)
        effect_engine.apply_effect(battle, weakness(0.5, 2), Side.ENEMY)

        intent = enemy_ai.adjust_intent(battle.enemy, EnemyAction(IntentType.ATTACK, 1, value=10))

        assert intent.value == 2

    def test_strength_adds_to_attack(self, enemy_ai, effect_engine, battle):
        """Enemy strength raises attack intents."""
        effect_engine.apply_effect(battle, strength(2), Side.ENEMY, Side.ENEMY)

        intent = enemy_ai.adjust_intent(battle.enemy, EnemyAction(IntentType.ATTACK, 1, value=10))

        assert intent.value == 12

    def test_non_attacks_are_not_adjusted(self, enemy_ai, effect_engine, battle):
        """Defend values ignore strength and weakness."""
        effect_engine.apply_effect(battle, strength(2), Side.ENEMY, Side.ENEMY)

        intent = enemy_ai.adjust_intent(battle.enemy, DEFEND)

        assert intent.intent_type == IntentType.DEFEND
        assert intent.value == 5

    def test_stun_replaces_intent(self, enemy_ai, effect_engine, battle):
        """A stunned enemy declares that it is stunned."""
        effect_engine.apply_effect(battle, stun(1), Side.ENEMY)

        intent = enemy_ai.adjust_intent(battle.enemy, ATTACK)

        assert intent.intent_type == IntentType.STUNNED


class TestDecide:
    """Tests for declaring the next action."""

    def test_decide_declares_intent(self, enemy_ai, battle, events):
        """Deciding stores the plan and announces the intent."""
        intent = enemy_ai.decide_next_action(battle)

        assert intent is not None
        assert battle.enemy.current_intent is intent
        assert battle.enemy.planned_action in battle.enemy.actions
        assert events.hooks.of_kind(EventKind.INTENT_DECLARED)

    def test_no_actions(self, enemy_ai, battle):
        """An enemy without actions has no intent."""
        battle.enemy.actions = ()

        assert enemy_ai.decide_next_action(battle) is None
        assert battle.enemy.current_intent is None

    def test_seeded_choices_repeat(self, effect_engine, catalog):
        """The same seed gives the same sequence of actions."""
        def sequence(seed):
            ai = EnemyAI(effect_engine, rng=random.Random(seed))
            battle = make_battle(catalog, enemy_id="goblin_king", enemy_health=120)
            return [ai.decide_next_action(battle).intent_type for _ in range(10)]

        assert sequence(11) == sequence(11)


class TestExecute:
    """Tests for carrying out intents."""

    def test_attack_hits_player(self, enemy_ai, battle):
        """An attack intent damages the player and declares the next intent."""
        battle.enemy.planned_action = battle.enemy.actions[0]

        result = enemy_ai.execute_action(battle)

        assert result.success
        assert battle.player.health == 45
        assert battle.stats.damage_taken == 5
        assert battle.enemy.current_intent is not None

    def test_multi_attack_hits_each_time(self, enemy_ai, battle, events):
        """All hits of a multi attack land before execute returns."""
        battle.enemy.planned_action = EnemyAction(IntentType.ATTACK_MULTI, weight=1, value=4, times=3)

        result = enemy_ai.execute_action(battle)

        assert battle.player.health == 38
        assert result.details["hits"] == 3
        hits = events.hooks.of_kind(EventKind.DAMAGE_DEALT)
        assert [e.delay_ms for e in hits] == [0, 300, 300]

    def test_lethal_multi_attack_stops(self, enemy_ai, catalog):
        """Hits stop once the player is dead."""
        battle = make_battle(catalog, player_health=6)
        battle.enemy.planned_action = EnemyAction(IntentType.ATTACK_MULTI, weight=1, value=4, times=3)

        result = enemy_ai.execute_action(battle)

        assert result.details["hits"] == 2
        assert battle.is_game_over
        assert not battle.is_victory

    def test_defend_gains_shield(self, enemy_ai, battle):
        """Defend shields the enemy."""
        battle.enemy.planned_action = battle.enemy.actions[1]

        enemy_ai.execute_action(battle)

        assert battle.enemy.shield_total == 5

    def test_debuff_hits_player(self, enemy_ai, catalog):
        """A debuff lands on the player."""
        battle = make_battle(catalog, enemy_id="spider", enemy_health=40)
        battle.enemy.planned_action = battle.enemy.actions[1]

        enemy_ai.execute_action(battle)

        poison = battle.player.effects_of(EffectType.POISON)
        assert len(poison) == 1
        assert poison[0].value == 3

    def test_buff_raises_enemy_strength(self, enemy_ai, catalog):
        """A buff lands on the enemy itself."""
        battle = make_battle(catalog, enemy_id="goblin_shaman", enemy_health=60)
        battle.enemy.planned_action = battle.enemy.actions[1]

        enemy_ai.execute_action(battle)

        assert battle.enemy.attributes.strength == 2

    def test_stunned_enemy_does_nothing(self, enemy_ai, effect_engine, battle):
        """A stunned enemy skips its action."""
        effect_engine.apply_effect(battle, stun(1), Side.ENEMY)
        battle.enemy.planned_action = battle.enemy.actions[0]

        result = enemy_ai.execute_action(battle)

        assert "stunned" in result.message
        assert battle.player.health == 50

    def test_intent_refreshed_before_acting(self, enemy_ai, effect_engine, battle):
        """Weakness applied after the intent was declared still counts."""
        battle.enemy.planned_action = EnemyAction(IntentType.ATTACK, weight=1, value=10)
        enemy_ai.refresh_intent(battle)
        effect_engine.apply_effect(battle, weakness(0.25, 2), Side.ENEMY)

        enemy_ai.execute_action(battle)

        assert battle.player.health == 43
