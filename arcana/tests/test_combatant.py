"""
Tests for combatant state: health, mana, attributes and leveling.
"""

import pytest

from ..catalog.definitions import EnemyType
from ..catalog.effect_dsl import EffectType, Side
from ..engine_core.combatant import Combatant, EnemyState, PlayerState
from ..engine_core.state import PERMANENT, ActiveEffect, Turns, make_duration


def make_player(health=50, mana=3):
    return PlayerState(name="Hero", health=health, max_health=50, mana=mana, max_mana=3)


def make_effect(effect_type, value, duration=None, effect_id=None):
    return ActiveEffect(
        effect_id=effect_id or f"{effect_type.value}_test",
        effect_type=effect_type,
        value=value,
        duration=duration or Turns(1),
        target=Side.PLAYER,
    )


class TestSides:
    """Tests for the side each combatant reports."""

    def test_base_class_is_abstract(self):
        """A combatant must say which side it is on."""
        with pytest.raises(TypeError):
            Combatant(name="Nobody", health=1, max_health=1)

    def test_sides(self, catalog):
        assert make_player().side is Side.PLAYER
        assert EnemyState.from_definition(catalog.get_enemy("goblin")).side is Side.ENEMY


class TestHealth:
    """Tests for damage and healing."""

    def test_take_damage_through_shields(self):
        """All shields subtract their full value."""
        player = make_player()
        player.add_status_effect(make_effect(EffectType.SHIELD, 3, effect_id="s1"))
        player.add_status_effect(make_effect(EffectType.SHIELD, 4, effect_id="s2"))

        lost = player.take_damage(10)

        assert lost == 3
        assert player.health == 47
        assert player.shield_total == 7

    def test_health_never_negative(self):
        """Overkill stops at zero."""
        player = make_player(health=5)

        lost = player.take_damage(20)

        assert lost == 5
        assert player.health == 0
        assert player.is_dead

    def test_dead_combatant_takes_nothing(self):
        """Damage and healing do nothing to the dead."""
        player = make_player(health=0)

        assert player.take_damage(5) == 0
        assert player.heal(5) == 0
        assert player.health == 0

    def test_heal_clamps(self):
        """Healing stops at max health."""
        player = make_player(health=45)

        assert player.heal(10) == 5
        assert player.health == 50

    def test_lose_health_ignores_shields(self):
        """Direct health loss bypasses shields."""
        player = make_player()
        player.add_status_effect(make_effect(EffectType.SHIELD, 10))

        assert player.lose_health(4) == 4
        assert player.health == 46


class TestMana:
    """Tests for spending and restoring mana."""

    def test_use_mana(self):
        """Spending within budget succeeds."""
        player = make_player(mana=3)

        assert player.use_mana(2)
        assert player.mana == 1

    def test_use_mana_is_all_or_nothing(self):
        """Nothing is spent when mana is short."""
        player = make_player(mana=1)

        assert not player.use_mana(2)
        assert player.mana == 1

    def test_restore_mana_clamps(self):
        """Mana never exceeds max mana."""
        player = make_player(mana=2)

        assert player.restore_mana(5) == 1
        assert player.mana == 3


class TestAttributes:
    """Tests for attribute effects mirrored onto attributes."""

    def test_attribute_follows_effect(self):
        """Adding and removing a strength effect moves the attribute."""
        player = make_player()
        player.add_status_effect(make_effect(EffectType.STRENGTH, 2, effect_id="str"))
        assert player.attributes.strength == 2

        removed = player.remove_status_effect("str")

        assert removed is not None
        assert player.attributes.strength == 0

    def test_vitality_raises_max_health(self):
        """Vitality changes max health while active."""
        player = make_player(health=40)
        player.add_status_effect(make_effect(EffectType.VITALITY, 5, effect_id="vit"))
        assert player.max_health == 55
        assert player.health == 45

        player.remove_status_effect("vit")

        assert player.max_health == 50
        assert player.health == 45

    def test_remove_unknown_effect(self):
        """Removing an absent id returns None."""
        assert make_player().remove_status_effect("nope") is None

    def test_turn_end_counts_down(self):
        """Timed effects expire on the turn end their duration runs out."""
        player = make_player()
        player.add_status_effect(make_effect(EffectType.STRENGTH, 1, Turns(2)))
        player.add_status_effect(make_effect(EffectType.DEXTERITY, 1, PERMANENT))

        assert player.on_turn_end().expired == []
        upkeep = player.on_turn_end()

        assert [e.effect_type for e in upkeep.expired] == [EffectType.STRENGTH]
        assert player.has_effect(EffectType.DEXTERITY)

    def test_reset_for_battle(self):
        """A reset clears effects and restores health and mana."""
        player = make_player(health=10, mana=0)
        player.add_status_effect(make_effect(EffectType.STRENGTH, 2))

        player.reset_for_battle()

        assert player.status_effects == []
        assert player.attributes.strength == 0
        assert player.health == 50
        assert player.mana == 3


class TestDurations:
    """Tests for duration helpers."""

    def test_make_duration(self):
        """-1 and the permanent flag both mean permanent."""
        assert make_duration(-1) is PERMANENT
        assert make_duration(3, permanent=True) is PERMANENT
        assert make_duration(2) == Turns(2)
        assert make_duration(None) == Turns(1)

    def test_turns_tick(self):
        """Turns count down to expiry."""
        assert Turns(1).tick().expired
        assert not Turns(2).tick().expired
        assert PERMANENT.tick() is PERMANENT


class TestLeveling:
    """Tests for experience and gold."""

    def test_single_level_up(self):
        """100 experience at level 1 reaches level 2."""
        player = make_player()

        gained = player.gain_experience(100)

        assert gained == 1
        assert player.level == 2
        assert player.experience == 0
        assert player.max_health == 60
        assert player.max_mana == 4

    def test_multiple_level_ups(self):
        """Overflowing experience carries through several levels."""
        player = make_player()

        gained = player.gain_experience(350)

        assert gained == 2
        assert player.level == 3
        assert player.experience == 50

    def test_gold(self):
        """Only positive gold is added."""
        player = make_player()

        assert player.gain_gold(50) == 50
        assert player.gain_gold(-5) == 0
        assert player.gold == 50


class TestEnemyState:
    """Tests for enemies built from definitions."""

    def test_from_definition(self, catalog):
        """An enemy starts at full health with its action table."""
        enemy = EnemyState.from_definition(catalog.get_enemy("goblin_king"))

        assert enemy.health == enemy.max_health == 120
        assert enemy.is_boss
        assert enemy.enemy_type == EnemyType.BOSS
        assert len(enemy.actions) == 4

    def test_attack_includes_strength(self, catalog):
        """Strength raises the enemy's attack."""
        enemy = EnemyState.from_definition(catalog.get_enemy("goblin"))
        enemy.add_status_effect(ActiveEffect(
            effect_id="str",
            effect_type=EffectType.STRENGTH,
            value=2,
            duration=Turns(2),
            target=Side.ENEMY,
        ))

        assert enemy.attack == 7
