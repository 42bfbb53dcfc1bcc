"""
Tests for effect resolution.

Tests:
- Hit damage with strength, weakness and shields
- One-shot effects (healing, energy, draw)
- Timed effects, their countdown and expiry
- Malformed input never raising
"""

import pytest

from ..catalog.effect_dsl import (
    EffectType,
    Side,
    TriggerTiming,
    burn,
    damage,
    discard,
    draw,
    energy,
    healing,
    poison,
    regeneration,
    shield,
    strength,
    weakness,
)
from ..engine_core.effect_engine import compute_hit_damage
from ..engine_core.presentation import EventKind
from .conftest import make_battle


class TestComputeHitDamage:
    """Tests for the single-hit damage formula."""

    def test_plain_hit(self):
        """Without modifiers a hit deals its base value."""
        assert compute_hit_damage(6, 0, []) == 6

    def test_strength_adds_flat_damage(self):
        """Strength is added before weakness applies."""
        assert compute_hit_damage(6, 2, []) == 8

    def test_weakness_rounds_down(self):
        """A 25% weakness turns 10 into 7."""
        assert compute_hit_damage(10, 0, [0.25]) == 7

    def test_minimum_one_damage(self):
        """A positive hit never drops below 1."""
        assert compute_hit_damage(1, 0, [0.5]) == 1

    def test_zero_base(self):
        """Zero base deals nothing."""
        assert compute_hit_damage(0, 5, []) == 0


class TestDamage:
    """Tests for the damage handler."""

    def test_attack_reduces_enemy_health(self, effect_engine, battle):
        """A 6 damage attack takes a 30 health goblin to 24."""
        result = effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        assert result.success
        assert battle.enemy.health == 24
        assert result.details["damage"] == 6
        assert battle.stats.damage_dealt == 6

    def test_multi_hit(self, effect_engine, battle):
        """Every hit of a multi-hit effect lands."""
        result = effect_engine.apply_effect(battle, damage(4, times=3), Side.ENEMY)

        assert battle.enemy.health == 18
        assert result.details["hits"] == 3

    def test_multi_hit_stops_at_death(self, effect_engine, catalog):
        """No hits land after the defender dies."""
        battle = make_battle(catalog, enemy_health=5)

        result = effect_engine.apply_effect(battle, damage(4, times=3), Side.ENEMY)

        assert result.details["hits"] == 2
        assert result.details["damage"] == 5
        assert battle.is_game_over

    def test_lethal_attack_wins(self, effect_engine, catalog):
        """Killing the enemy ends the battle in victory."""
        battle = make_battle(catalog, enemy_health=6)

        effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        assert battle.enemy.health == 0
        assert battle.is_game_over
        assert battle.is_victory

    def test_no_effects_after_game_over(self, effect_engine, catalog):
        """Effects fail once the battle is over."""
        battle = make_battle(catalog, enemy_health=6)
        effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        result = effect_engine.apply_effect(battle, healing(5), Side.PLAYER)

        assert not result.success
        assert result.message == "Battle is over"

    def test_strength_of_source_counts(self, effect_engine, battle):
        """The attacker's strength raises each hit."""
        effect_engine.apply_effect(battle, strength(2), Side.PLAYER)

        effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        assert battle.enemy.health == 22

    def test_weakness_of_source_counts(self, effect_engine, battle):
        """A weakened enemy deals 25% less."""
        effect_engine.apply_effect(battle, weakness(0.25, 2), Side.ENEMY)

        effect_engine.apply_effect(battle, damage(10), Side.PLAYER, source=Side.ENEMY)

        assert battle.player.health == 43
        assert battle.stats.damage_taken == 7

    def test_shield_blocks_damage(self, effect_engine, battle):
        """Shields subtract from each hit."""
        effect_engine.apply_effect(battle, shield(5), Side.ENEMY, Side.ENEMY)

        effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        assert battle.enemy.health == 29
        dealt = effect_engine.events.peek()[-1]
        assert dealt.kind == EventKind.DAMAGE_DEALT
        assert dealt.data["blocked"] == 5

    def test_shields_stack(self, effect_engine, battle):
        """Two shields block their sum and damage never heals."""
        effect_engine.apply_effect(battle, shield(5), Side.ENEMY, Side.ENEMY)
        effect_engine.apply_effect(battle, shield(3), Side.ENEMY, Side.ENEMY)

        effect_engine.apply_effect(battle, damage(6), Side.ENEMY)

        assert battle.enemy.shield_total == 8
        assert battle.enemy.health == 30


class TestOneShotEffects:
    """Tests for healing, energy and draw."""

    def test_healing_clamps_to_max(self, effect_engine, catalog):
        """Healing never exceeds max health."""
        battle = make_battle(catalog, player_health=40)

        result = effect_engine.apply_effect(battle, healing(20), Side.PLAYER)

        assert battle.player.health == 50
        assert result.details["healing"] == 10
        assert battle.stats.healing == 10

    def test_energy_clamps_to_max(self, effect_engine, catalog):
        """Energy never exceeds max mana."""
        battle = make_battle(catalog, mana=1)

        result = effect_engine.apply_effect(battle, energy(5), Side.PLAYER)

        assert battle.player.mana == 3
        assert result.details["mana"] == 2

    def test_dexterity_raises_shield(self, effect_engine, battle):
        """Dexterity is added to gained shields."""
        effect_engine.apply_effect(battle, {"type": "dexterity", "value": 2}, Side.PLAYER)

        effect_engine.apply_effect(battle, shield(8), Side.PLAYER)

        assert battle.player.shield_total == 10

    def test_draw_respects_hand_limit(self, effect_engine, battle):
        """A draw effect only fills the hand up to the limit."""
        battle.deck.hand = ["defense_basic"] * 9
        battle.deck.draw_pile = ["attack_basic"] * 3

        result = effect_engine.apply_effect(battle, draw(2), Side.PLAYER)

        assert len(result.details["cards"]) == 1
        assert len(battle.deck.hand) == 10
        assert len(battle.deck.draw_pile) == 2

    def test_discard_drops_random_cards(self, effect_engine, battle):
        """A discard effect moves cards from the hand to the discard pile."""
        battle.deck.hand = ["attack_basic", "defense_basic", "skill_draw"]

        result = effect_engine.apply_effect(battle, discard(2), Side.PLAYER, Side.ENEMY)

        discarded = result.details["cards"]
        assert result.success
        assert len(discarded) == 2
        assert len(battle.deck.hand) == 1
        assert battle.deck.discard_pile[-2:] == discarded
        assert sorted(battle.deck.hand + discarded) == ["attack_basic", "defense_basic", "skill_draw"]


class TestTimedEffects:
    """Tests for active effects and their upkeep."""

    def test_poison_ticks_then_expires(self, effect_engine, battle):
        """Poison 3 for 2 turns hurts twice, then wears off."""
        effect_engine.apply_effect(battle, poison(3, 2), Side.PLAYER, Side.ENEMY)
        battle.is_player_turn = True

        effect_engine.process_turn_start_effects(battle)
        assert battle.player.health == 47
        effect_engine.process_turn_end_effects(battle)
        assert battle.player.has_effect(EffectType.POISON)

        effect_engine.process_turn_start_effects(battle)
        assert battle.player.health == 44
        upkeep = effect_engine.process_turn_end_effects(battle)
        assert [e.effect_type for e in upkeep.expired] == [EffectType.POISON]
        assert not battle.player.has_effect(EffectType.POISON)

        effect_engine.process_turn_start_effects(battle)
        assert battle.player.health == 44
        assert battle.stats.damage_taken == 6

    def test_poison_ignores_shields(self, effect_engine, battle):
        """Damage over time goes straight to health."""
        effect_engine.apply_effect(battle, poison(3, 2), Side.PLAYER, Side.ENEMY)
        effect_engine.apply_effect(battle, shield(10), Side.PLAYER)
        battle.is_player_turn = True

        effect_engine.process_turn_start_effects(battle)

        assert battle.player.health == 47

    def test_effect_gained_on_own_turn_skips_first_countdown(self, effect_engine, battle):
        """An effect placed during its holder's turn survives that turn's end."""
        battle.is_player_turn = True
        effect_engine.apply_effect(battle, strength(2, duration=1), Side.PLAYER)
        assert battle.player.attributes.strength == 2

        effect_engine.process_turn_end_effects(battle)
        assert battle.player.attributes.strength == 2

        effect_engine.process_turn_end_effects(battle)
        assert battle.player.attributes.strength == 0
        assert not battle.player.has_effect(EffectType.STRENGTH)

    def test_permanent_effect_never_expires(self, effect_engine, battle):
        """Permanent attributes survive any number of turns."""
        battle.is_player_turn = True
        result = effect_engine.apply_effect(battle, strength(3, permanent=True), Side.PLAYER)

        for _ in range(5):
            effect_engine.process_turn_end_effects(battle)

        assert battle.player.attributes.strength == 3
        active = battle.player.effects_of(EffectType.STRENGTH)[0]
        assert active.effect_id == result.details["effect_id"]
        assert active.trigger_timing == TriggerTiming.PERMANENT
        assert active.to_dict()["duration"] == -1

    def test_poison_can_kill(self, effect_engine, catalog):
        """A lethal tick ends the battle."""
        battle = make_battle(catalog, player_health=2)
        effect_engine.apply_effect(battle, poison(3, 2), Side.PLAYER, Side.ENEMY)
        battle.is_player_turn = True

        effect_engine.process_turn_start_effects(battle)

        assert battle.is_game_over
        assert not battle.is_victory

    def test_burn_ticks_on_holder_turn_start(self, effect_engine, battle, events):
        """Burn on the enemy hurts it when its turn starts."""
        effect_engine.apply_effect(battle, burn(2, 2), Side.ENEMY)

        upkeep = effect_engine.process_turn_start_effects(battle)

        assert battle.enemy.health == 28
        assert battle.stats.damage_dealt == 2
        assert [(e.effect_type, amount) for e, amount in upkeep.ticks] == [(EffectType.BURN, 2)]
        assert EventKind.EFFECT_TRIGGERED in events.hooks.kinds()

    def test_regeneration_heals_holder(self, effect_engine, catalog):
        """Regeneration heals at turn start and counts as healing."""
        battle = make_battle(catalog, player_health=40)
        effect_engine.apply_effect(battle, regeneration(2, 3), Side.PLAYER)
        battle.is_player_turn = True

        effect_engine.process_turn_start_effects(battle)

        assert battle.player.health == 42
        assert battle.stats.healing == 2

    def test_thorns_is_recorded_but_inert(self, effect_engine, battle):
        """Thorns reflects nothing and never ticks."""
        effect_engine.apply_effect(battle, {"type": "thorns", "value": 3}, Side.PLAYER)
        thorns = battle.player.effects_of(EffectType.THORNS)
        assert len(thorns) == 1
        assert thorns[0].trigger_timing == TriggerTiming.INSTANT

        effect_engine.apply_effect(battle, damage(6), Side.PLAYER, Side.ENEMY)
        battle.is_player_turn = True
        upkeep = effect_engine.process_turn_start_effects(battle)

        assert battle.player.health == 44
        assert battle.enemy.health == 30
        assert upkeep.ticks == []

    def test_vitality_raises_then_restores_max_health(self, effect_engine, battle):
        """Vitality lifts max health while active; health is clamped when it ends."""
        battle.is_player_turn = True
        effect_engine.apply_effect(battle, {"type": "vitality", "value": 5, "duration": 1}, Side.PLAYER)

        assert battle.player.max_health == 55
        assert battle.player.health == 55
        assert battle.player.attributes.vitality == 5

        effect_engine.process_turn_end_effects(battle)
        upkeep = effect_engine.process_turn_end_effects(battle)

        assert [e.effect_type for e in upkeep.expired] == [EffectType.VITALITY]
        assert battle.player.max_health == 50
        assert battle.player.health == 50
        assert battle.player.attributes.vitality == 0

    def test_add_active_effect_requires_duration(self, effect_engine, battle):
        """A missing duration adds nothing."""
        result = effect_engine.add_active_effect(battle, strength(2), Side.PLAYER, None)

        assert result is None
        assert battle.player.status_effects == []


class TestMalformedEffects:
    """Tests for input the engine must reject without raising."""

    def test_missing_effect(self, effect_engine, battle):
        """No effect is a failed result."""
        result = effect_engine.apply_effect(battle, None, Side.ENEMY)

        assert not result.success
        assert result.message.startswith("Malformed effect")

    def test_unknown_effect_type(self, effect_engine, battle):
        """An unknown type in a descriptor is a failed result."""
        result = effect_engine.apply_effect(battle, {"type": "bogus", "value": 3}, Side.ENEMY)

        assert not result.success
        assert battle.enemy.health == 30

    def test_non_numeric_hit_count(self, effect_engine, battle):
        """A descriptor with times set to null is a failed result."""
        result = effect_engine.apply_effect(battle, {"type": "damage", "value": 5, "times": None}, Side.ENEMY)

        assert not result.success
        assert result.message.startswith("Malformed effect")
        assert battle.enemy.health == 30

    @pytest.mark.parametrize("effect", ["damage", 7, ["damage", 5]])
    def test_effect_of_wrong_type(self, effect_engine, battle, effect):
        """Anything other than a descriptor or its JSON shape is rejected."""
        result = effect_engine.apply_effect(battle, effect, Side.ENEMY)

        assert not result.success
        assert result.message.startswith("Malformed effect")
        assert battle.enemy.health == 30

    def test_dict_descriptor(self, effect_engine, battle):
        """JSON-shaped descriptors are accepted."""
        result = effect_engine.apply_effect(battle, {"type": "damage", "value": 3}, "enemy")

        assert result.success
        assert battle.enemy.health == 27

    def test_handler_fault_is_reported(self, effect_engine, battle):
        """An exception inside a handler comes back as a failure."""
        def broken(*args):
            raise RuntimeError("boom")

        effect_engine._handlers[EffectType.HEALING] = broken

        result = effect_engine.apply_effect(battle, healing(5), Side.PLAYER)

        assert not result.success
        assert "boom" in result.message

    @pytest.mark.parametrize("target", ["nobody", "", "PLAYER"])
    def test_bad_target(self, effect_engine, battle, target):
        """Targets must name a side."""
        result = effect_engine.apply_effect(battle, damage(3), target)

        assert not result.success
