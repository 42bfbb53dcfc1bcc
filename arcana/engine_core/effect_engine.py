"""
Effect Engine - Applies typed effects to combatants and runs effect upkeep.

This module handles:
- One-shot effects (damage, shield, healing, draw, energy, discard)
- Attaching timed or permanent effects (attributes, debuffs, buffs)
- Turn-start and turn-end upkeep of the side whose turn it is

Every effect kind has exactly one handler; the handler map is checked
for completeness when the engine is built. Handlers never raise past
apply_effect: malformed input and internal faults come back as a
failed EffectResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, TYPE_CHECKING
import logging
import math

from ..catalog.definitions import CardDefinition
from ..catalog.effect_dsl import EffectSpec, EffectType, Side, TriggerTiming, default_timing
from ..config import BattleRules
from .combatant import Combatant, TurnUpkeep
from .presentation import EventKind, EventQueue
from .state import PERMANENT, ActiveEffect, BattleState, Duration, Turns, new_effect_id

if TYPE_CHECKING:
    from .deck import DeckEngine

logger = logging.getLogger(__name__)


@dataclass
class EffectResult:
    """Outcome of applying one effect."""
    success: bool
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **details: Any) -> EffectResult:
        return cls(success=True, message=message, details=details)

    @classmethod
    def failure(cls, message: str, **details: Any) -> EffectResult:
        return cls(success=False, message=message, details=details)


def compute_hit_damage(base: float, strength: float, weaknesses: list[float]) -> int:
    """
    Damage of a single hit.

    Strength adds flat damage, then each weakness multiplies by
    (1 - weakness) rounding down. A positive base always deals at least 1.
    """
    if base <= 0:
        return 0
    amount = int(base + strength)
    for weakness in weaknesses:
        amount = math.floor(amount * (1 - weakness))
    return max(1, amount)


@dataclass
class EffectEngine:
    """
    Resolves effect descriptors against a battle.

    The engine is stateless between calls; the battle state is passed
    into every operation.
    """
    deck_engine: DeckEngine | None = None
    rules: BattleRules = field(default_factory=BattleRules)
    events: EventQueue = field(default_factory=EventQueue)

    def __post_init__(self):
        self._handlers: dict[EffectType, Callable[..., EffectResult]] = {
            EffectType.DAMAGE: self._apply_damage,
            EffectType.SHIELD: self._apply_shield,
            EffectType.HEALING: self._apply_healing,
            EffectType.DRAW: self._apply_draw,
            EffectType.ENERGY: self._apply_energy,
            EffectType.DISCARD: self._apply_discard,
            EffectType.STRENGTH: self._apply_attribute,
            EffectType.DEXTERITY: self._apply_attribute,
            EffectType.VITALITY: self._apply_attribute,
            EffectType.INTELLIGENCE: self._apply_attribute,
            EffectType.WEAKNESS: self._apply_timed,
            EffectType.POISON: self._apply_timed,
            EffectType.BURN: self._apply_timed,
            EffectType.STUN: self._apply_timed,
            EffectType.THORNS: self._apply_timed,
            EffectType.REGENERATION: self._apply_timed,
        }
        missing = set(EffectType) - set(self._handlers)
        if missing:
            raise RuntimeError(
                f"No effect handler for: {sorted(kind.value for kind in missing)}"
            )

    # =========================================================================
    # Public operations
    # =========================================================================

    def apply_effect(
        self,
        battle: BattleState,
        effect: EffectSpec | dict[str, Any] | None,
        target: Side | str,
        source: Side | str = Side.PLAYER,
        source_label: str | None = None,
    ) -> EffectResult:
        """
        Apply one effect descriptor to `target`.

        `source` is the side the effect comes from; its strength and
        weakness shape damage. Returns a failed result instead of raising.
        """
        try:
            if not effect:
                return EffectResult.failure("Malformed effect: no effect given")
            if isinstance(effect, dict):
                effect = EffectSpec.from_dict(effect)
            if not isinstance(effect, EffectSpec):
                raise TypeError(f"expected an effect descriptor, got {type(effect).__name__}")
            target = Side(target)
            source = Side(source)
        except (ValueError, TypeError) as e:
            logger.warning("Malformed effect %r: %s", effect, e)
            return EffectResult.failure(f"Malformed effect: {e}")

        if battle.is_game_over:
            return EffectResult.failure("Battle is over")

        handler = self._handlers[effect.effect_type]
        try:
            result = handler(battle, effect, target, source, source_label)
        except Exception as e:
            logger.exception("Effect %s failed", effect.effect_type.value)
            return EffectResult.failure(f"Effect {effect.effect_type.value} failed: {e}")

        logger.debug("Applied %s to %s: %s", effect.effect_type.value, target.value, result.message)
        return result

    def apply_card_effect(self, battle: BattleState, card: CardDefinition) -> EffectResult:
        """Resolve a played card's effect on the card's target."""
        return self.apply_effect(battle, card.effect, card.target, Side.PLAYER, card.card_id)

    def add_active_effect(
        self,
        battle: BattleState,
        effect: EffectSpec | None,
        target: Side | None,
        duration: Duration | None,
        source: str | None = None,
        value: float | None = None,
        trigger_timing: TriggerTiming | None = None,
    ) -> ActiveEffect | None:
        """
        Attach an active effect to the target combatant.

        Returns None (and changes nothing) when the effect, target or
        duration is missing.
        """
        if effect is None or target is None or duration is None:
            logger.warning("Cannot add active effect: effect, target and duration are required")
            return None

        holder = battle.combatant(target)
        active = ActiveEffect(
            effect_id=new_effect_id(effect.effect_type),
            effect_type=effect.effect_type,
            value=value if value is not None else effect.value_or_default(),
            duration=duration,
            target=target,
            trigger_timing=trigger_timing or default_timing(effect.effect_type, duration.is_permanent),
            source=source,
            fresh=not battle.is_game_over and battle.turn_owner is target,
        )
        holder.add_status_effect(active)
        self.events.emit(
            EventKind.EFFECT_APPLIED,
            f"{holder.name} gains {active.effect_type.value}",
            effect=active.to_dict(),
        )
        return active

    def process_turn_start_effects(self, battle: BattleState) -> TurnUpkeep:
        """Fire the turn owner's turn-start effects."""
        owner = battle.combatant(battle.turn_owner)
        upkeep = owner.on_turn_start()
        self._report_upkeep(battle, owner, upkeep)
        return upkeep

    def process_turn_end_effects(self, battle: BattleState) -> TurnUpkeep:
        """Fire the turn owner's turn-end effects, count down and expire."""
        owner = battle.combatant(battle.turn_owner)
        upkeep = owner.on_turn_end()
        self._report_upkeep(battle, owner, upkeep)
        return upkeep

    def deal_damage(
        self,
        battle: BattleState,
        target: Side,
        amount: int,
        source: str | None = None,
        delay_ms: int = 0,
    ) -> int:
        """Hit `target` through its shields and end the battle if it dies."""
        defender = battle.combatant(target)
        actual = defender.take_damage(amount, source)
        if target is Side.ENEMY:
            battle.stats.damage_dealt += actual
        else:
            battle.stats.damage_taken += actual
        self.events.emit(
            EventKind.DAMAGE_DEALT,
            f"{defender.name} takes {actual} damage",
            delay_ms=delay_ms,
            target=target.value,
            amount=actual,
            blocked=max(0, amount - actual),
            source=source,
        )
        self._check_death(battle, defender)
        return actual

    # =========================================================================
    # Handlers
    # =========================================================================

    def _apply_damage(self, battle, effect, target, source, label) -> EffectResult:
        attacker = battle.combatant(source)
        defender = battle.combatant(target)
        base = effect.value_or_default(0)
        strength = attacker.effect_total(EffectType.STRENGTH)
        weaknesses = [e.value for e in attacker.effects_of(EffectType.WEAKNESS)]

        total = 0
        hits = 0
        for hit in range(max(1, effect.times)):
            if defender.is_dead:
                break
            amount = compute_hit_damage(base, strength, weaknesses)
            delay = self.rules.multi_hit_interval_ms if hit else 0
            total += self.deal_damage(battle, target, amount, label or source.value, delay)
            hits += 1

        return EffectResult.ok(f"Dealt {total} damage", damage=total, hits=hits)

    def _apply_shield(self, battle, effect, target, source, label) -> EffectResult:
        holder = battle.combatant(target)
        value = int(effect.value_or_default(0) + holder.effect_total(EffectType.DEXTERITY))
        active = self.add_active_effect(battle, effect, target, Turns(1), label, value=value)
        return EffectResult.ok(f"{holder.name} gains {value} shield", shield=value, effect_id=active.effect_id)

    def _apply_healing(self, battle, effect, target, source, label) -> EffectResult:
        holder = battle.combatant(target)
        actual = holder.heal(int(effect.value_or_default(0)))
        if target is Side.PLAYER:
            battle.stats.healing += actual
        self.events.emit(EventKind.HEALED, f"{holder.name} heals {actual}", target=target.value, amount=actual)
        return EffectResult.ok(f"Healed {actual}", healing=actual)

    def _apply_draw(self, battle, effect, target, source, label) -> EffectResult:
        if not self.deck_engine:
            return EffectResult.failure("No deck to draw from")
        room = self.rules.hand_limit - len(battle.deck.hand)
        count = min(int(effect.value_or_default(1)), room)
        drawn = self.deck_engine.draw_cards(battle.deck, count)
        return EffectResult.ok(f"Drew {len(drawn)} card(s)", cards=drawn)

    def _apply_energy(self, battle, effect, target, source, label) -> EffectResult:
        holder = battle.combatant(target)
        restored = holder.restore_mana(int(effect.value_or_default(1)))
        self.events.emit(
            EventKind.MANA_RESTORED,
            f"{holder.name} gains {restored} mana",
            target=target.value,
            amount=restored,
        )
        return EffectResult.ok(f"Gained {restored} mana", mana=restored)

    def _apply_discard(self, battle, effect, target, source, label) -> EffectResult:
        if not self.deck_engine:
            return EffectResult.failure("No hand to discard from")
        discarded = self.deck_engine.discard_random(battle.deck, int(effect.value_or_default(1)))
        return EffectResult.ok(f"Discarded {len(discarded)} card(s)", cards=discarded)

    def _apply_attribute(self, battle, effect, target, source, label) -> EffectResult:
        if effect.permanent:
            duration: Duration = PERMANENT
        else:
            duration = Turns(effect.duration_or_default(3))
        active = self.add_active_effect(battle, effect, target, duration, label)
        return EffectResult.ok(
            f"{effect.effect_type.value} +{active.value}",
            effect_id=active.effect_id,
            value=active.value,
        )

    def _apply_timed(self, battle, effect, target, source, label) -> EffectResult:
        active = self.add_active_effect(battle, effect, target, Turns(effect.duration_or_default()), label)
        return EffectResult.ok(
            f"{effect.effect_type.value} ({active.value}) for {active.duration.to_raw()} turn(s)",
            effect_id=active.effect_id,
            value=active.value,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _report_upkeep(self, battle: BattleState, owner: Combatant, upkeep: TurnUpkeep):
        for effect, amount in upkeep.ticks:
            if effect.effect_type == EffectType.REGENERATION:
                if owner.side is Side.PLAYER:
                    battle.stats.healing += amount
            elif owner.side is Side.PLAYER:
                battle.stats.damage_taken += amount
            else:
                battle.stats.damage_dealt += amount
            self.events.emit(
                EventKind.EFFECT_TRIGGERED,
                f"{effect.effect_type.value} on {owner.name}: {amount}",
                effect=effect.to_dict(),
                amount=amount,
            )
        for effect in upkeep.expired:
            self.events.emit(
                EventKind.EFFECT_EXPIRED,
                f"{effect.effect_type.value} on {owner.name} wore off",
                effect=effect.to_dict(),
            )
        self._check_death(battle, owner)

    def _check_death(self, battle: BattleState, combatant: Combatant):
        if combatant.is_dead and battle.declare_defeat(combatant.side):
            logger.info(
                "%s died, battle %s is over (%s)",
                combatant.name,
                battle.battle_id,
                "victory" if battle.is_victory else "defeat",
            )
